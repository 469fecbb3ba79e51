"""Durable key-value storage for persisted records.

Each key is one small text file in the data directory, so the three records
(sessions, daily goal, theme flag) are read and written independently.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path

from studytimer_cli.exceptions import PersistenceReadError, PersistenceWriteError

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class FileKeyValueStorage:
    """Key-value records stored as ``<data_dir>/<key>.json`` files."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.data_dir / f"{key}.json"

    def get(self, key: str) -> str | None:
        """Return the raw text for *key*, or None if it was never written.

        Raises:
            PersistenceReadError: If the record exists but cannot be read
        """
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceReadError(f"Failed to read '{key}': {e}") from e

    def set(self, key: str, value: str) -> None:
        """Replace the record for *key*.

        The write goes to a temporary file first and is moved into place, so
        a failed write never leaves a truncated record behind.

        Raises:
            PersistenceWriteError: If the record cannot be written
        """
        path = self._path(key)
        tmp_name = None
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{key}.")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
            tmp_name = None
            path.chmod(0o600)
        except OSError as e:
            raise PersistenceWriteError(key, str(e)) from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

