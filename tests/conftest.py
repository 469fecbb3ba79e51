"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real config, data and log
directories.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from unittest.mock import patch

import pytest

from studytimer_cli.models.session import Session


# ---------------------------------------------------------------------------
# Directory isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path):
    """Point every platform directory at *tmp_path*.

    Also clears the cached ConfigService and the logger singleton so each
    test starts from a fresh state.
    """
    import studytimer_cli.utils.logger as logger_mod
    from studytimer_cli.services.config_service import get_config_service

    dirs = {
        "config": tmp_path / "config",
        "data": tmp_path / "data",
        "logs": tmp_path / "logs",
    }

    get_config_service.cache_clear()
    logger_mod._logger = None
    with patch(
        "studytimer_cli.services.config_service.user_config_dir",
        return_value=str(dirs["config"]),
    ):
        with patch(
            "studytimer_cli.services.config_service.user_data_dir",
            return_value=str(dirs["data"]),
        ):
            with patch(
                "studytimer_cli.utils.logger.user_log_dir",
                return_value=str(dirs["logs"]),
            ):
                yield dirs

    get_config_service.cache_clear()
    logger_mod._logger = None
    app_logger = logging.getLogger("studytimer_cli")
    for handler in app_logger.handlers[:]:
        handler.close()
        app_logger.removeHandler(handler)


@pytest.fixture()
def data_dir(isolated_dirs):
    """Data directory used by the default configuration."""
    return isolated_dirs["data"]


@pytest.fixture()
def tmp_config(isolated_dirs):
    """Provide a real ConfigService backed by the temporary directories."""
    from studytimer_cli.services.config_service import ConfigService

    svc = ConfigService()
    svc.load_config()
    return svc


# ---------------------------------------------------------------------------
# Session factory
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_session():
    """Factory for Session records stamped relative to now (local time)."""

    def _make(
        duration: int = 25,
        kind: str = "study",
        notes: str = "",
        when: datetime | None = None,
        days_ago: int = 0,
        session_id: str | None = None,
    ) -> Session:
        timestamp = (when or datetime.now().astimezone()) - timedelta(days=days_ago)
        return Session(
            id=session_id or str(int(timestamp.timestamp() * 1000)),
            timestamp=timestamp,
            duration=duration,
            notes=notes,
            kind=kind,
        )

    return _make
