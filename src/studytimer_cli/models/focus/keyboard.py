"""Non-blocking keyboard input for the interactive timer."""

import sys
from typing import Optional


class KeyboardHandler:
    """Reads single keypresses from a POSIX terminal in cbreak mode."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdin
        self.old_settings = None
        self._setup()

    def _setup(self):
        try:
            import termios
            import tty

            fd = self.stream.fileno()
            self.old_settings = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        except (ImportError, OSError, ValueError, AttributeError):
            # Not a terminal (pipe, test runner) or no termios on this platform
            self.old_settings = None

    def get_key(self) -> Optional[str]:
        """
        Get a single keypress without blocking.

        Returns the key character (letters lower-cased) or None if no key
        is waiting.
        """
        try:
            import select

            if select.select([self.stream], [], [], 0)[0]:
                key = self.stream.read(1)
                return key.lower() if key else None
            return None
        except (OSError, ValueError):
            return None

    def stop(self):
        """Restore terminal settings."""
        if self.old_settings is None:
            return
        try:
            import termios

            termios.tcsetattr(self.stream.fileno(), termios.TCSADRAIN, self.old_settings)
        except (ImportError, OSError, ValueError):
            pass
        self.old_settings = None
