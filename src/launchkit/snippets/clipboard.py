"""
Clipboard access through external commands (pbpaste / pbcopy by default).

The snippet manager only needs two operations, described by the Clipboard
protocol, so tests can swap in an in-memory implementation.
"""

import subprocess
from typing import Protocol

import structlog

logger = structlog.get_logger()

_TIMEOUT = 10


class ClipboardError(Exception):
    """Raised when the clipboard cannot be read."""
    pass


class Clipboard(Protocol):
    def read(self) -> str: ...

    def write(self, text: str) -> bool: ...


class CommandClipboard:
    """Clipboard backed by a read command and a write command."""

    def __init__(
        self,
        read_command: list[str] | None = None,
        write_command: list[str] | None = None,
    ) -> None:
        self.read_command = read_command or ["pbpaste"]
        self.write_command = write_command or ["pbcopy"]
        self.log = logger.bind(component="clipboard")

    def read(self) -> str:
        """Return the clipboard text. Bytes that are not UTF-8 become U+FFFD.

        Raises:
            ClipboardError: If the command is missing, fails or times out.
        """
        try:
            result = subprocess.run(
                self.read_command,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                timeout=_TIMEOUT,
                check=True,
            )
        except (OSError, subprocess.SubprocessError) as e:
            self.log.debug("clipboard.read_failed", command=self.read_command, error=str(e))
            raise ClipboardError(str(e)) from e
        return result.stdout

    def write(self, text: str) -> bool:
        """Put ``text`` on the clipboard. Returns False on failure."""
        try:
            subprocess.run(
                self.write_command,
                input=text,
                encoding="utf-8",
                errors="replace",
                capture_output=True,
                timeout=_TIMEOUT,
                check=True,
            )
        except (OSError, subprocess.SubprocessError) as e:
            self.log.debug("clipboard.write_failed", command=self.write_command, error=str(e))
            return False
        return True
