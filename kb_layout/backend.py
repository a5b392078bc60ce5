"""Keyboard layout backend using setxkbmap.

The controller talks to a LayoutBackend: anything with query() and
apply(). SetxkbmapBackend is the only real implementation.

Example setxkbmap -query output:

    rules:      evdev
    model:      pc105
    layout:     us
    options:    compose:ralt
"""

import logging
import subprocess
from typing import Protocol

from .errors import ExternalToolError, ParseError
from .models import LayoutConfig

logger = logging.getLogger(__name__)


class LayoutBackend(Protocol):
    """Capability to read and change the active keyboard layout."""

    def query(self) -> str:
        """Return the active layout."""
        ...

    def apply(self, layout: str) -> None:
        """Make `layout` the active layout."""
        ...


def parse_query_output(output: str) -> str:
    """Extract the active layout from setxkbmap -query output.

    The last line containing "layout" wins and its last whitespace
    separated token is the layout.

    Raises:
        ParseError: If no line mentions a layout.
    """
    current = None
    for line in output.split("\n"):
        if "layout" in line:
            tokens = line.split()
            if tokens:
                current = tokens[-1]

    if current is None:
        raise ParseError(output)
    return current


class SetxkbmapBackend:
    """LayoutBackend driving the setxkbmap executable.

    Commands run without a timeout: a hung setxkbmap blocks the caller.
    """

    def __init__(
        self,
        query_command: list[str] | None = None,
        set_command: list[str] | None = None,
    ):
        self.query_command = list(query_command or ["setxkbmap", "-query"])
        self.set_command = list(set_command or ["setxkbmap"])

    @classmethod
    def from_config(cls, config: LayoutConfig) -> "SetxkbmapBackend":
        return cls(query_command=config.query_command, set_command=config.set_command)

    def _run(self, cmd: list[str], action: str) -> subprocess.CompletedProcess:
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
            )
        except OSError as e:
            logger.debug("Could not launch %s: %s", cmd[0], e)
            raise ExternalToolError(cmd, f"Failed to {action}") from e

        if result.returncode != 0:
            raise ExternalToolError(
                cmd,
                f"Failed to {action}",
                returncode=result.returncode,
                stderr=result.stderr.strip(),
            )
        return result

    def query(self) -> str:
        result = self._run(self.query_command, "get current layout")
        layout = parse_query_output(result.stdout)
        logger.debug("Current layout: %s", layout)
        return layout

    def apply(self, layout: str) -> None:
        self._run(self.set_command + [layout], "set keyboard layout")
        logger.debug("Applied layout: %s", layout)
