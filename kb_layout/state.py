"""Layout state file handling.

The state file holds the raw bytes of the last layout set by kb, with
no trailing newline. Location:

    $KEYBOARD_LAYOUT_FILE   if set, used literally ('~' is not expanded)
    $HOME/.layout           otherwise

Writes are not locked; two concurrent invocations may race.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from .errors import ConfigError, StateFileError
from .models import DEFAULT_STATE_FILENAME, HOME_ENV, LayoutConfig

logger = logging.getLogger(__name__)


def resolve_state_path(config: LayoutConfig) -> Path:
    """Get the state file path for a configuration.

    Raises:
        ConfigError: If neither KEYBOARD_LAYOUT_FILE nor HOME is set.
    """
    if config.state_file is not None:
        return Path(config.state_file)
    if config.home is None:
        raise ConfigError(
            f"Could not fetch {HOME_ENV} environment variable",
            suggestion="Set HOME or KEYBOARD_LAYOUT_FILE",
        )
    return Path(config.home) / DEFAULT_STATE_FILENAME


def read_state(path: Path) -> Optional[bytes]:
    """Return the state file content, or None if the file does not exist."""
    try:
        return path.read_bytes()
    except FileNotFoundError:
        return None
    except OSError as e:
        raise StateFileError(str(path), "read", str(e)) from e


def write_state(path: Path, layout: str) -> None:
    """Overwrite the state file with the layout bytes.

    The layout is encoded the way argv was decoded, so undecodable
    command line bytes are written back unchanged. Encoding happens
    before the file is opened and truncated.
    """
    try:
        data = os.fsencode(layout)
    except UnicodeError as e:
        raise StateFileError(str(path), "encode layout for", str(e)) from e

    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as e:
        raise StateFileError(str(path), "write", str(e)) from e
    logger.debug("Wrote layout %r to %s", layout, path)


def restore_state(path: Path, previous: Optional[bytes]) -> None:
    """Put back content captured by read_state().

    A None snapshot means the file did not exist, so it is removed.
    """
    try:
        if previous is None:
            path.unlink(missing_ok=True)
        else:
            with open(path, "wb") as f:
                f.write(previous)
    except OSError as e:
        raise StateFileError(str(path), "restore", str(e)) from e
    logger.info("Restored layout state file %s", path)
