"""Layout controller.

LayoutController implements the kb operations on top of a LayoutBackend,
the state file and the Notifier:

    get     -> backend.query()
    set     -> write state file, backend.apply(), notify
    next    -> query, find in configured layouts, set the following one

The state file is written before the layout is applied. If applying
fails, the previous state file content is put back so the file never
names a layout that was not actually set.
"""

import logging
from typing import Optional

from .backend import LayoutBackend, SetxkbmapBackend
from .errors import ConfigError, ExternalToolError, KbError, LayoutNotFoundError, StateFileError
from .models import LayoutConfig
from .notifier import Notifier
from . import state

logger = logging.getLogger(__name__)


class LayoutController:
    """Query, set and cycle the keyboard layout.

    Example:
        >>> controller = LayoutController(LayoutConfig.from_env())
        >>> controller.get_current_layout()
        'us'
        >>> controller.advance_layout(quiet=True)
        'fr'
    """

    def __init__(
        self,
        config: LayoutConfig,
        backend: Optional[LayoutBackend] = None,
        notifier: Optional[Notifier] = None,
    ):
        """Initialize controller.

        Args:
            config: Configuration built at startup.
            backend: Layout backend. Defaults to setxkbmap.
            notifier: Notification sender. Defaults to notify-send.
        """
        self.config = config
        self.backend = backend if backend is not None else SetxkbmapBackend.from_config(config)
        self.notifier = notifier if notifier is not None else Notifier.from_config(config)

    def get_configured_layouts(self) -> list[str]:
        """Layouts eligible for cycling, possibly empty."""
        return list(self.config.layouts)

    def get_current_layout(self) -> str:
        """Get the active layout from the backend.

        Raises:
            ExternalToolError: If the query command fails.
            ParseError: If its output names no layout.
        """
        return self.backend.query()

    def write_layout_state(self, layout: str) -> None:
        """Record `layout` in the state file.

        Raises:
            ConfigError: If no state file location is configured.
            StateFileError: If the file cannot be written.
        """
        path = state.resolve_state_path(self.config)
        state.write_state(path, layout)

    def set_layout(self, layout: str, quiet: bool = False) -> None:
        """Apply a layout, record it and announce it.

        Args:
            layout: Layout identifier such as "us".
            quiet: Skip the desktop notification.

        Raises:
            ConfigError: If layout is empty or no state path is available.
            StateFileError: If the state file cannot be written.
            ExternalToolError: If the layout cannot be applied.
        """
        if not layout:
            raise ConfigError("Layout must be a non-empty string")

        path = state.resolve_state_path(self.config)
        try:
            previous = state.read_state(path)
            can_restore = True
        except StateFileError as e:
            logger.warning("%s; it will not be restored if setting the layout fails", e)
            previous = None
            can_restore = False

        state.write_state(path, layout)

        try:
            self.backend.apply(layout)
        except ExternalToolError:
            if can_restore:
                try:
                    state.restore_state(path, previous)
                except KbError as restore_error:
                    logger.error("Could not restore %s: %s", path, restore_error)
            raise

        logger.info("Keyboard layout set to '%s'", layout)

        if not quiet:
            if not self.notifier.send_layout_notification(layout):
                logger.debug("Continuing without notification")

    def advance_layout(self, quiet: bool = False) -> str:
        """Switch to the configured layout following the current one.

        Wraps from the last layout back to the first.

        Returns:
            The layout that was set.

        Raises:
            ConfigError: If no layouts are configured.
            LayoutNotFoundError: If the current layout is not configured.
        """
        layouts = self.get_configured_layouts()
        if not layouts:
            raise ConfigError(
                "Layouts provided in $LAYOUTS results in empty array",
                suggestion="Set LAYOUTS to a comma separated list such as 'us,fr'",
            )

        current = self.get_current_layout()
        try:
            index = layouts.index(current)
        except ValueError:
            raise LayoutNotFoundError(current, layouts) from None

        next_layout = layouts[(index + 1) % len(layouts)]
        logger.debug("Advancing layout %s -> %s", current, next_layout)
        self.set_layout(next_layout, quiet=quiet)
        return next_layout
