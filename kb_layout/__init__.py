"""Keyboard layout switcher for X11 desktops.

This package queries and cycles the active keyboard layout by driving
setxkbmap, records the last layout it set in a small state file and
shows a desktop notification when the layout changes.

Modules:
    - models: LayoutConfig pydantic model built from the environment
    - errors: Error codes and exception hierarchy
    - backend: setxkbmap backend and query output parsing
    - state: Layout state file handling
    - notifier: Desktop notification integration
    - controller: LayoutController tying everything together
"""

import logging

__version__ = "1.2.0"

__all__ = [
    "__version__",
    "configure_logging",
]


def configure_logging(
    level: str = "WARNING",
    format_string: str | None = None,
) -> logging.Logger:
    """Configure package-level logging.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string. Defaults to standard format
            with timestamp, level, module, and message.

    Returns:
        Configured logger instance for the kb_layout package.

    Example:
        >>> from kb_layout import configure_logging
        >>> logger = configure_logging("DEBUG")
        >>> logger.debug("Querying layout...")
    """
    if format_string is None:
        format_string = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

    logger = logging.getLogger("kb_layout")
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(format_string))
    logger.addHandler(handler)

    return logger

