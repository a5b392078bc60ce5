"""Pydantic configuration model for the keyboard layout switcher.

The configuration is read from the environment exactly once at startup
and then passed explicitly to the controller, backend and notifier.

Environment variables:
    LAYOUTS: Comma separated list of layouts to cycle through
    HOME: Base directory for the default state file
    KEYBOARD_LAYOUT_FILE: Explicit state file path (no '~' expansion)
"""

import os
from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


LAYOUTS_ENV = "LAYOUTS"
HOME_ENV = "HOME"
STATE_FILE_ENV = "KEYBOARD_LAYOUT_FILE"

# Layouts cycled through when LAYOUTS is not set
DEFAULT_LAYOUTS = ("us", "fr")

DEFAULT_STATE_FILENAME = ".layout"


def normalize_layouts(values: Iterable[str]) -> list[str]:
    """Drop duplicate and empty layouts, keeping first occurrences in order.

    Values are not stripped: ' fr' and 'fr' are different layouts.
    """
    seen: set[str] = set()
    layouts = []
    for value in values:
        if value == "" or value in seen:
            continue
        seen.add(value)
        layouts.append(value)
    return layouts


class LayoutConfig(BaseModel):
    """Runtime configuration for kb.

    Attributes:
        layouts: Normalized layouts to cycle through (may be empty).
        home: Value of HOME, None if unset.
        state_file: Value of KEYBOARD_LAYOUT_FILE, None if unset.
        query_command: Command printing the current keyboard configuration.
        set_command: Command applying a layout, the layout is appended.
        notify_app_name: Application name shown in notifications.
        notify_timeout_ms: Notification display timeout.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    layouts: list[str] = Field(
        default_factory=lambda: list(DEFAULT_LAYOUTS),
        description="Layouts eligible for cycling",
    )
    home: Optional[str] = Field(default=None, description="Home directory")
    state_file: Optional[str] = Field(
        default=None,
        description="State file override, used literally",
    )
    query_command: list[str] = Field(
        default_factory=lambda: ["setxkbmap", "-query"],
        min_length=1,
    )
    set_command: list[str] = Field(
        default_factory=lambda: ["setxkbmap"],
        min_length=1,
    )
    notify_app_name: str = Field(default="kb", min_length=1)
    notify_timeout_ms: int = Field(default=2000, gt=0)

    @field_validator("layouts")
    @classmethod
    def _normalize(cls, value: list[str]) -> list[str]:
        return normalize_layouts(value)

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        **overrides: Any,
    ) -> "LayoutConfig":
        """Build configuration from environment variables.

        Args:
            environ: Environment mapping. Defaults to os.environ.
            **overrides: Field values that take precedence over the
                environment.

        Returns:
            Validated LayoutConfig.

        Example:
            >>> config = LayoutConfig.from_env({"LAYOUTS": "us,de", "HOME": "/home/me"})
            >>> config.layouts
            ['us', 'de']
        """
        if environ is None:
            environ = os.environ

        values: dict[str, Any] = {
            "home": environ.get(HOME_ENV),
            "state_file": environ.get(STATE_FILE_ENV),
        }

        raw_layouts = environ.get(LAYOUTS_ENV)
        if raw_layouts is not None:
            values["layouts"] = raw_layouts.split(",")

        values.update(overrides)
        return cls(**values)
