"""Pytest configuration and fixtures for kb layout switcher tests."""

from pathlib import Path
from typing import Callable, Optional

import pytest

from kb_layout.controller import LayoutController
from kb_layout.errors import ExternalToolError
from kb_layout.models import LayoutConfig


class FakeBackend:
    """In-memory LayoutBackend standing in for setxkbmap."""

    def __init__(self, current: str = "us", fail_apply: bool = False):
        self.current = current
        self.fail_apply = fail_apply
        self.applied: list[str] = []

    def query(self) -> str:
        return self.current

    def apply(self, layout: str) -> None:
        if self.fail_apply:
            raise ExternalToolError(
                ["setxkbmap", layout],
                "Failed to set keyboard layout",
                returncode=1,
                stderr="Error loading new keyboard description",
            )
        self.applied.append(layout)
        self.current = layout


class FakeNotifier:
    """Records layout notifications instead of calling notify-send."""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.sent: list[str] = []

    def send_layout_notification(self, layout: str) -> bool:
        self.sent.append(layout)
        return self.succeed


@pytest.fixture
def fake_backend() -> FakeBackend:
    """Backend whose active layout starts as 'us'."""
    return FakeBackend()


@pytest.fixture
def fake_notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def home_dir(tmp_path: Path) -> Path:
    """Temporary directory used as $HOME."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def make_controller(
    home_dir: Path,
    fake_backend: FakeBackend,
    fake_notifier: FakeNotifier,
) -> Callable[..., LayoutController]:
    """Factory building a controller from an environment mapping.

    HOME defaults to the temporary home directory; pass HOME=None to
    leave it unset.
    """

    def _make(layouts: Optional[str] = None, **env: Optional[str]) -> LayoutController:
        environ = {"HOME": str(home_dir)}
        if layouts is not None:
            environ["LAYOUTS"] = layouts
        for key, value in env.items():
            if value is None:
                environ.pop(key, None)
            else:
                environ[key] = value
        config = LayoutConfig.from_env(environ)
        return LayoutController(config, backend=fake_backend, notifier=fake_notifier)

    return _make


@pytest.fixture
def mock_setxkbmap_query_output() -> str:
    """Sample setxkbmap -query output with layout 'fr'."""
    return (
        "rules:      evdev\n"
        "model:      pc105\n"
        "layout:     fr\n"
        "options:    compose:ralt\n"
    )
