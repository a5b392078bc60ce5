"""Desktop notification integration.

Notifications are sent with notify-send to the current user session.
They are purely informational: every failure is logged and reported
through the return value, never raised.
"""

import logging
import subprocess

from .models import LayoutConfig

logger = logging.getLogger(__name__)


class Notifier:
    """Send desktop notifications for layout changes.

    Example:
        >>> notifier = Notifier(app_name="kb", timeout_ms=2000)
        >>> notifier.send_layout_notification("fr")
    """

    def __init__(self, app_name: str = "kb", timeout_ms: int = 2000):
        """Initialize notifier.

        Args:
            app_name: Application name shown in notification.
            timeout_ms: Display timeout in milliseconds.
        """
        self.app_name = app_name
        self.timeout_ms = timeout_ms

    @classmethod
    def from_config(cls, config: LayoutConfig) -> "Notifier":
        return cls(app_name=config.notify_app_name, timeout_ms=config.notify_timeout_ms)

    def send_notification(self, summary: str, body: str = "") -> bool:
        """Send a desktop notification.

        Args:
            summary: Notification title.
            body: Notification body text.

        Returns:
            True if notification was sent successfully.
        """
        cmd = [
            "notify-send",
            "--app-name",
            self.app_name,
            "--expire-time",
            str(self.timeout_ms),
            summary,
        ]

        if body:
            cmd.append(body)

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=10,
            )

            if result.returncode != 0:
                logger.warning("notify-send failed: %s", result.stderr.strip())
                return False

            logger.debug("Notification sent: %s", summary)
            return True

        except subprocess.TimeoutExpired:
            logger.warning("notify-send timed out")
            return False
        except FileNotFoundError:
            logger.warning("notify-send not found")
            return False
        except (subprocess.SubprocessError, OSError, ValueError) as e:
            logger.warning("Failed to send notification: %s", e)
            return False

    def send_layout_notification(self, layout: str) -> bool:
        """Announce that the keyboard layout changed."""
        return self.send_notification(
            summary=self.app_name,
            body=f"Keyboard layout set to '{layout}'",
        )
