"""
Error handling for the keyboard layout switcher.

Every failure the CLI reports is a KbError carrying an ErrorCode. The
code value doubles as the process exit status.
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCode(Enum):
    """
    Error codes for kb.

    - 2: External tool (setxkbmap) failed
    - 3: Tool output could not be parsed
    - 4: Configuration or argument error
    - 5: Current layout not in the configured list
    - 6: State file read/write error
    """

    EXTERNAL_TOOL_FAILED = 2
    PARSE_FAILED = 3
    CONFIG_INVALID = 4
    LAYOUT_NOT_FOUND = 5
    STATE_FILE_FAILED = 6


class KbError(Exception):
    """Base exception for keyboard layout errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize layout error.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            suggestion: Suggested recovery action
            context: Additional context for debugging
        """
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.context = context or {}
        super().__init__(message)

    @property
    def exit_code(self) -> int:
        return self.code.value

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to a dictionary.

        Returns:
            Error dictionary with code, message, suggestion, and context
        """
        result = {
            "code": self.code.value,
            "message": self.message
        }

        if self.suggestion:
            result["suggestion"] = self.suggestion

        if self.context:
            result["context"] = self.context

        return result


class ExternalToolError(KbError):
    """setxkbmap could not be launched or exited with a non-zero status."""

    def __init__(
        self,
        command: List[str],
        reason: str,
        returncode: Optional[int] = None,
        stderr: str = ""
    ):
        """
        Initialize external tool error.

        Args:
            command: Command line that failed
            reason: Short description of the failure
            returncode: Exit status, None if the process never started
            stderr: Captured standard error of the process
        """
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr

        command_line = " ".join(self.command)
        if returncode is None:
            message = f"{reason} with command '{command_line}'"
        else:
            message = (
                f"Error executing command '{command_line}' with exit code {returncode}. "
                f"Here is the error message:\n{stderr}"
            )

        super().__init__(
            code=ErrorCode.EXTERNAL_TOOL_FAILED,
            message=message,
            suggestion="Ensure setxkbmap is installed and an X display is available",
            context={"command": self.command, "returncode": returncode, "stderr": stderr}
        )


class ParseError(KbError):
    """Expected layout line missing from setxkbmap output."""

    def __init__(self, output: str):
        super().__init__(
            code=ErrorCode.PARSE_FAILED,
            message="Layout not specified in command output",
            context={"output": output}
        )


class ConfigError(KbError):
    """Missing environment or unusable layout configuration."""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        super().__init__(
            code=ErrorCode.CONFIG_INVALID,
            message=message,
            suggestion=suggestion
        )


class LayoutNotFoundError(KbError):
    """Current layout is not part of the configured layouts."""

    def __init__(self, layout: str, layouts: List[str]):
        self.layout = layout
        self.layouts = list(layouts)
        super().__init__(
            code=ErrorCode.LAYOUT_NOT_FOUND,
            message=f"Current layout '{layout}' not found in available layouts ({','.join(layouts)})",
            suggestion="Add the current layout to LAYOUTS or set a configured layout with --set",
            context={"layout": layout, "layouts": self.layouts}
        )


class StateFileError(KbError):
    """Layout state file could not be read or written."""

    def __init__(self, path: str, operation: str, reason: str):
        """
        Initialize state file error.

        Args:
            path: State file path
            operation: File operation that failed (e.g., "write", "restore")
            reason: Reason for failure
        """
        self.path = path
        super().__init__(
            code=ErrorCode.STATE_FILE_FAILED,
            message=f"Failed to {operation} layout state file {path}: {reason}",
            suggestion="Check KEYBOARD_LAYOUT_FILE and file permissions",
            context={"path": path, "operation": operation, "reason": reason}
        )
