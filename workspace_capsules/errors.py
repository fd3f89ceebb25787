"""
Error handling for the workspace capsule daemon.

Every failure the daemon can hit is mapped to a structured error code so the
CLI can report it once, with a suggestion, before exiting.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """
    Error codes for the workspace capsule daemon.

    Custom codes:
    - 1100-1199: Configuration errors
    - 1200-1299: File system errors
    - 1400-1499: Window manager IPC errors
    """

    # Configuration errors (1100-1199)
    CONFIG_LOAD_FAILED = 1100
    CONFIG_INVALID = 1101
    CONFIG_DIR_UNAVAILABLE = 1102
    CACHE_DIR_UNAVAILABLE = 1103

    # File system errors (1200-1299)
    FILE_WRITE_ERROR = 1202
    OUTPUT_DIR_CORRUPT = 1203
    DIRECTORY_RESET_FAILED = 1204

    # Window manager IPC errors (1400-1499)
    WM_NOT_RUNNING = 1400
    WM_QUERY_FAILED = 1401
    WM_EVENT_FAILED = 1402
    WM_UNEXPECTED_EVENT = 1403


class CapsuleError(Exception):
    """Base exception for workspace capsule daemon errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize daemon error.

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

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary for structured logging.

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


class ConfigError(CapsuleError):
    """Configuration loading or validation error."""

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        code: ErrorCode = ErrorCode.CONFIG_LOAD_FAILED,
        suggestion: Optional[str] = None
    ):
        context = {}
        if file_path:
            context["file_path"] = file_path

        super().__init__(
            code=code,
            message=message,
            suggestion=suggestion or "Check file syntax and permissions",
            context=context
        )


class IpcConnectError(CapsuleError):
    """Could not open or subscribe a window manager IPC session."""

    def __init__(self, session: str, reason: str):
        super().__init__(
            code=ErrorCode.WM_NOT_RUNNING,
            message=f"Failed to connect {session} session: {reason}",
            suggestion="Ensure i3 or Sway is running and I3SOCK/SWAYSOCK is set",
            context={"session": session, "reason": reason}
        )


class IpcQueryError(CapsuleError):
    """A synchronous window manager query failed."""

    def __init__(self, operation: str, reason: str):
        super().__init__(
            code=ErrorCode.WM_QUERY_FAILED,
            message=f"IPC {operation} failed: {reason}",
            suggestion="Ensure the window manager IPC socket is accessible",
            context={"operation": operation, "reason": reason}
        )


class IpcEventError(CapsuleError):
    """The event stream failed, closed, or delivered an unexpected event."""

    def __init__(
        self,
        reason: str,
        code: ErrorCode = ErrorCode.WM_EVENT_FAILED,
        event_type: Optional[str] = None
    ):
        context = {"reason": reason}
        if event_type:
            context["event_type"] = event_type

        super().__init__(
            code=code,
            message=f"Event stream error: {reason}",
            suggestion="The daemon does not reconnect; restart it with its supervisor",
            context=context
        )


class FilesystemError(CapsuleError):
    """Output directory creation, removal, or write failure."""

    def __init__(
        self,
        operation: str,
        path: str,
        reason: str,
        code: ErrorCode = ErrorCode.FILE_WRITE_ERROR
    ):
        super().__init__(
            code=code,
            message=f"Failed to {operation} {path}: {reason}",
            suggestion="Check permissions and free space in the cache directory",
            context={"operation": operation, "path": path, "reason": reason}
        )


class OutputDirCorruption(CapsuleError):
    """An output directory entry is not a workspace ordinal.

    Not fatal: the synchronizer handles it by resetting the directory.
    """

    def __init__(self, path: str, entry: str):
        self.entry = entry
        super().__init__(
            code=ErrorCode.OUTPUT_DIR_CORRUPT,
            message=f"Unexpected entry {entry!r} in output directory {path}",
            suggestion="The directory is reset automatically",
            context={"path": path, "entry": entry}
        )
