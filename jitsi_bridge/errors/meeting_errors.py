"""
Error types raised by the meeting services.

Routes and the command service translate these into user-facing responses;
the ``details`` dict is for logs only.
"""

from typing import Any, Dict, Iterable, Optional

from jitsi_bridge.enums import TokenFailureCause


class MeetingBridgeError(Exception):
    """Base error for the Jitsi bridge."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(MeetingBridgeError):
    """Raised when the plugin configuration is invalid."""


class LookupFailure(MeetingBridgeError):
    """A user, channel or team could not be loaded from the platform."""

    def __init__(self, kind: str, object_id: str, reason: str = ""):
        self.kind = kind
        self.object_id = object_id
        super().__init__(
            f"{kind} {object_id} could not be loaded",
            {"kind": kind, "id": object_id, "reason": reason},
        )


class PlatformError(MeetingBridgeError):
    """The platform rejected a post or other write."""


class SettingsValidationError(MeetingBridgeError):
    """A settings field or value was rejected. Nothing was written."""

    def __init__(self, message: str, value: str = "", accepted: Iterable[str] = ()):
        self.value = value
        self.accepted = list(accepted)
        super().__init__(message, {"value": value, "accepted": self.accepted})


class SettingsStorageError(MeetingBridgeError):
    """Raised when user settings cannot be read or written."""


class MeetingRequestError(MeetingBridgeError):
    """A meeting request carried an unusable id or topic."""


class TokenError(MeetingBridgeError):
    """Base class for meeting token failures."""


class TokenSigningError(TokenError):
    pass


class TokenVerificationError(TokenError):
    def __init__(self, cause: TokenFailureCause, message: str = ""):
        self.cause = cause
        super().__init__(message or f"Token verification failed: {cause.value}")


class ShortenerError(MeetingBridgeError):
    """The link shortener was unreachable or returned an unusable response."""


class OperationTimeoutError(MeetingBridgeError):
    """An outbound call did not finish before its deadline."""

    def __init__(self, operation: str, timeout: float):
        self.operation = operation
        self.timeout = timeout
        super().__init__(
            f"{operation} timed out after {timeout}s",
            {"operation": operation, "timeout": timeout},
        )
