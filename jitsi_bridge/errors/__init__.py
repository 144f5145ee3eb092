from jitsi_bridge.errors.meeting_errors import (
    ConfigurationError,
    LookupFailure,
    MeetingBridgeError,
    MeetingRequestError,
    OperationTimeoutError,
    PlatformError,
    SettingsStorageError,
    SettingsValidationError,
    ShortenerError,
    TokenError,
    TokenSigningError,
    TokenVerificationError,
)

__all__ = [
    "ConfigurationError",
    "LookupFailure",
    "MeetingBridgeError",
    "MeetingRequestError",
    "OperationTimeoutError",
    "PlatformError",
    "SettingsStorageError",
    "SettingsValidationError",
    "ShortenerError",
    "TokenError",
    "TokenSigningError",
    "TokenVerificationError",
]
