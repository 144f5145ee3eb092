import hmac

from fastapi import Header, HTTPException
from loguru import logger

from jitsi_bridge.errors import (
    LookupFailure,
    MeetingBridgeError,
    MeetingRequestError,
    OperationTimeoutError,
    SettingsValidationError,
    TokenVerificationError,
)


def to_http_exception(exc: MeetingBridgeError) -> HTTPException:
    """Map a service error to an HTTP error; details go to the log only."""
    if isinstance(exc, (MeetingRequestError, SettingsValidationError)):
        return HTTPException(status_code=400, detail=exc.message)
    if isinstance(exc, TokenVerificationError):
        logger.warning(f"Token verification failed: {exc.cause.value}")
        return HTTPException(status_code=401, detail=f"token_{exc.cause.value}")
    if isinstance(exc, LookupFailure):
        logger.warning(f"Lookup failed: {exc.message} {exc.details}")
        return HTTPException(status_code=404, detail=f"{exc.kind}_not_found")
    if isinstance(exc, OperationTimeoutError):
        logger.error(f"Upstream timeout: {exc.message}")
        return HTTPException(status_code=504, detail="upstream_timeout")

    logger.error(f"{type(exc).__name__}: {exc.message} {exc.details}")
    return HTTPException(status_code=500, detail="meeting_service_error")


def check_shared_secret(expected: str, received: str, detail: str) -> None:
    """Reject the request unless it carries the configured secret. No secret configured, no check."""
    if not expected:
        return
    if not hmac.compare_digest(expected.encode("utf-8"), received.encode("utf-8")):
        logger.warning(f"Shared secret validation failed: {detail}")
        raise HTTPException(status_code=403, detail=detail)


async def get_user_id(
    user_id: str = Header(default="", alias="Mattermost-User-Id"),
) -> str:
    """The platform authenticates the user and forwards their id in this header."""
    if not user_id:
        raise HTTPException(status_code=401, detail="not_authorized")
    return user_id
