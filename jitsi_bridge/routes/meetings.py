from fastapi import APIRouter, Depends
from loguru import logger

from jitsi_bridge.errors import MeetingBridgeError
from jitsi_bridge.routes.http_errors import (
    check_shared_secret,
    get_user_id,
    to_http_exception,
)
from jitsi_bridge.schemas.meeting import (
    EnrichMeetingJwtRequest,
    EnrichMeetingJwtResponse,
    StartMeetingActionRequest,
    StartMeetingActionResponse,
)
from jitsi_bridge.services.container import ServiceContainer, get_services

router = APIRouter(prefix="/meetings", tags=["meetings"])


@router.post("", response_model=StartMeetingActionResponse)
async def start_selected_meeting(
    payload: StartMeetingActionRequest,
    services: ServiceContainer = Depends(get_services),
) -> StartMeetingActionResponse:
    """Start the meeting a user picked from the offered names."""
    config = services.config.current()
    check_shared_secret(
        config.integration.action_secret, payload.context.secret, "invalid_action_secret"
    )
    logger.info(
        f"Meeting selection from user {payload.user_id} in channel {payload.channel_id}: "
        f"{payload.context.meeting_id}"
    )
    try:
        session = await services.orchestrator.start_selected_meeting(config, payload)
    except MeetingBridgeError as exc:
        raise to_http_exception(exc) from exc

    return StartMeetingActionResponse(
        meeting_id=session.meeting_id, meeting_link=session.link
    )


@router.post("/enrich", response_model=EnrichMeetingJwtResponse)
async def enrich_meeting_jwt(
    payload: EnrichMeetingJwtRequest,
    user_id: str = Depends(get_user_id),
    services: ServiceContainer = Depends(get_services),
) -> EnrichMeetingJwtResponse:
    """Re-issue a meeting token carrying the calling user's identity."""
    try:
        token = await services.orchestrator.enrich_meeting_jwt(
            services.config.current(), user_id, payload.jwt, payload.channel_id
        )
    except MeetingBridgeError as exc:
        raise to_http_exception(exc) from exc

    return EnrichMeetingJwtResponse(jwt=token)
