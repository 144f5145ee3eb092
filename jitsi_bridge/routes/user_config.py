from fastapi import APIRouter, Depends

from jitsi_bridge.errors import MeetingBridgeError
from jitsi_bridge.routes.http_errors import get_user_id, to_http_exception
from jitsi_bridge.schemas.meeting import UserConfigResponse
from jitsi_bridge.services.container import ServiceContainer, get_services

router = APIRouter(prefix="/config", tags=["config"])


@router.get("", response_model=UserConfigResponse)
async def get_user_config(
    user_id: str = Depends(get_user_id),
    services: ServiceContainer = Depends(get_services),
) -> UserConfigResponse:
    """Current Jitsi settings of the calling user, defaults included."""
    try:
        preference = await services.settings_store.get(
            user_id, services.config.current()
        )
    except MeetingBridgeError as exc:
        raise to_http_exception(exc) from exc

    return UserConfigResponse(
        embedded=preference.embedded, naming_scheme=preference.naming_scheme.value
    )
