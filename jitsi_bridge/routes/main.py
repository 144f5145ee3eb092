from fastapi import APIRouter
from loguru import logger

from jitsi_bridge.routes.commands import router as commands_router
from jitsi_bridge.routes.meetings import router as meetings_router
from jitsi_bridge.routes.user_config import router as user_config_router

router = APIRouter(
    tags=["main"],
    responses={404: {"description": "Not found"}},
)

router.include_router(commands_router)
router.include_router(meetings_router)
router.include_router(user_config_router)


@router.get("/health")
async def health():
    logger.debug("Health endpoint called")
    return {"message": "OK"}
