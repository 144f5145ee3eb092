from fastapi import APIRouter, Depends, Form
from loguru import logger

from jitsi_bridge.routes.http_errors import check_shared_secret
from jitsi_bridge.schemas.platform import CommandArgs, CommandDefinition, CommandResponse
from jitsi_bridge.services.command_service import command_definition
from jitsi_bridge.services.container import ServiceContainer, get_services

router = APIRouter(prefix="/commands", tags=["commands"])


@router.get("", response_model=CommandDefinition)
async def get_command_definition() -> CommandDefinition:
    """Registration metadata for the slash command."""
    return command_definition()


@router.post("", response_model=CommandResponse)
async def execute_command(
    command: str = Form(...),
    user_id: str = Form(...),
    channel_id: str = Form(...),
    text: str = Form(default=""),
    team_id: str = Form(default=""),
    token: str = Form(default=""),
    services: ServiceContainer = Depends(get_services),
) -> CommandResponse:
    """Slash command webhook. Mattermost posts the trigger and the rest of the input separately."""
    config = services.config.current()
    check_shared_secret(config.integration.command_token, token, "invalid_command_token")

    logger.debug(f"Command {command} from user {user_id} in channel {channel_id}")
    args = CommandArgs(
        command=f"{command} {text}".strip(),
        user_id=user_id,
        channel_id=channel_id,
        team_id=team_id,
    )
    return await services.commands.execute(config, args)
