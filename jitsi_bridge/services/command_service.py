"""
The ``/meet`` slash command.
"""

from typing import List

from loguru import logger

from jitsi_bridge.constants import COMMAND_TRIGGER
from jitsi_bridge.enums import CommandAction
from jitsi_bridge.errors import (
    MeetingBridgeError,
    MeetingRequestError,
    SettingsValidationError,
)
from jitsi_bridge.schemas.platform import (
    CommandArgs,
    CommandDefinition,
    CommandResponse,
    Post,
)
from jitsi_bridge.services.configuration import PluginConfiguration
from jitsi_bridge.services.meeting.orchestrator import MeetingOrchestrator
from jitsi_bridge.services.platform.base import PlatformAPI
from jitsi_bridge.services.settings_store import UserSettingsStore
from jitsi_bridge.utils.deadline import with_deadline

EPHEMERAL_RESPONSE = "ephemeral"
START_MEETING_ERROR = "We could not start a meeting at this time."

COMMAND_HELP = f"""* |/{COMMAND_TRIGGER}| - Create a new video conference
* |/{COMMAND_TRIGGER} [topic]| - Create a new video conference with specified topic
* |/{COMMAND_TRIGGER} help| - Show this help text
* |/{COMMAND_TRIGGER} settings| - View your current user settings for the Jitsi plugin
* |/{COMMAND_TRIGGER} settings [setting] [value]| - Update your user settings (see below for options)

###### Jitsi Settings:
* |/{COMMAND_TRIGGER} settings embedded [true/false]|: When true, Jitsi meeting is embedded as a floating window inside Mattermost. When false, Jitsi meeting opens in a new window.
* |/{COMMAND_TRIGGER} settings naming_scheme [words/uuid/mattermost/ask]|: Select how meeting names are generated with one of these options:
    * |words|: Random English words in title case (e.g. PlayfulDragonsObserve)
    * |uuid|: UUID (universally unique identifier)
    * |mattermost|: Mattermost specific names. Combination of team name, channel name and random text in public and private channels; personal meeting name in direct and group messages channels.
    * |ask|: The plugin asks you to select the name every time you start a meeting"""


def command_definition() -> CommandDefinition:
    return CommandDefinition(
        trigger=COMMAND_TRIGGER,
        auto_complete_desc="Start a Video Conference in current channel. Other available commands: help, settings",
        auto_complete_hint="[command]",
    )


def help_text() -> str:
    return "###### Mattermost Jitsi Plugin - Slash Command Help\n" + COMMAND_HELP.replace("|", "`")


class CommandService:
    def __init__(
        self,
        platform: PlatformAPI,
        orchestrator: MeetingOrchestrator,
        settings_store: UserSettingsStore,
    ) -> None:
        self.platform = platform
        self.orchestrator = orchestrator
        self.settings_store = settings_store

    async def execute(
        self, config: PluginConfiguration, args: CommandArgs
    ) -> CommandResponse:
        split = args.command.split()
        if not split or split[0] != f"/{COMMAND_TRIGGER}":
            return CommandResponse()

        action = split[1] if len(split) > 1 else ""
        parameters = split[2:]

        command_action = CommandAction.from_text(action)
        if command_action == CommandAction.HELP:
            return await self._reply(config, args, help_text())
        if command_action == CommandAction.SETTINGS:
            return await self.execute_settings(config, args, parameters)
        return await self.execute_start_meeting(config, args)

    async def execute_start_meeting(
        self, config: PluginConfiguration, args: CommandArgs
    ) -> CommandResponse:
        topic = args.command.strip()[len(f"/{COMMAND_TRIGGER}"):].strip()
        try:
            await self.orchestrator.start_meeting_from_command(
                config, args.user_id, args.channel_id, topic
            )
        except MeetingRequestError as e:
            return await self._reply(config, args, e.message)
        except MeetingBridgeError as e:
            logger.error(
                f"startMeeting failed for user {args.user_id} in channel {args.channel_id}: "
                f"{type(e).__name__}: {e.message} {e.details}"
            )
            return CommandResponse(
                response_type=EPHEMERAL_RESPONSE,
                channel_id=args.channel_id,
                text=START_MEETING_ERROR,
            )
        return CommandResponse()

    async def execute_settings(
        self, config: PluginConfiguration, args: CommandArgs, parameters: List[str]
    ) -> CommandResponse:
        if not parameters:
            try:
                preference = await with_deadline(
                    self.settings_store.get(args.user_id, config),
                    config.request_timeout_seconds,
                    "load user settings",
                )
            except MeetingBridgeError as e:
                logger.debug(f"Unable to get user config for {args.user_id}: {e.message}")
                return await self._reply(config, args, "Unable to get user settings.")

            text = (
                "###### Jitsi Settings:\n"
                f"* Embedded: `{str(preference.embedded).lower()}`\n"
                f"* Naming Scheme: `{preference.naming_scheme.value}`"
            )
            return await self._reply(config, args, text)

        if len(parameters) != 2:
            return await self._reply(config, args, "Invalid settings parameters")

        field, value = parameters
        try:
            await with_deadline(
                self.settings_store.set(args.user_id, field, value, config),
                config.request_timeout_seconds,
                "update user settings",
            )
        except SettingsValidationError as e:
            return await self._reply(config, args, e.message)
        except MeetingBridgeError as e:
            logger.debug(f"Unable to set user settings for {args.user_id}: {e.message}")
            return await self._reply(config, args, "Unable to set user settings")

        return await self._reply(config, args, "Jitsi settings updated")

    async def _reply(
        self, config: PluginConfiguration, args: CommandArgs, text: str
    ) -> CommandResponse:
        """Send ``text`` as an ephemeral post, or return it in the response if that fails."""
        post = Post(user_id=args.user_id, channel_id=args.channel_id, message=text)
        try:
            await with_deadline(
                self.platform.send_ephemeral_post(args.user_id, post),
                config.request_timeout_seconds,
                "send ephemeral post",
            )
        except MeetingBridgeError as e:
            logger.warning(
                f"Ephemeral post to {args.user_id} failed ({e.message}), replying inline"
            )
            return CommandResponse(
                response_type=EPHEMERAL_RESPONSE, channel_id=args.channel_id, text=text
            )
        return CommandResponse()
