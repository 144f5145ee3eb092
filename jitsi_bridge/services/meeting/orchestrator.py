"""
Meeting creation.

Ties together route selection, naming, token issuance, link shortening and
the channel notification. Every method takes the configuration snapshot for
the request it serves.
"""

from datetime import UTC, datetime
from typing import Any, Dict, Optional, Union
from urllib.parse import quote

from loguru import logger

from jitsi_bridge.constants import DEFAULT_MEETING_TOPIC, JITSI_POST_TYPE
from jitsi_bridge.enums import NamingScheme
from jitsi_bridge.errors import MeetingRequestError
from jitsi_bridge.schemas.meeting import (
    MeetingCandidate,
    MeetingOptions,
    MeetingSession,
    StartMeetingActionRequest,
)
from jitsi_bridge.schemas.platform import (
    Channel,
    Post,
    PostAction,
    PostActionIntegration,
    SlackAttachment,
    Team,
    User,
)
from jitsi_bridge.services.configuration import PluginConfiguration, RouteConfig
from jitsi_bridge.services.jitsi_token_service import JitsiTokenService
from jitsi_bridge.services.meeting.naming import is_valid_meeting_id, resolve_meeting_name
from jitsi_bridge.services.platform.base import PlatformAPI
from jitsi_bridge.services.settings_store import UserSettingsStore
from jitsi_bridge.services.shortener import YourlsShortener
from jitsi_bridge.utils.deadline import with_deadline


class MeetingOrchestrator:
    def __init__(
        self,
        platform: PlatformAPI,
        settings_store: UserSettingsStore,
        token_service: JitsiTokenService,
        shortener: YourlsShortener,
    ) -> None:
        self.platform = platform
        self.settings_store = settings_store
        self.token_service = token_service
        self.shortener = shortener

    @staticmethod
    def select_route(config: PluginConfiguration, channel: Channel) -> RouteConfig:
        return config.route_for_team(channel.team_id)

    async def start_meeting_from_command(
        self,
        config: PluginConfiguration,
        user_id: str,
        channel_id: str,
        topic: str = "",
        timeout: Optional[float] = None,
    ) -> Union[MeetingSession, MeetingOptions]:
        timeout = timeout or config.request_timeout_seconds
        user = await with_deadline(self.platform.get_user(user_id), timeout, "get user")
        channel = await with_deadline(
            self.platform.get_channel(channel_id), timeout, "get channel"
        )
        return await self.start_meeting(
            config, user, channel, meeting_topic=topic, timeout=timeout
        )

    async def start_selected_meeting(
        self,
        config: PluginConfiguration,
        request: StartMeetingActionRequest,
        timeout: Optional[float] = None,
    ) -> MeetingSession:
        """Second step of the ``ask`` flow: start the candidate the user picked."""
        timeout = timeout or config.request_timeout_seconds
        name = _explicit_name(
            request.context.meeting_id,
            request.context.meeting_topic,
            request.context.personal,
        )

        user = await with_deadline(
            self.platform.get_user(request.user_id), timeout, "get user"
        )
        channel = await with_deadline(
            self.platform.get_channel(request.channel_id), timeout, "get channel"
        )
        if request.post_id:
            await with_deadline(
                self.platform.delete_ephemeral_post(user.id, request.post_id),
                timeout,
                "delete ephemeral post",
            )

        route = self.select_route(config, channel)
        return await self._create_meeting(config, route, user, channel, name, timeout)

    async def start_meeting(
        self,
        config: PluginConfiguration,
        user: User,
        channel: Channel,
        meeting_id: str = "",
        meeting_topic: str = "",
        personal: bool = False,
        timeout: Optional[float] = None,
    ) -> Union[MeetingSession, MeetingOptions]:
        """
        Create a meeting in ``channel`` and post it.

        With an explicit ``meeting_id`` (a picked candidate) the name is used
        as given. Otherwise the topic or the user's naming scheme decides; for
        the ``ask`` scheme the user is offered a choice and ``MeetingOptions``
        is returned without creating anything.
        """
        timeout = timeout or config.request_timeout_seconds
        route = self.select_route(config, channel)

        if meeting_id:
            name = _explicit_name(meeting_id, meeting_topic, personal)
        else:
            resolved = await self._resolve_name(config, user, channel, meeting_topic, timeout)
            if isinstance(resolved, MeetingOptions):
                await self.ask_meeting_type(config, user, channel, resolved, timeout)
                return resolved
            name = resolved

        return await self._create_meeting(config, route, user, channel, name, timeout)

    async def _resolve_name(
        self,
        config: PluginConfiguration,
        user: User,
        channel: Channel,
        meeting_topic: str,
        timeout: float,
    ) -> Union[MeetingCandidate, MeetingOptions]:
        if meeting_topic.strip():
            return resolve_meeting_name(
                NamingScheme.ENGLISH, user, channel, explicit_topic=meeting_topic
            )

        preference = await with_deadline(
            self.settings_store.get(user.id, config), timeout, "load user settings"
        )
        team: Optional[Team] = None
        if (
            preference.naming_scheme in (NamingScheme.MATTERMOST, NamingScheme.ASK)
            and not channel.type.is_personal
            and channel.team_id
        ):
            team = await with_deadline(
                self.platform.get_team(channel.team_id), timeout, "get team"
            )
        return resolve_meeting_name(preference.naming_scheme, user, channel, team)

    async def _create_meeting(
        self,
        config: PluginConfiguration,
        route: RouteConfig,
        user: User,
        channel: Channel,
        name: MeetingCandidate,
        timeout: float,
    ) -> MeetingSession:
        meeting_url = route.base_url.strip().rstrip("/") + "/" + name.meeting_id

        token: Optional[str] = None
        valid_until: Optional[datetime] = None
        if route.jwt_enabled:
            claims = self.token_service.build_claims(
                route, name.meeting_id, user, config.site, group=channel.team_id
            )
            token = self.token_service.sign(claims, route.app_secret)
            valid_until = datetime.fromtimestamp(claims.exp, UTC)
            meeting_url = f"{meeting_url}?jwt={token}"

        meeting_url = f'{meeting_url}#config.callDisplayName="{quote(name.topic)}"'

        # Shortening never fails the meeting; None means post the long URL
        short_url = await self.shortener.shorten_or_none(
            meeting_url, config.shortener, timeout=timeout
        )

        session = MeetingSession(
            meeting_id=name.meeting_id,
            topic=name.topic,
            long_url=meeting_url,
            short_url=short_url,
            token=token,
            token_valid_until=valid_until,
            is_personal=name.personal,
        )

        await with_deadline(
            self.platform.create_post(self._meeting_post(user, channel, session)),
            timeout,
            "create meeting post",
        )
        logger.info(
            f"Started meeting {session.meeting_id} in channel {channel.id} for user {user.id} "
            f"(route={route.host} jwt={route.jwt_enabled} shortened={short_url is not None})"
        )
        return session

    @staticmethod
    def _meeting_post(user: User, channel: Channel, session: MeetingSession) -> Post:
        link = session.link
        meeting_until = ""
        if session.token_valid_until:
            meeting_until = "Meeting link valid until: " + session.token_valid_until.strftime(
                "%a %b %d, %H:%M:%S UTC"
            )

        meeting_type = "Meeting Link"
        if session.is_personal:
            meeting_type = "Personal Meeting ID (PMI)"

        attachment = SlackAttachment(
            fallback=(
                f"Video Meeting started at [{session.meeting_id}]({link}).\n\n"
                f"[Join Meeting]({link})\n\n{meeting_until}"
            ),
            title=session.topic,
            text=f"{meeting_type}: [{link}]({link})\n\n[Join Meeting]({link})\n\n{meeting_until}",
        )

        return Post(
            user_id=user.id,
            channel_id=channel.id,
            type=JITSI_POST_TYPE,
            props={
                "attachments": [attachment.model_dump()],
                "meeting_id": session.meeting_id,
                "meeting_link": link,
                "meeting_raw_link": session.long_url,
                "jwt_meeting": session.token is not None,
                "meeting_jwt": session.token or "",
                "jwt_meeting_valid_until": (
                    int(session.token_valid_until.timestamp())
                    if session.token_valid_until
                    else 0
                ),
                "meeting_personal": session.is_personal,
                "meeting_topic": session.topic,
                "from_webhook": "true",
                "override_username": "Jitsi",
            },
        )

    async def ask_meeting_type(
        self,
        config: PluginConfiguration,
        user: User,
        channel: Channel,
        options: MeetingOptions,
        timeout: float,
    ) -> None:
        """Offer the precomputed candidates; each button posts back to the meetings endpoint."""
        api_url = config.integration.meetings_url
        actions = [
            PostAction(
                name=candidate.label,
                integration=PostActionIntegration(
                    url=api_url,
                    context=_action_context(candidate, config.integration.action_secret),
                ),
            )
            for candidate in options.candidates
        ]
        attachment = SlackAttachment(
            title="Jitsi Meeting Start",
            text="Select type of meeting you want to start",
            actions=actions,
        )
        post = Post(
            user_id=user.id,
            channel_id=channel.id,
            props={"attachments": [attachment.model_dump()]},
        )
        await with_deadline(
            self.platform.send_ephemeral_post(user.id, post),
            timeout,
            "send meeting type selection",
        )
        logger.debug(
            f"Offered {len(actions)} meeting names to user {user.id} in channel {channel.id}"
        )

    async def enrich_meeting_jwt(
        self,
        config: PluginConfiguration,
        user_id: str,
        token: str,
        channel_id: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> str:
        """Re-sign a meeting token with the viewing user's identity."""
        timeout = timeout or config.request_timeout_seconds
        user = await with_deadline(self.platform.get_user(user_id), timeout, "get user")

        route = config.primary
        if channel_id:
            channel = await with_deadline(
                self.platform.get_channel(channel_id), timeout, "get channel"
            )
            route = self.select_route(config, channel)

        return self.token_service.refresh_identity_context(
            token, route.app_secret, user, config.site
        )


def _action_context(candidate: MeetingCandidate, secret: str) -> Dict[str, Any]:
    context: Dict[str, Any] = {
        "meeting_id": candidate.meeting_id,
        "meeting_topic": candidate.topic,
        "personal": candidate.personal,
    }
    if secret:
        context["secret"] = secret
    return context


def _explicit_name(meeting_id: str, meeting_topic: str, personal: bool) -> MeetingCandidate:
    if not is_valid_meeting_id(meeting_id):
        raise MeetingRequestError(
            "Meeting id may only contain letters, digits and hyphens",
            {"meeting_id": meeting_id},
        )
    return MeetingCandidate(
        meeting_id=meeting_id,
        topic=meeting_topic or DEFAULT_MEETING_TOPIC,
        personal=personal,
    )
