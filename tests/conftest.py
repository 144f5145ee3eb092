"""
Shared fixtures: in-memory stand-ins for the chat platform, key/value store
and event broadcast, plus a two-route configuration.
"""

from typing import Any, Dict, List, Optional, Tuple

import pytest

from jitsi_bridge.enums import ChannelType, NamingScheme
from jitsi_bridge.errors import LookupFailure
from jitsi_bridge.schemas.platform import Channel, Post, Team, User
from jitsi_bridge.services.command_service import CommandService
from jitsi_bridge.services.configuration import (
    ConfigurationHolder,
    IntegrationSettings,
    PluginConfiguration,
    RouteConfig,
    ShortenerSettings,
    SiteSettings,
)
from jitsi_bridge.services.container import ServiceContainer
from jitsi_bridge.services.jitsi_token_service import JitsiTokenService
from jitsi_bridge.services.meeting.orchestrator import MeetingOrchestrator
from jitsi_bridge.services.platform.base import EventPublisher, KVStore, PlatformAPI
from jitsi_bridge.services.settings_store import UserSettingsStore

COMMAND_TOKEN = "slash-command-token"
ACTION_SECRET = "action-secret"
PRIMARY_SECRET = "primary-secret-0123456789abcdef-0123456789"
SECONDARY_SECRET = "secondary-secret-0123456789abcdef-012345678"


class FakePlatform(PlatformAPI):
    def __init__(self) -> None:
        self.users: Dict[str, User] = {}
        self.channels: Dict[str, Channel] = {}
        self.teams: Dict[str, Team] = {}
        self.posts: List[Post] = []
        self.ephemeral_posts: List[Tuple[str, Post]] = []
        self.deleted_ephemeral: List[Tuple[str, str]] = []

    async def get_user(self, user_id: str) -> User:
        if user_id not in self.users:
            raise LookupFailure("user", user_id, "not found")
        return self.users[user_id]

    async def get_channel(self, channel_id: str) -> Channel:
        if channel_id not in self.channels:
            raise LookupFailure("channel", channel_id, "not found")
        return self.channels[channel_id]

    async def get_team(self, team_id: str) -> Team:
        if team_id not in self.teams:
            raise LookupFailure("team", team_id, "not found")
        return self.teams[team_id]

    async def create_post(self, post: Post) -> Post:
        created = post.model_copy(update={"id": f"post-{len(self.posts) + 1}"})
        self.posts.append(created)
        return created

    async def send_ephemeral_post(self, user_id: str, post: Post) -> Post:
        sent = post.model_copy(update={"id": f"ephemeral-{len(self.ephemeral_posts) + 1}"})
        self.ephemeral_posts.append((user_id, sent))
        return sent

    async def delete_ephemeral_post(self, user_id: str, post_id: str) -> None:
        self.deleted_ephemeral.append((user_id, post_id))


class InMemoryKVStore(KVStore):
    def __init__(self) -> None:
        self.data: Dict[str, bytes] = {}

    async def get(self, key: str) -> Optional[bytes]:
        return self.data.get(key)

    async def set(self, key: str, value: bytes) -> None:
        self.data[key] = value


class RecordingPublisher(EventPublisher):
    def __init__(self) -> None:
        self.events: List[Tuple[str, Optional[Dict[str, Any]], str]] = []

    async def publish(self, event, payload, user_id) -> None:
        self.events.append((event, payload, user_id))


class FakeShortener:
    """Returns a fixed short URL (or None to simulate the fallback)."""

    def __init__(self, short_url: Optional[str] = "https://sho.rt/abc") -> None:
        self.short_url = short_url
        self.requested: List[str] = []
        self.timeouts: List[Optional[float]] = []

    async def shorten_or_none(self, long_url, settings, timeout=None):
        self.requested.append(long_url)
        self.timeouts.append(timeout)
        return self.short_url


@pytest.fixture
def alice() -> User:
    return User(
        id="user-alice",
        username="alice",
        first_name="Alice",
        last_name="Liddell",
        nickname="",
        email="alice@example.com",
        last_picture_update=1700000000,
    )


@pytest.fixture
def bob() -> User:
    return User(id="user-bob", username="bob", nickname="Bobby", email="bob@example.com")


@pytest.fixture
def primary_team() -> Team:
    return Team(id="team-primary", name="engineering", display_name="Engineering")


@pytest.fixture
def other_team() -> Team:
    return Team(id="team-other", name="sales", display_name="Sales")


@pytest.fixture
def open_channel() -> Channel:
    return Channel(
        id="chan-town",
        type=ChannelType.OPEN,
        team_id="team-primary",
        name="town-square",
        display_name="Town Square",
    )


@pytest.fixture
def other_team_channel() -> Channel:
    return Channel(
        id="chan-deals",
        type=ChannelType.PRIVATE,
        team_id="team-other",
        name="deals",
        display_name="Deals",
    )


@pytest.fixture
def direct_channel() -> Channel:
    return Channel(id="chan-dm", type=ChannelType.DIRECT, name="user-alice__user-bob")


@pytest.fixture
def config() -> PluginConfiguration:
    return PluginConfiguration.from_values(
        primary=RouteConfig(
            base_url="https://meet.primary.example/",
            jwt_enabled=True,
            link_valid_minutes=30,
            app_id="primary-app",
            app_secret=PRIMARY_SECRET,
        ),
        secondary=RouteConfig(
            base_url="https://meet.secondary.example",
            jwt_enabled=True,
            link_valid_minutes=60,
            app_id="secondary-app",
            app_secret=SECONDARY_SECRET,
        ),
        primary_team_ids=frozenset({"team-primary"}),
        default_embedded=False,
        default_naming_scheme=NamingScheme.ENGLISH,
        site=SiteSettings(site_url="https://chat.example.com"),
        shortener=ShortenerSettings(),
        request_timeout_seconds=2.0,
        integration=IntegrationSettings(
            service_url="https://bridge.example.com/",
            command_token=COMMAND_TOKEN,
            action_secret=ACTION_SECRET,
        ),
    )


@pytest.fixture
def platform(alice, bob, primary_team, other_team, open_channel, other_team_channel, direct_channel):
    fake = FakePlatform()
    fake.users = {alice.id: alice, bob.id: bob}
    fake.teams = {primary_team.id: primary_team, other_team.id: other_team}
    fake.channels = {
        c.id: c for c in (open_channel, other_team_channel, direct_channel)
    }
    return fake


@pytest.fixture
def kv_store() -> InMemoryKVStore:
    return InMemoryKVStore()


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def settings_store(kv_store, publisher) -> UserSettingsStore:
    return UserSettingsStore(kv_store, publisher)


@pytest.fixture
def shortener() -> FakeShortener:
    return FakeShortener()


@pytest.fixture
def token_service() -> JitsiTokenService:
    return JitsiTokenService()


@pytest.fixture
def orchestrator(platform, settings_store, token_service, shortener) -> MeetingOrchestrator:
    return MeetingOrchestrator(platform, settings_store, token_service, shortener)


@pytest.fixture
def command_service(platform, orchestrator, settings_store) -> CommandService:
    return CommandService(platform, orchestrator, settings_store)


@pytest.fixture
def services(config, platform, settings_store, orchestrator, command_service) -> ServiceContainer:
    return ServiceContainer(
        config=ConfigurationHolder(loader=lambda: config, initial=config),
        platform=platform,
        settings_store=settings_store,
        orchestrator=orchestrator,
        commands=command_service,
    )
