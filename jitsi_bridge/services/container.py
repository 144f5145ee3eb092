from dataclasses import dataclass

from fastapi import Request

from jitsi_bridge.services.command_service import CommandService
from jitsi_bridge.services.configuration import ConfigurationHolder
from jitsi_bridge.services.jitsi_token_service import JitsiTokenService
from jitsi_bridge.services.meeting.orchestrator import MeetingOrchestrator
from jitsi_bridge.services.platform.base import EventPublisher, KVStore, PlatformAPI
from jitsi_bridge.services.settings_store import UserSettingsStore
from jitsi_bridge.services.shortener import YourlsShortener


@dataclass
class ServiceContainer:
    config: ConfigurationHolder
    platform: PlatformAPI
    settings_store: UserSettingsStore
    orchestrator: MeetingOrchestrator
    commands: CommandService

    @classmethod
    def build(
        cls,
        config: ConfigurationHolder,
        platform: PlatformAPI,
        kv_store: KVStore,
        publisher: EventPublisher,
    ) -> "ServiceContainer":
        settings_store = UserSettingsStore(kv_store, publisher)
        orchestrator = MeetingOrchestrator(
            platform, settings_store, JitsiTokenService(), YourlsShortener()
        )
        return cls(
            config=config,
            platform=platform,
            settings_store=settings_store,
            orchestrator=orchestrator,
            commands=CommandService(platform, orchestrator, settings_store),
        )


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services
