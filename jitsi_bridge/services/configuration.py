"""
Immutable plugin configuration.

A ``PluginConfiguration`` is a frozen snapshot. Services receive the snapshot
for the request they are serving and never read the environment themselves;
``ConfigurationHolder.reload`` swaps in a new snapshot without locking readers.
"""

from dataclasses import dataclass, field
from typing import Callable, FrozenSet, Optional
from urllib.parse import urlparse

from loguru import logger

from jitsi_bridge import constants
from jitsi_bridge.enums import NamingScheme
from jitsi_bridge.errors import ConfigurationError


@dataclass(frozen=True)
class RouteConfig:
    """One Jitsi deployment and its token policy."""

    base_url: str
    jwt_enabled: bool = False
    link_valid_minutes: int = 30
    app_id: str = ""
    app_secret: str = ""

    @property
    def host(self) -> str:
        return urlparse(self.base_url.strip()).hostname or ""

    def validate(self, name: str) -> None:
        parsed = urlparse(self.base_url.strip())
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise ConfigurationError(
                f"{name}: Jitsi URL must be an absolute http(s) URL",
                {"base_url": self.base_url},
            )
        if not self.jwt_enabled:
            return
        if not self.app_id or not self.app_secret:
            raise ConfigurationError(
                f"{name}: app ID and app secret are required when JWT is enabled"
            )
        if self.link_valid_minutes <= 0:
            raise ConfigurationError(
                f"{name}: meeting link valid time must be a positive number of minutes",
                {"link_valid_minutes": self.link_valid_minutes},
            )


@dataclass(frozen=True)
class SiteSettings:
    site_url: str
    show_full_name: bool = False
    show_email_address: bool = False


@dataclass(frozen=True)
class IntegrationSettings:
    """How the chat server reaches this service and proves it is the caller."""

    service_url: str = "http://localhost:8000"
    command_token: str = ""
    action_secret: str = ""

    @property
    def meetings_url(self) -> str:
        return self.service_url.strip().rstrip("/") + constants.API_PREFIX + "/meetings"


@dataclass(frozen=True)
class ShortenerSettings:
    api_url: Optional[str] = None
    signature_secret: str = ""
    max_attempts: int = 2
    timeout_seconds: float = 3.0

    @property
    def enabled(self) -> bool:
        return bool(self.api_url)


@dataclass(frozen=True)
class PluginConfiguration:
    primary: RouteConfig
    secondary: RouteConfig
    primary_team_ids: FrozenSet[str] = frozenset()
    default_embedded: bool = False
    default_naming_scheme: NamingScheme = NamingScheme.ENGLISH
    site: SiteSettings = field(
        default_factory=lambda: SiteSettings(site_url=constants.SITE_URL)
    )
    shortener: ShortenerSettings = field(default_factory=ShortenerSettings)
    integration: IntegrationSettings = field(default_factory=IntegrationSettings)
    request_timeout_seconds: float = 10.0

    @classmethod
    def from_env(cls) -> "PluginConfiguration":
        try:
            naming_scheme = NamingScheme.parse(constants.JITSI_NAMING_SCHEME)
        except ValueError as exc:
            raise ConfigurationError(
                f"Unknown default naming scheme: {constants.JITSI_NAMING_SCHEME}"
            ) from exc

        config = cls(
            primary=RouteConfig(
                base_url=constants.JITSI_URL,
                jwt_enabled=constants.JITSI_JWT,
                link_valid_minutes=constants.JITSI_LINK_VALID_TIME,
                app_id=constants.JITSI_APP_ID,
                app_secret=constants.JITSI_APP_SECRET,
            ),
            secondary=RouteConfig(
                base_url=constants.JITSI_URL_2,
                jwt_enabled=constants.JITSI_JWT_2,
                link_valid_minutes=constants.JITSI_LINK_VALID_TIME_2,
                app_id=constants.JITSI_APP_ID_2,
                app_secret=constants.JITSI_APP_SECRET_2,
            ),
            primary_team_ids=parse_team_ids(constants.JITSI_TEAM_IDS),
            default_embedded=constants.JITSI_EMBEDDED,
            default_naming_scheme=naming_scheme,
            site=SiteSettings(
                site_url=constants.SITE_URL,
                show_full_name=constants.SHOW_FULL_NAME,
                show_email_address=constants.SHOW_EMAIL_ADDRESS,
            ),
            shortener=ShortenerSettings(
                api_url=constants.SHORTENER_API_URL,
                signature_secret=constants.SHORTENER_SIGNATURE_SECRET,
                max_attempts=constants.SHORTENER_MAX_ATTEMPTS,
                timeout_seconds=constants.SHORTENER_TIMEOUT_SECONDS,
            ),
            request_timeout_seconds=constants.REQUEST_TIMEOUT_SECONDS,
            integration=IntegrationSettings(
                service_url=constants.SERVICE_URL,
                command_token=constants.SLASH_COMMAND_TOKEN,
                action_secret=constants.ACTION_SECRET,
            ),
        )
        config.validate()
        return config

    @classmethod
    def from_values(cls, **values) -> "PluginConfiguration":
        config = cls(**values)
        config.validate()
        return config

    def validate(self) -> None:
        self.primary.validate("primary route")
        self.secondary.validate("secondary route")
        if self.request_timeout_seconds <= 0:
            raise ConfigurationError("request timeout must be positive")
        if self.shortener.max_attempts < 1:
            raise ConfigurationError("shortener needs at least one attempt")
        parsed = urlparse(self.integration.service_url.strip())
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise ConfigurationError(
                "service URL must be an absolute http(s) URL",
                {"service_url": self.integration.service_url},
            )

    def route_for_team(self, team_id: str) -> RouteConfig:
        """Teams in the primary set use the primary route, all others the secondary."""
        if team_id and team_id in self.primary_team_ids:
            return self.primary
        return self.secondary


def parse_team_ids(raw: str) -> FrozenSet[str]:
    return frozenset(part for part in raw.replace(",", " ").split() if part)


class ConfigurationHolder:
    """Holds the active configuration snapshot.

    Rebinding an attribute is atomic, so readers only ever see a complete
    snapshot, old or new.
    """

    def __init__(
        self,
        loader: Callable[[], PluginConfiguration] = PluginConfiguration.from_env,
        initial: Optional[PluginConfiguration] = None,
    ) -> None:
        self._loader = loader
        self._config = initial

    def current(self) -> PluginConfiguration:
        if self._config is None:
            self._config = self._loader()
        return self._config

    def reload(self) -> PluginConfiguration:
        """Load and validate a new snapshot. The old one stays active on failure."""
        config = self._loader()
        config.validate()
        self._config = config
        logger.info(
            f"Configuration reloaded: primary={config.primary.host} "
            f"secondary={config.secondary.host} primary_teams={len(config.primary_team_ids)}"
        )
        return config
