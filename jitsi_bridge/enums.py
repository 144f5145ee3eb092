from enum import Enum


class NamingScheme(Enum):
    """How meeting names are generated when no topic is given.

    The values are the tags persisted in user settings.
    """

    ASK = "ask"
    ENGLISH = "english-titlecase"
    UUID = "uuid"
    MATTERMOST = "mattermost"

    @classmethod
    def parse(cls, value: str) -> "NamingScheme":
        """Parse a command argument, accepting the ``words`` alias."""
        normalized = value.strip().lower()
        if normalized == "words":
            return cls.ENGLISH
        return cls(normalized)


class ChannelType(Enum):
    DIRECT = "D"
    GROUP = "G"
    OPEN = "O"
    PRIVATE = "P"

    @property
    def is_personal(self) -> bool:
        return self in (ChannelType.DIRECT, ChannelType.GROUP)


class SettingsField(Enum):
    """User settings that can be changed through ``/meet settings``"""

    EMBEDDED = "embedded"
    NAMING_SCHEME = "naming_scheme"


class CommandAction(Enum):
    HELP = "help"
    SETTINGS = "settings"
    START = "start"

    @classmethod
    def from_text(cls, action: str) -> "CommandAction":
        # Any other word is part of the meeting topic
        if action == cls.HELP.value:
            return cls.HELP
        if action == cls.SETTINGS.value:
            return cls.SETTINGS
        return cls.START


class PluginEvent(Enum):
    """Events broadcast to a single user's clients"""

    CONFIG_UPDATE = "config_update"


class TokenFailureCause(Enum):
    EXPIRED = "expired"
    INVALID_SIGNATURE = "invalid_signature"
    MALFORMED = "malformed"
    INVALID_CLAIMS = "invalid_claims"
