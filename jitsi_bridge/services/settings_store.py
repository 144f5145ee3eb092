"""
Per-user Jitsi settings.

Records live in the platform key/value store as one JSON object per user.
Values are validated here, at the write boundary, so everything read back
is a known naming scheme.
"""

import json
from typing import Any, Dict, Optional, Tuple, Union

from loguru import logger

from jitsi_bridge.constants import USER_CONFIG_KEY_PREFIX
from jitsi_bridge.enums import NamingScheme, PluginEvent, SettingsField
from jitsi_bridge.errors import SettingsStorageError, SettingsValidationError
from jitsi_bridge.schemas.meeting import UserPreference
from jitsi_bridge.services.configuration import PluginConfiguration
from jitsi_bridge.services.platform.base import EventPublisher, KVStore

EMBEDDED_VALUES = ("true", "false")
NAMING_SCHEME_VALUES = ("words", "uuid", "mattermost", "ask")


def user_config_key(user_id: str) -> str:
    return f"{USER_CONFIG_KEY_PREFIX}{user_id}"


def parse_setting(field: str, value: str) -> Tuple[SettingsField, Union[bool, NamingScheme]]:
    """Turn raw command arguments into a typed settings change.

    Raises:
        SettingsValidationError: unknown field or a value the field does not accept
    """
    try:
        settings_field = SettingsField(field)
    except ValueError:
        raise SettingsValidationError(
            "Invalid config field, use `embedded` or `naming_scheme`.",
            value=field,
            accepted=[f.value for f in SettingsField],
        ) from None

    if settings_field == SettingsField.EMBEDDED:
        if value not in EMBEDDED_VALUES:
            raise SettingsValidationError(
                "Invalid `embedded` value, use `true` or `false`.",
                value=value,
                accepted=EMBEDDED_VALUES,
            )
        return settings_field, value == "true"

    try:
        return settings_field, NamingScheme.parse(value)
    except ValueError:
        raise SettingsValidationError(
            "Invalid `naming_scheme` value, use `words`, `uuid`, `mattermost` or `ask`.",
            value=value,
            accepted=NAMING_SCHEME_VALUES,
        ) from None


class UserSettingsStore:
    def __init__(self, kv_store: KVStore, publisher: EventPublisher):
        self.kv_store = kv_store
        self.publisher = publisher

    async def get(self, user_id: str, config: PluginConfiguration) -> UserPreference:
        """Stored preference, or the configured defaults when none was saved."""
        try:
            data = await self.kv_store.get(user_config_key(user_id))
        except Exception as e:
            raise SettingsStorageError(
                f"Unable to load settings for user {user_id}", {"error": str(e)}
            ) from e

        if data is None:
            return UserPreference(
                user_id=user_id,
                embedded=config.default_embedded,
                naming_scheme=config.default_naming_scheme,
            )

        try:
            record: Dict[str, Any] = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise SettingsStorageError(
                f"Stored settings for user {user_id} are not valid JSON"
            ) from e
        if not isinstance(record, dict):
            raise SettingsStorageError(
                f"Stored settings for user {user_id} are not a JSON object"
            )

        embedded = record.get("embedded")
        if not isinstance(embedded, bool):
            embedded = config.default_embedded

        return UserPreference(
            user_id=user_id,
            embedded=embedded,
            naming_scheme=_stored_scheme(user_id, record.get("naming_scheme")),
        )

    async def set(
        self, user_id: str, field: str, value: str, config: PluginConfiguration
    ) -> UserPreference:
        """Validate and persist one setting, then notify the user's clients."""
        settings_field, parsed = parse_setting(field, value)
        preference = await self.get(user_id, config)

        if settings_field == SettingsField.EMBEDDED:
            updated = preference.model_copy(update={"embedded": parsed})
        else:
            updated = preference.model_copy(update={"naming_scheme": parsed})

        await self.save(updated)
        return updated

    async def save(self, preference: UserPreference) -> None:
        payload = json.dumps(preference.to_record()).encode("utf-8")
        try:
            await self.kv_store.set(user_config_key(preference.user_id), payload)
        except Exception as e:
            raise SettingsStorageError(
                f"Unable to save settings for user {preference.user_id}",
                {"error": str(e)},
            ) from e

        # The record is already written; clients pick it up on their next read
        try:
            await self.publisher.publish(
                PluginEvent.CONFIG_UPDATE.value, None, preference.user_id
            )
        except Exception as e:
            logger.error(
                f"Unable to publish {PluginEvent.CONFIG_UPDATE.value} for user "
                f"{preference.user_id}: {e!r}"
            )
        logger.info(
            f"Updated settings for user {preference.user_id}: "
            f"embedded={preference.embedded} naming_scheme={preference.naming_scheme.value}"
        )


def _stored_scheme(user_id: str, raw: Optional[str]) -> NamingScheme:
    try:
        return NamingScheme(raw)
    except ValueError:
        # Only reachable if the record was written outside this store
        logger.warning(
            f"User {user_id} has unknown stored naming scheme {raw!r}, using english-titlecase"
        )
        return NamingScheme.ENGLISH
