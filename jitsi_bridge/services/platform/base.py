"""
Interfaces to the host chat platform.

The meeting services only talk to the platform through these classes, so the
slash-command host, its REST API or an in-memory fake can be swapped freely.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from jitsi_bridge.schemas.platform import Channel, Post, Team, User


class PlatformAPI(ABC):
    """Lookups and post delivery on the host platform.

    Lookups raise ``LookupFailure`` when the object does not exist or the
    platform cannot be reached; writes raise ``PlatformError``.
    """

    @abstractmethod
    async def get_user(self, user_id: str) -> User:
        pass

    @abstractmethod
    async def get_channel(self, channel_id: str) -> Channel:
        pass

    @abstractmethod
    async def get_team(self, team_id: str) -> Team:
        pass

    @abstractmethod
    async def create_post(self, post: Post) -> Post:
        pass

    @abstractmethod
    async def send_ephemeral_post(self, user_id: str, post: Post) -> Post:
        pass

    @abstractmethod
    async def delete_ephemeral_post(self, user_id: str, post_id: str) -> None:
        pass


class KVStore(ABC):
    @abstractmethod
    async def get(self, key: str) -> Optional[bytes]:
        pass

    @abstractmethod
    async def set(self, key: str, value: bytes) -> None:
        pass


class EventPublisher(ABC):
    @abstractmethod
    async def publish(
        self, event: str, payload: Optional[Dict[str, Any]], user_id: str
    ) -> None:
        """Broadcast ``event`` to the clients of a single user."""
