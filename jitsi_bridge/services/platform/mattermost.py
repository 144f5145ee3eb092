"""
Mattermost REST API v4 implementation of the PlatformAPI interface.
"""

from typing import Any, Dict

import aiohttp
from loguru import logger

from jitsi_bridge.errors import LookupFailure, PlatformError
from jitsi_bridge.schemas.platform import Channel, Post, Team, User
from jitsi_bridge.services.platform.base import PlatformAPI


class MattermostRESTPlatform(PlatformAPI):
    """
    Talks to a Mattermost server with a bot access token.
    """

    def __init__(self, site_url: str, bot_token: str):
        """
        Args:
            site_url: Mattermost site URL (https://chat.example.com)
            bot_token: Personal access token of the bot account used to post
        """
        self.site_url = site_url.rstrip("/")
        self.bot_token = bot_token

    def _get_auth_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.bot_token}",
            "Content-Type": "application/json",
        }

    async def _get_object(self, kind: str, path: str, object_id: str) -> Dict[str, Any]:
        endpoint = f"{self.site_url}/api/v4/{path}/{object_id}"
        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(endpoint, headers=self._get_auth_headers()) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        raise LookupFailure(
                            kind, object_id, f"HTTP {response.status}: {error_text}"
                        )
                    return await response.json()
        except aiohttp.ClientError as e:
            raise LookupFailure(kind, object_id, str(e)) from e

    async def _post_json(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        endpoint = f"{self.site_url}/api/v4/{path}"
        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    endpoint, json=payload, headers=self._get_auth_headers()
                ) as response:
                    if response.status not in {200, 201}:
                        error_text = await response.text()
                        raise PlatformError(
                            f"Failed to create post (HTTP {response.status})",
                            {"path": path, "response": error_text},
                        )
                    return await response.json()
        except aiohttp.ClientError as e:
            raise PlatformError(f"Failed to reach Mattermost: {e}") from e

    async def get_user(self, user_id: str) -> User:
        return User.model_validate(await self._get_object("user", "users", user_id))

    async def get_channel(self, channel_id: str) -> Channel:
        return Channel.model_validate(
            await self._get_object("channel", "channels", channel_id)
        )

    async def get_team(self, team_id: str) -> Team:
        return Team.model_validate(await self._get_object("team", "teams", team_id))

    async def create_post(self, post: Post) -> Post:
        data = await self._post_json("posts", _post_payload(post))
        return _post_from_response(data, post)

    async def send_ephemeral_post(self, user_id: str, post: Post) -> Post:
        data = await self._post_json(
            "posts/ephemeral", {"user_id": user_id, "post": _post_payload(post)}
        )
        return _post_from_response(data, post)

    async def delete_ephemeral_post(self, user_id: str, post_id: str) -> None:
        # Ephemeral posts live only in the client; the REST API has no delete for them.
        logger.debug(
            f"Ephemeral post {post_id} for user {user_id} is left to expire client-side"
        )


def _post_payload(post: Post) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "channel_id": post.channel_id,
        "message": post.message,
        "props": post.props,
    }
    if post.type:
        payload["type"] = post.type
    return payload


def _post_from_response(data: Dict[str, Any], sent: Post) -> Post:
    return sent.model_copy(update={"id": data.get("id")})
