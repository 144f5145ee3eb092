"""
Client for a YOURLS-compatible link shortener.

Requests are authenticated with a time-limited signature:
``md5(timestamp + secret)``.
"""

import hashlib
import time
from typing import Any, Dict, Optional

import aiohttp
from loguru import logger

from jitsi_bridge.errors import ShortenerError
from jitsi_bridge.services.configuration import ShortenerSettings


class YourlsShortener:
    def _signed_params(self, long_url: str, settings: ShortenerSettings) -> Dict[str, str]:
        timestamp = str(int(time.time()))
        signature = hashlib.md5(
            (timestamp + settings.signature_secret).encode("utf-8")
        ).hexdigest()
        return {
            "timestamp": timestamp,
            "signature": signature,
            "action": "shorturl",
            "format": "json",
            "url": long_url,
        }

    async def shorten(
        self,
        long_url: str,
        settings: ShortenerSettings,
        timeout: Optional[float] = None,
    ) -> str:
        """
        One shortening attempt, bounded by the shorter of ``timeout`` and the
        configured per-attempt timeout.

        Raises:
            ShortenerError: on transport errors, timeouts or a response without
                a short URL
        """
        if not settings.enabled:
            raise ShortenerError("Link shortener is not configured")

        params = self._signed_params(long_url, settings)
        total = settings.timeout_seconds
        if timeout is not None:
            total = min(total, timeout)
        try:
            async with aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=total)
            ) as session:
                async with session.get(settings.api_url, params=params) as response:
                    response_text = await response.text()
                    try:
                        data: Any = await response.json(content_type=None)
                    except ValueError:
                        data = None
        except (aiohttp.ClientError, TimeoutError) as e:
            raise ShortenerError(f"Link shortener unreachable: {e!r}") from e

        short_url = data.get("shorturl") if isinstance(data, dict) else None
        if not isinstance(short_url, str) or not short_url:
            raise ShortenerError(
                f"Link shortener returned no short URL (HTTP {response.status})",
                {"response": response_text[:500]},
            )
        return short_url

    async def shorten_or_none(
        self,
        long_url: str,
        settings: ShortenerSettings,
        timeout: Optional[float] = None,
    ) -> Optional[str]:
        """Try up to ``settings.max_attempts`` times; None means use the long URL."""
        if not settings.enabled:
            return None

        for attempt in range(1, settings.max_attempts + 1):
            try:
                return await self.shorten(long_url, settings, timeout)
            except ShortenerError as e:
                logger.warning(
                    f"Shortening attempt {attempt}/{settings.max_attempts} failed: {e.message}"
                )
        logger.warning("Link shortener gave up, falling back to the long meeting URL")
        return None
