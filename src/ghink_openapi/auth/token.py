"""Bearer token state shared by every call on a client.

The token has no tracked expiry. It is considered stale only when the upstream
answers with code 801, at which point the caller refreshes it.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from ghink_openapi.auth.credentials import KeyPair

logger = logging.getLogger(__name__)


class TokenStore:
    """Hold the key pair and the current bearer token.

    Reads and refreshes go through one ``asyncio.Lock``. A reader never sees a
    token mid-update, and concurrent refreshes run one after another (each one
    still hits the token endpoint; there is no single-flight deduplication).
    """

    def __init__(self, key_pair: KeyPair, token: str = ""):
        self._key_pair = key_pair
        self._token = token
        self._lock = asyncio.Lock()
        self.refresh_count = 0

    @property
    def key_pair(self) -> KeyPair:
        return self._key_pair

    async def token(self) -> str:
        async with self._lock:
            return self._token

    async def bearer(self) -> str:
        """``Authorization`` header value for token mode."""
        return f"Bearer {await self.token()}"

    async def refresh(self, fetch: Callable[[], Awaitable[str]]) -> str:
        """Replace the token with the one returned by ``fetch``.

        The lock is held only while ``fetch`` runs. If ``fetch`` raises, the
        previous token is kept and the exception propagates.
        """
        async with self._lock:
            token = await fetch()
            self._token = token
            self.refresh_count += 1
        logger.debug(f"Bearer token refreshed (refresh #{self.refresh_count})")
        return token
