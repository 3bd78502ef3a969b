"""Ghink Open API client."""

import logging
from typing import Any

import httpx

from ghink_openapi.auth.credentials import KeyPair
from ghink_openapi.auth.exceptions import TokenAcquisitionError
from ghink_openapi.auth.token import TokenStore
from ghink_openapi.codec import Codec
from ghink_openapi.config import ClientConfig, Logger
from ghink_openapi.const import TOKEN_PATH
from ghink_openapi.transport.retry import RetryPolicy
from ghink_openapi.transport.sender import Sender

logger = logging.getLogger("ghink_openapi")


class Client:
    """Entry point for every Open API call.

    Holds the configuration, the shared HTTP connection pool and the bearer
    token. Safe to share between concurrent tasks on one event loop.

    Example:
        ```python
        config = ClientConfig(secret_id="id", secret_key="key")

        # Acquires the first token before returning
        client = await Client.create(config)
        try:
            result = await client.send(f"{client.endpoint}/public/shortLink/add", "POST", payload).with_token()
        finally:
            await client.aclose()
        ```
    """

    def __init__(self, config: ClientConfig, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Build a client without touching the network.

        Args:
            config: Client configuration.
            transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in tests.
        """
        self._config = config
        self._logger = config.logger or logger
        self._tokens = TokenStore(config.key_pair)
        self._retry_policy = RetryPolicy(
            max_attempts=config.max_retries,
            base_delay=config.retry_delay,
            exponential=config.exponential_backoff,
        )
        self._http = httpx.AsyncClient(timeout=config.timeout, transport=transport)
        self._has_token = False

    @classmethod
    async def create(cls, config: ClientConfig, *, transport: httpx.AsyncBaseTransport | None = None) -> "Client":
        """Build a client and, in token mode, acquire the first bearer token.

        Raises:
            TokenAcquisitionError: If token mode is enabled and no token could
                be obtained. The HTTP client is closed before raising.
        """
        client = cls(config, transport=transport)
        if config.enable_token:
            try:
                await client.refresh_token()
            except TokenAcquisitionError:
                await client.aclose()
                raise
        return client

    async def __aenter__(self) -> "Client":
        if self._config.enable_token and not self._has_token:
            try:
                await self.refresh_token()
            except TokenAcquisitionError:
                await self.aclose()
                raise
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def endpoint(self) -> str:
        return self._config.endpoint

    @property
    def codec(self) -> Codec:
        return self._config.codec

    @property
    def logger(self) -> Logger:
        return self._logger

    @property
    def key_pair(self) -> KeyPair:
        return self._tokens.key_pair

    @property
    def tokens(self) -> TokenStore:
        return self._tokens

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    @property
    def http(self) -> httpx.AsyncClient:
        return self._http

    async def token(self) -> str:
        return await self._tokens.token()

    def send(self, url: str, method: str, payload: Any = None) -> Sender:
        """Prepare a request; finish with ``.with_token()`` or ``.with_key()``."""
        return Sender.prepare(self, url, method, payload)

    async def refresh_token(self) -> str:
        """Replace the stored bearer token with a freshly acquired one."""
        token = await self._tokens.refresh(self.acquire_token)
        self._has_token = True
        return token

    async def acquire_token(self) -> str:
        """Exchange the key pair for a bearer token.

        Does not store the token; use ``refresh_token`` for that.

        Raises:
            TokenAcquisitionError: On transport failure, a non-200 code, or a
                response without a usable token.
        """
        result = await self.send(f"{self.endpoint}{TOKEN_PATH}", "GET").with_key()

        if result.err is not None:
            message = f"failed to get token, sender error: {result.err}"
            self._logger.error(message)
            raise TokenAcquisitionError(message) from result.err

        if not result.ok:
            message = f"failed to get token, upstream failed: code: {result.code}, msg: {result.msg}"
            self._logger.error(message)
            raise TokenAcquisitionError(message, code=result.code, msg=result.msg)

        try:
            data = result.unmarshal()
        except Exception as e:
            message = f"failed to get token, unmarshal error: {e}"
            self._logger.error(message)
            raise TokenAcquisitionError(message) from e

        token = data.get("token") if isinstance(data, dict) else None
        if not isinstance(token, str) or not token:
            message = "failed to get token, response carries no token"
            self._logger.error(message)
            raise TokenAcquisitionError(message, code=result.code, msg=result.msg)

        return token
