"""Testing utilities for code built on the SDK.

``FakeUpstream`` is an ``httpx.MockTransport`` handler that plays the Open API:
it hands out tokens on the token endpoint and replays scripted responses for
every other request.

Example:
    ```python
    import httpx

    from ghink_openapi import Client, ClientConfig
    from ghink_openapi.testing import FakeUpstream, envelope_response


    async def test_add_link():
        upstream = FakeUpstream([httpx.ConnectError("refused"), envelope_response(data={"linkID": "abc"})])
        config = ClientConfig(secret_id="id", secret_key="key", retry_delay=0)
        async with Client(config, transport=upstream.transport) as client:
            ...
        assert len(upstream.requests) == 2
    ```
"""

from collections.abc import Callable, Iterable
from typing import Any

import httpx

from ghink_openapi.codec import Codec, JSONCodec
from ghink_openapi.const import CODE_OK, TOKEN_PATH

ResponseItem = httpx.Response | Exception | Callable[[httpx.Request], httpx.Response]


def encode_envelope(code: int, msg: str = "", data: Any = None, codec: Codec | None = None) -> bytes:
    """Encode a ``{code, msg, data}`` envelope the way the upstream sends it."""
    codec = codec or JSONCodec()
    return codec.encode({"code": code, "msg": msg, "data": data})


def envelope_response(
    code: int = CODE_OK, msg: str = "ok", data: Any = None, *, status_code: int = 200
) -> httpx.Response:
    return httpx.Response(
        status_code,
        headers={"Content-Type": "application/json"},
        content=encode_envelope(code, msg, data),
    )


def token_response(token: str) -> httpx.Response:
    return envelope_response(data={"token": token})


class FakeUpstream:
    """Scripted Open API upstream.

    Args:
        responses: Replies for non-token requests, consumed in order; the last
            one repeats. Each item is an ``httpx.Response`` (copied per use), an
            exception (raised, e.g. ``httpx.ConnectError``), or a callable
            receiving the request.
        tokens: Replies for the token endpoint, same rules. Defaults to
            issuing ``token-1``, ``token-2``, ...

    Attributes:
        requests: Every non-token request received.
        token_requests: Every token endpoint request received.
    """

    def __init__(
        self,
        responses: Iterable[ResponseItem] | None = None,
        tokens: Iterable[ResponseItem] | None = None,
    ) -> None:
        self._responses = list(responses or [envelope_response()])
        self._tokens = list(tokens) if tokens is not None else None
        self.requests: list[httpx.Request] = []
        self.token_requests: list[httpx.Request] = []
        self._authorizations: list[str | None] = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    @property
    def authorizations(self) -> list[str | None]:
        """``Authorization`` header of every non-token request as received, in order."""
        return list(self._authorizations)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith(TOKEN_PATH):
            self.token_requests.append(request)
            if self._tokens is None:
                return token_response(f"token-{len(self.token_requests)}")
            return self._reply(self._tokens, len(self.token_requests), request)

        self.requests.append(request)
        self._authorizations.append(request.headers.get("Authorization"))
        return self._reply(self._responses, len(self.requests), request)

    @staticmethod
    def _reply(items: list[ResponseItem], count: int, request: httpx.Request) -> httpx.Response:
        item = items[min(count, len(items)) - 1]
        if isinstance(item, Exception):
            raise item
        if isinstance(item, httpx.Response):
            return httpx.Response(item.status_code, headers=item.headers, content=item.content)
        return item(request)


__all__ = [
    "FakeUpstream",
    "encode_envelope",
    "envelope_response",
    "token_response",
]
