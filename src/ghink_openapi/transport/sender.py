"""Request construction and authorized dispatch with retry/backoff.

A ``Sender`` captures one prepared request. Nothing is sent until a terminal
call picks the authorization mode:

```python
result = await client.send(url, "POST", {"link": "https://gh.ink"}).with_token()
if result.err is not None:
    ...
elif result.ok:
    data = result.unmarshal()
```

Failures never raise out of ``with_token()``/``with_key()``; they come back
in ``Result.err``.
"""

import enum
from typing import TYPE_CHECKING, Any

import httpx

from ghink_openapi.auth.exceptions import TokenAcquisitionError
from ghink_openapi.const import USER_AGENT
from ghink_openapi.envelope import Result, parse_envelope
from ghink_openapi.errors.exceptions import RequestBuildError, RetryExhaustedError, UpstreamError
from ghink_openapi.transport.retry import Verdict, classify

if TYPE_CHECKING:
    from ghink_openapi.client import Client


# Methods that carry a request body and get a JSON Content-Type
BODY_METHODS: frozenset[str] = frozenset(["POST", "PUT", "PATCH"])


class AuthMode(enum.Enum):
    TOKEN = "token"
    KEY = "key"


def _build_error(message: str, cause: Exception) -> RequestBuildError:
    error = RequestBuildError(f"{message}: {cause}")
    error.__cause__ = cause
    return error


class Sender:
    """Prepared request bound to a client, or the error that prevented preparing it."""

    def __init__(
        self,
        client: "Client",
        request: httpx.Request | None = None,
        error: Exception | None = None,
    ) -> None:
        self._client = client
        self._request = request
        self._error = error

    @property
    def request(self) -> httpx.Request | None:
        """Prepared request without authorization; attempts send copies of it."""
        return self._request

    @property
    def error(self) -> Exception | None:
        return self._error

    @classmethod
    def prepare(cls, client: "Client", url: str, method: str, payload: Any = None) -> "Sender":
        """Encode ``payload`` and build the request without sending it.

        Encoding or build failures are kept on the sender and reported by the
        terminal call.
        """
        method = method.upper()

        content = None
        if payload is not None:
            try:
                content = client.codec.encode(payload)
            except Exception as e:
                return cls(client, error=_build_error("failed to encode payload", e))

        headers = {}
        if method in BODY_METHODS:
            headers["Content-Type"] = "application/json"

        try:
            request = client.http.build_request(method, url, content=content, headers=headers)
        except (httpx.InvalidURL, ValueError, TypeError) as e:
            return cls(client, error=_build_error("failed to build request", e))

        return cls(client, request=request)

    async def with_token(self) -> Result:
        """Send with ``Authorization: Bearer <token>``, refreshing the token on code 801."""
        return await self._dispatch(AuthMode.TOKEN)

    async def with_key(self) -> Result:
        """Send with the key pair as ``Authorization``; code 801 is a plain retry."""
        return await self._dispatch(AuthMode.KEY)

    async def _dispatch(self, mode: AuthMode) -> Result:
        client = self._client
        if self._error is not None:
            return Result.failure(self._error, client.codec)

        context = client.retry_policy.new_context()
        last_error: Exception | None = None

        while not context.is_last_attempt:
            context.attempt += 1
            verdict, result, last_error = await self._attempt(mode, context.attempt)

            if verdict is Verdict.SUCCESS:
                return result

            if verdict is Verdict.EXPIRED and mode is AuthMode.TOKEN:
                client.logger.warning(
                    f"Request {self._request.method} {self._request.url} was denied (code {result.code}), "
                    f"renewing token in {context.delay}s (attempt {context.attempt}/{client.retry_policy.max_attempts})"
                )
                await context.backoff()
                try:
                    await client.refresh_token()
                except TokenAcquisitionError as e:
                    return Result.failure(e, client.codec)
                continue

            if context.is_last_attempt:
                break

            client.logger.warning(
                f"Request {self._request.method} {self._request.url} failed with {last_error}, "
                f"retrying in {context.delay}s (attempt {context.attempt}/{client.retry_policy.max_attempts})"
            )
            await context.backoff()

        error = RetryExhaustedError(context.attempt, last_error)
        client.logger.warning(f"Request {self._request.method} {self._request.url}: {error} (last error: {last_error})")
        return Result.failure(error, client.codec)

    def _authorized_request(self, authorization: str) -> httpx.Request:
        """Build a fresh copy of the prepared request for one attempt.

        The prepared request is never sent itself; each attempt gets its own headers.
        """
        prepared = self._request
        headers = {"Authorization": authorization, "User-Agent": USER_AGENT}
        if "Content-Type" in prepared.headers:
            headers["Content-Type"] = prepared.headers["Content-Type"]
        return self._client.http.build_request(
            prepared.method, prepared.url, content=prepared.content or None, headers=headers
        )

    async def _attempt(self, mode: AuthMode, attempt: int) -> tuple[Verdict, Result | None, Exception | None]:
        """Run one round trip and classify it.

        Returns:
            Tuple of (verdict, parsed result if any, error describing a retryable outcome)
        """
        client = self._client

        if mode is AuthMode.TOKEN:
            authorization = await client.tokens.bearer()
        else:
            authorization = client.key_pair.authorization
        request = self._authorized_request(authorization)

        client.logger.debug(f"send request to {request.url}, method {request.method} with {mode.value} (attempt {attempt})")

        try:
            response = await client.http.send(request)
        except httpx.HTTPError as e:
            return Verdict.RETRY, None, e

        result = None
        if response.status_code == 200:
            result = parse_envelope(response.content, client.codec)
            client.logger.debug(
                f"openAPI response httpCode {response.status_code}, apiCode {result.code}, msg {result.msg!r}"
            )

        verdict = classify(response.status_code, result)

        if verdict is Verdict.SUCCESS:
            return verdict, result, None

        if verdict is Verdict.EXPIRED:
            error = UpstreamError(
                f"permission denied (code {result.code}): {result.msg}", code=result.code, msg=result.msg
            )
            return verdict, result, error

        if result is None:
            error = httpx.HTTPStatusError(
                f"received HTTP status {response.status_code}", request=request, response=response
            )
            return verdict, None, error

        return verdict, result, result.err
