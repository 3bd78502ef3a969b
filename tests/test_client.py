"""Tests for client construction and token acquisition."""

import httpx
import pytest

from ghink_openapi import Client
from ghink_openapi.auth import TokenAcquisitionError
from ghink_openapi.const import USER_AGENT
from ghink_openapi.testing import FakeUpstream, envelope_response, token_response


class TestClientCreate:
    """Test eager token acquisition at construction."""

    @pytest.mark.unit
    async def test_create_acquires_token(self, make_config, sleeps):
        """Token mode clients hold a token as soon as create() returns."""
        upstream = FakeUpstream()
        client = await Client.create(make_config(), transport=upstream.transport)
        try:
            assert await client.token() == "token-1"
            assert len(upstream.token_requests) == 1
            assert upstream.requests == []
        finally:
            await client.aclose()

    @pytest.mark.unit
    async def test_token_request_uses_key_pair(self, make_config, sleeps):
        """The token endpoint is a GET authenticated with the plaintext key pair."""
        upstream = FakeUpstream()
        client = await Client.create(make_config(), transport=upstream.transport)
        await client.aclose()

        request = upstream.token_requests[0]
        assert request.method == "GET"
        assert str(request.url) == "https://api.example.com/v3/openAPI/token"
        assert request.headers["Authorization"] == "Basic test-id:test-secret"
        assert request.headers["User-Agent"] == USER_AGENT
        assert "Content-Type" not in request.headers

    @pytest.mark.unit
    async def test_create_without_token_mode_sends_nothing(self, make_config):
        """Key-only clients do not call the token endpoint."""
        upstream = FakeUpstream()
        client = await Client.create(make_config(enable_token=False), transport=upstream.transport)
        await client.aclose()

        assert upstream.token_requests == []
        assert await client.token() == ""

    @pytest.mark.unit
    async def test_create_fails_on_business_rejection(self, make_config, sleeps):
        """A non-200 code from the token endpoint fails construction without retries."""
        upstream = FakeUpstream(tokens=[envelope_response(code=403, msg="bad key")])

        with pytest.raises(TokenAcquisitionError) as exc_info:
            await Client.create(make_config(), transport=upstream.transport)

        assert exc_info.value.code == 403
        assert exc_info.value.msg == "bad key"
        assert "code: 403" in str(exc_info.value)
        assert len(upstream.token_requests) == 1
        assert sleeps == []

    @pytest.mark.unit
    async def test_create_fails_after_transport_errors(self, make_config, sleeps):
        """Transport failures on the token endpoint are retried, then fail construction."""
        upstream = FakeUpstream(tokens=[httpx.ConnectError("connection refused")])

        with pytest.raises(TokenAcquisitionError) as exc_info:
            await Client.create(make_config(max_retries=2), transport=upstream.transport)

        assert "failed after 2 attempts" in str(exc_info.value)
        assert len(upstream.token_requests) == 2
        assert sleeps == [1.0]

    @pytest.mark.unit
    async def test_create_fails_on_missing_token(self, make_config, sleeps):
        """A success envelope without a token is an acquisition failure."""
        upstream = FakeUpstream(tokens=[envelope_response(data={"other": "value"})])

        with pytest.raises(TokenAcquisitionError, match="no token"):
            await Client.create(make_config(), transport=upstream.transport)


class TestAcquireToken:
    """Test explicit token refreshes."""

    @pytest.mark.unit
    async def test_refresh_replaces_token(self, make_config, sleeps):
        upstream = FakeUpstream()
        client = await Client.create(make_config(), transport=upstream.transport)
        try:
            assert await client.refresh_token() == "token-2"
            assert await client.token() == "token-2"
        finally:
            await client.aclose()

    @pytest.mark.unit
    async def test_failed_refresh_keeps_previous_token(self, make_config, sleeps):
        """A failed acquisition leaves the stored token untouched."""
        upstream = FakeUpstream(tokens=[token_response("first"), envelope_response(code=500, msg="down")])
        client = await Client.create(make_config(), transport=upstream.transport)
        try:
            with pytest.raises(TokenAcquisitionError):
                await client.refresh_token()
            assert await client.token() == "first"
        finally:
            await client.aclose()

    @pytest.mark.unit
    async def test_acquire_does_not_store(self, make_config, sleeps):
        upstream = FakeUpstream()
        client = Client(make_config(), transport=upstream.transport)
        try:
            assert await client.acquire_token() == "token-1"
            assert await client.token() == ""
        finally:
            await client.aclose()


class TestClientContextManager:
    """Test async context manager behaviour."""

    @pytest.mark.unit
    async def test_enter_acquires_token_once(self, make_config, sleeps):
        upstream = FakeUpstream()
        async with Client(make_config(), transport=upstream.transport) as client:
            assert await client.token() == "token-1"

        assert client.http.is_closed
        assert len(upstream.token_requests) == 1

    @pytest.mark.unit
    async def test_enter_after_create_does_not_refetch(self, make_config, sleeps):
        upstream = FakeUpstream()
        client = await Client.create(make_config(), transport=upstream.transport)
        async with client:
            pass

        assert len(upstream.token_requests) == 1

    @pytest.mark.unit
    async def test_enter_failure_closes_client(self, make_config, sleeps):
        upstream = FakeUpstream(tokens=[envelope_response(code=403)])
        client = Client(make_config(), transport=upstream.transport)

        with pytest.raises(TokenAcquisitionError):
            async with client:
                pass

        assert client.http.is_closed


class TestClientProperties:
    """Test configuration exposed by the client."""

    @pytest.mark.unit
    def test_endpoint_and_policy(self, make_config):
        client = Client(make_config(max_retries=4, retry_delay=0.5, exponential_backoff=False))

        assert client.endpoint == "https://api.example.com/v3"
        assert client.retry_policy.max_attempts == 4
        assert client.retry_policy.base_delay == 0.5
        assert client.retry_policy.exponential is False
        assert client.key_pair.secret_id == "test-id"

    @pytest.mark.unit
    def test_custom_logger(self, make_config):
        import logging

        custom = logging.getLogger("my-app.sdk")
        client = Client(make_config(logger=custom))

        assert client.logger is custom

    @pytest.mark.unit
    def test_default_logger(self, make_config):
        client = Client(make_config())

        assert client.logger.name == "ghink_openapi"
