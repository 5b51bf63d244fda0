"""Tests for the auth provider client."""

from unittest.mock import MagicMock

import httpx
import pytest

from storehub.infrastructure.auth_client import (
    AuthClient,
    Identity,
    extract_access_token,
)
from storehub.infrastructure.observability import ErrorReporter


def make_client(handler, reporter: MagicMock | None = None) -> AuthClient:
    """Auth client backed by a mock transport."""
    return AuthClient(
        base_url="https://project.supabase.example/",
        anon_key="anon-key",
        reporter=reporter or MagicMock(spec=ErrorReporter),
        transport=httpx.MockTransport(handler),
    )


class TestExtractAccessToken:
    """Tests for extract_access_token."""

    def test_bearer_header(self) -> None:
        """Bearer header wins over the cookie."""
        assert extract_access_token("Bearer abc", {"sb-access-token": "cookie"}) == "abc"

    def test_cookie_fallback(self) -> None:
        """The session cookie is used without a usable header."""
        assert extract_access_token(None, {"sb-access-token": "cookie"}) == "cookie"
        assert extract_access_token("Basic xyz", {"sb-access-token": "cookie"}) == "cookie"

    def test_nothing(self) -> None:
        """No header and no cookie means no token."""
        assert extract_access_token(None, {}) is None
        assert extract_access_token("Bearer ", None) is None


class TestGetUser:
    """Tests for AuthClient.get_user."""

    @pytest.mark.asyncio
    async def test_valid_token(self) -> None:
        """200 resolves to an identity; token and anon key are sent."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"id": "user-1", "email": "a@example.com"})

        identity = await make_client(handler).get_user("tok")

        assert identity == Identity(id="user-1", email="a@example.com")
        assert seen[0].url.path == "/auth/v1/user"
        assert seen[0].headers["Authorization"] == "Bearer tok"
        assert seen[0].headers["apikey"] == "anon-key"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [401, 403])
    async def test_rejected_token(self, status_code: int) -> None:
        """Rejected tokens mean no identity and are not reported."""
        reporter = MagicMock(spec=ErrorReporter)
        client = make_client(lambda request: httpx.Response(status_code), reporter)

        assert await client.get_user("expired") is None
        reporter.report.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_token_skips_request(self) -> None:
        """No token, no request."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("request should not be sent")

        assert await make_client(handler).get_user(None) is None

    @pytest.mark.asyncio
    async def test_transport_error_reported(self) -> None:
        """Provider outages are reported and treated as anonymous."""
        reporter = MagicMock(spec=ErrorReporter)

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        assert await make_client(handler, reporter).get_user("tok") is None
        assert reporter.report.call_args.args[0] == "auth.get_user"

    @pytest.mark.asyncio
    async def test_unexpected_status_reported(self) -> None:
        """Server errors are reported and treated as anonymous."""
        reporter = MagicMock(spec=ErrorReporter)
        client = make_client(lambda request: httpx.Response(502), reporter)

        assert await client.get_user("tok") is None
        reporter.report.assert_called_once()
