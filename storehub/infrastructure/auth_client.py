"""Auth provider HTTP client.

Resolves an access token to the signed-in identity through the hosted auth
provider's user endpoint (Supabase Auth / GoTrue). Sign-in, session cookies
and sign-out are handled by the provider itself.
"""

from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from storehub.infrastructure.config import settings
from storehub.infrastructure.observability import ErrorReporter, get_error_reporter

logger = structlog.get_logger()

ACCESS_TOKEN_COOKIE = "sb-access-token"


@dataclass(frozen=True)
class Identity:
    """Signed-in user as reported by the auth provider."""

    id: str
    email: str | None = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "Identity":
        """Create from the provider's user payload.

        Args:
            data: API response data.

        Returns:
            Identity instance.
        """
        return cls(id=str(data["id"]), email=data.get("email"))


def extract_access_token(
    authorization: str | None,
    cookies: dict[str, str] | None = None,
) -> str | None:
    """Pick the caller's access token.

    The ``Authorization: Bearer`` header wins over the session cookie.

    Args:
        authorization: Raw Authorization header value.
        cookies: Request cookies.

    Returns:
        Token, or None when the caller sent none.
    """
    if authorization:
        parts = authorization.split(" ", 1)
        if len(parts) == 2 and parts[0].lower() == "bearer" and parts[1].strip():
            return parts[1].strip()
    token = (cookies or {}).get(ACCESS_TOKEN_COOKIE)
    return token or None


class AuthClient:
    """HTTP client for the auth provider.

    Example usage:
        client = get_auth_client()
        identity = await client.get_user(token)
        if identity is None:
            ...  # anonymous
    """

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        timeout: float = 5.0,
        reporter: ErrorReporter | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize auth client.

        Args:
            base_url: Auth provider project URL.
            anon_key: Public (anon) API key of the project.
            timeout: Request timeout in seconds.
            reporter: Error reporter (defaults to the global one).
            transport: Optional httpx transport (used by tests).
        """
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout
        self.reporter = reporter or get_error_reporter()
        self.transport = transport

    async def get_user(self, token: str | None) -> Identity | None:
        """Resolve an access token to an identity.

        Args:
            token: Caller's access token.

        Returns:
            Identity on success; None when the token is missing, rejected,
            or the provider could not be reached.
        """
        if not token:
            return None

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = await client.get(
                    "/auth/v1/user",
                    headers={
                        "Authorization": f"Bearer {token}",
                        "apikey": self.anon_key,
                    },
                )
        except httpx.HTTPError as e:
            self.reporter.report("auth.get_user", e)
            return None

        if response.status_code in (401, 403):
            logger.info("Access token rejected", status_code=response.status_code)
            return None

        if response.status_code != 200:
            self.reporter.report(
                "auth.get_user",
                f"Unexpected status {response.status_code}",
                {"status_code": response.status_code},
            )
            return None

        try:
            return Identity.from_api_response(response.json())
        except (KeyError, ValueError) as e:
            self.reporter.report("auth.get_user.decode", e)
            return None


# Global client instance
_auth_client: AuthClient | None = None


def get_auth_client() -> AuthClient:
    """Get the auth client singleton.

    Returns:
        AuthClient instance.
    """
    global _auth_client
    if _auth_client is None:
        _auth_client = AuthClient(
            base_url=settings.supabase_url,
            anon_key=settings.supabase_anon_key,
            timeout=settings.auth_timeout_seconds,
        )
    return _auth_client


def reset_auth_client() -> None:
    """Drop the singleton so the next call rebuilds it from settings."""
    global _auth_client
    _auth_client = None
