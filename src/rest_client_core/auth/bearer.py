"""Bearer token authentication."""

import httpx

from rest_client_core.auth.base import Authenticator
from rest_client_core.auth.credentials import DEFAULT_ENV_PREFIX, CredentialResolver


class BearerAuthenticator(Authenticator):
    """Answers ``Bearer`` challenges with ``Authorization: Bearer <token>``."""

    scheme = "Bearer"

    def __init__(self, token: str):
        self.token = token

    @classmethod
    def from_env(
        cls, prefix: str = DEFAULT_ENV_PREFIX, resolver: CredentialResolver | None = None
    ) -> "BearerAuthenticator":
        """Build from ``{prefix}_TOKEN`` or the file named by ``{prefix}_TOKEN_FILE``."""
        resolver = resolver or CredentialResolver()
        return cls(resolver.resolve_token(prefix))

    async def apply(self, request: httpx.Request, response: httpx.Response) -> None:
        request.headers["Authorization"] = f"Bearer {self.token}"

    def __repr__(self) -> str:
        return "BearerAuthenticator(token=***)"
