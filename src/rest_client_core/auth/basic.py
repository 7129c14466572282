"""HTTP Basic authentication."""

import base64

import httpx

from rest_client_core.auth.base import Authenticator
from rest_client_core.auth.credentials import DEFAULT_ENV_PREFIX, CredentialResolver


class BasicAuthenticator(Authenticator):
    """Answers ``Basic`` challenges with ``Authorization: Basic base64(username:password)``."""

    scheme = "Basic"

    def __init__(self, username: str, password: str):
        self.username = username
        self.password = password

    @classmethod
    def from_env(
        cls, prefix: str = DEFAULT_ENV_PREFIX, resolver: CredentialResolver | None = None
    ) -> "BasicAuthenticator":
        """Build from ``{prefix}_USERNAME`` and ``{prefix}_PASSWORD``."""
        resolver = resolver or CredentialResolver()
        return cls(*resolver.resolve_user_credentials(prefix))

    def encode_credentials(self) -> str:
        return base64.b64encode(f"{self.username}:{self.password}".encode()).decode("ascii")

    async def apply(self, request: httpx.Request, response: httpx.Response) -> None:
        request.headers["Authorization"] = f"Basic {self.encode_credentials()}"

    def __repr__(self) -> str:
        return f"BasicAuthenticator(username={self.username!r})"
