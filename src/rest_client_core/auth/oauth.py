"""OAuth authentication placeholder."""

import httpx

from rest_client_core.auth.base import Authenticator


class OAuthAuthenticator(Authenticator):
    """Reserved slot for OAuth challenge handling.

    Never matches a response, so it is safe to keep in a pipeline;
    calling ``apply`` directly raises ``NotImplementedError``.
    """

    scheme = "OAuth"

    def matches(self, response: httpx.Response) -> bool:
        return False

    async def apply(self, request: httpx.Request, response: httpx.Response) -> None:
        raise NotImplementedError("OAuth authentication is not implemented")
