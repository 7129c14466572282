"""Authentication components for the request pipeline.

Authenticators answer ``WWW-Authenticate`` challenges on a 401 response by
rewriting the pending request's ``Authorization`` header. An
``AuthenticationPipeline`` tries them in order; the first match is applied and
the request is sent once more.

Example:
    ```python
    from rest_client_core.auth import (
        AuthenticationPipeline,
        BearerAuthenticator,
        DigestAuthenticator,
    )

    pipeline = AuthenticationPipeline(
        DigestAuthenticator("user", "secret"),
        BearerAuthenticator.from_env(prefix="BILLING_API"),
    )
    ```
"""

from rest_client_core.auth.base import Authenticator, Challenge, parse_challenges
from rest_client_core.auth.basic import BasicAuthenticator
from rest_client_core.auth.bearer import BearerAuthenticator
from rest_client_core.auth.credentials import CredentialResolver
from rest_client_core.auth.digest import DigestAuthenticator
from rest_client_core.auth.exceptions import (
    AuthenticationError,
    CredentialError,
    CredentialFileError,
    CredentialNotFoundError,
    MalformedChallengeError,
)
from rest_client_core.auth.oauth import OAuthAuthenticator
from rest_client_core.auth.pipeline import AuthenticationPipeline

__all__ = [
    "AuthenticationError",
    "AuthenticationPipeline",
    "Authenticator",
    "BasicAuthenticator",
    "BearerAuthenticator",
    "Challenge",
    "CredentialError",
    "CredentialFileError",
    "CredentialNotFoundError",
    "CredentialResolver",
    "DigestAuthenticator",
    "MalformedChallengeError",
    "OAuthAuthenticator",
    "parse_challenges",
]
