"""Exceptions raised by authenticators and credential resolution.

Example:
    ```python
    from rest_client_core.auth.exceptions import MalformedChallengeError

    try:
        await authenticator.apply(request, response)
    except MalformedChallengeError as e:
        print(f"Server sent an unusable challenge: {e.challenge}")
    ```
"""

from rest_client_core.errors.exceptions import RestClientError


class AuthenticationError(RestClientError):
    """Base exception for authentication errors."""

    pass


class MalformedChallengeError(AuthenticationError):
    """Raised when a matched challenge lacks fields required to answer it.

    The authentication attempt is abandoned; the request is not retried.

    Attributes:
        challenge: The raw ``WWW-Authenticate`` parameters that failed to parse.
    """

    def __init__(self, message: str, challenge: str | None = None):
        super().__init__(message)
        self.challenge = challenge


class CredentialError(AuthenticationError):
    """Base exception for credential-related errors.

    All credential-specific exceptions inherit from this class,
    making it easy to catch any credential-related error.
    """

    pass


class CredentialNotFoundError(CredentialError):
    """Raised when a required credential cannot be resolved.

    Attributes:
        env_var_name: The environment variable name that was checked (if any).
    """

    def __init__(self, message: str, env_var_name: str | None = None):
        super().__init__(message)
        self.env_var_name = env_var_name


class CredentialFileError(CredentialError):
    """Raised when a credential file cannot be read."""

    pass
