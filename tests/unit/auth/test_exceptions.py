"""Tests for authentication exceptions."""

import pytest

from rest_client_core.auth.exceptions import (
    AuthenticationError,
    CredentialError,
    CredentialFileError,
    CredentialNotFoundError,
    MalformedChallengeError,
)
from rest_client_core.errors import RestClientError


class TestAuthenticationErrorHierarchy:
    """Test the authentication exception hierarchy."""

    @pytest.mark.parametrize(
        "exc_class",
        [MalformedChallengeError, CredentialError, CredentialNotFoundError, CredentialFileError],
    )
    def test_is_authentication_error(self, exc_class):
        """Every authentication exception is an AuthenticationError and a RestClientError."""
        assert issubclass(exc_class, AuthenticationError)
        assert issubclass(exc_class, RestClientError)

    def test_credential_errors_share_base(self):
        """Credential exceptions can be caught together."""
        with pytest.raises(CredentialError):
            raise CredentialFileError("unreadable")


class TestMalformedChallengeError:
    """Test MalformedChallengeError."""

    def test_keeps_challenge(self):
        """The offending challenge parameters are preserved."""
        error = MalformedChallengeError("missing realm", challenge='nonce="abc"')

        assert str(error) == "missing realm"
        assert error.challenge == 'nonce="abc"'

    def test_challenge_defaults_to_none(self):
        """The challenge attribute is optional."""
        assert MalformedChallengeError("bad").challenge is None


class TestCredentialNotFoundError:
    """Test CredentialNotFoundError."""

    def test_env_var_name(self):
        """The checked variable name is stored."""
        error = CredentialNotFoundError("missing", env_var_name="TEST_KEY")

        assert error.env_var_name == "TEST_KEY"

    def test_env_var_name_optional(self):
        """The variable name defaults to None."""
        assert CredentialNotFoundError("missing").env_var_name is None
