"""Credential resolution for authenticators.

Authenticator credentials can be passed explicitly or resolved from the
environment. Resolution order (highest to lowest priority):

1. Explicitly provided value
2. Environment variable
3. .env file (python-dotenv, loaded into the environment on first use)
4. Default value

Example:
    ```python
    from rest_client_core.auth import CredentialResolver, DigestAuthenticator

    resolver = CredentialResolver()
    password = resolver.resolve(env_var_name="REST_CLIENT_PASSWORD", required=True)

    # Or let the authenticator read {PREFIX}_USERNAME / {PREFIX}_PASSWORD
    digest = DigestAuthenticator.from_env(prefix="BILLING_API", resolver=resolver)
    ```

Credential values are never logged; only the source they came from is.
"""

import logging
import os
from pathlib import Path
from threading import Lock

from dotenv import load_dotenv

from rest_client_core.auth.exceptions import CredentialFileError, CredentialNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_ENV_PREFIX = "REST_CLIENT"


class CredentialResolver:
    """Resolve credentials from explicit values, the environment, ``.env`` files and defaults.

    Args:
        dotenv_path: Path to a .env file. If None, python-dotenv searches
            parent directories.
        load_dotenv: Whether to load the .env file at all.
    """

    def __init__(self, dotenv_path: str | None = None, load_dotenv: bool = True):
        self._dotenv_loaded = False
        self._dotenv_lock = Lock()
        self._dotenv_path = dotenv_path
        self._load_dotenv_enabled = load_dotenv

        if self._load_dotenv_enabled:
            self._ensure_dotenv_loaded()

    def _ensure_dotenv_loaded(self) -> None:
        if self._dotenv_loaded:
            return

        with self._dotenv_lock:
            if self._dotenv_loaded:
                return

            try:
                load_dotenv(dotenv_path=self._dotenv_path)
                logger.debug("Loaded .env file for credential resolution")
            except OSError as e:
                logger.warning(f"Failed to load .env file: {e}")
            self._dotenv_loaded = True

    def resolve(
        self,
        *,
        value: str | None = None,
        env_var_name: str | None = None,
        default: str | None = None,
        required: bool = False,
    ) -> str | None:
        """Resolve a credential, first match wins.

        Args:
            value: Explicit value; when given, every other source is ignored.
            env_var_name: Environment variable to read (covers loaded .env values).
            default: Fallback value.
            required: Raise instead of returning None when nothing resolves.

        Raises:
            CredentialNotFoundError: If ``required`` and no source yields a value.
        """
        result = None
        source = None

        if value is not None:
            result = value
            source = "explicit parameter"
        elif env_var_name and env_var_name in os.environ:
            result = os.environ[env_var_name]
            source = f"environment variable '{env_var_name}'"
        elif default is not None:
            result = default
            source = "default value"

        if result is not None:
            logger.debug(f"Resolved credential from {source}: ***")
        elif required:
            error_msg = "Required credential not found"
            if env_var_name:
                error_msg += f" (checked env var: {env_var_name})"
            raise CredentialNotFoundError(error_msg, env_var_name=env_var_name)

        return result

    def resolve_from_file(
        self,
        *,
        file_path: str | Path | None = None,
        env_var_name: str | None = None,
        required: bool = False,
    ) -> str | None:
        """Read a credential from a file, stripped of surrounding whitespace.

        The path is taken from ``file_path`` or, failing that, from the
        environment variable ``env_var_name``. ``~`` and ``$VAR`` are expanded.

        Raises:
            CredentialFileError: If ``required`` and the file cannot be read.
        """
        path_to_use = str(file_path) if file_path is not None else None
        if path_to_use is None and env_var_name:
            path_to_use = self.resolve(env_var_name=env_var_name)

        if path_to_use is None:
            if required:
                error_msg = "No file path provided for credential resolution"
                if env_var_name:
                    error_msg += f" (env var '{env_var_name}' not set)"
                raise CredentialFileError(error_msg)
            return None

        path_obj = Path(os.path.expanduser(os.path.expandvars(path_to_use)))

        try:
            content = path_obj.read_text().strip()
        except FileNotFoundError:
            error_msg = f"Credential file not found: {path_obj}"
            if required:
                raise CredentialFileError(error_msg) from None
            logger.debug(error_msg)
            return None
        except OSError as e:
            error_msg = f"Error reading credential file {path_obj}: {e}"
            if required:
                raise CredentialFileError(error_msg) from e
            logger.warning(error_msg)
            return None

        logger.debug(f"Resolved credential from file: {path_obj} (***)")
        return content

    def resolve_user_credentials(self, prefix: str = DEFAULT_ENV_PREFIX) -> tuple[str, str]:
        """Resolve a username/password pair from ``{prefix}_USERNAME`` and ``{prefix}_PASSWORD``.

        Raises:
            CredentialNotFoundError: If either variable is unset.
        """
        username = self.resolve(env_var_name=f"{prefix}_USERNAME", required=True)
        password = self.resolve(env_var_name=f"{prefix}_PASSWORD", required=True)
        return username, password

    def resolve_token(self, prefix: str = DEFAULT_ENV_PREFIX) -> str:
        """Resolve a bearer token from ``{prefix}_TOKEN`` or the file named by ``{prefix}_TOKEN_FILE``.

        Raises:
            CredentialNotFoundError: If neither source yields a token.
        """
        token = self.resolve(env_var_name=f"{prefix}_TOKEN")
        if token is None:
            token = self.resolve_from_file(env_var_name=f"{prefix}_TOKEN_FILE")
        if token is None:
            raise CredentialNotFoundError(
                f"Bearer token not found (checked {prefix}_TOKEN and {prefix}_TOKEN_FILE)",
                env_var_name=f"{prefix}_TOKEN",
            )
        return token
