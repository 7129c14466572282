"""HTTP Digest authentication (RFC 2617 challenge/response).

The authenticator answers one round per 401: every ``Digest`` challenge on the
response is parsed, hashed and written to the request's ``Authorization``
header. The nonce count (``nc``) lives on the authenticator instance, so it
keeps increasing across all requests answered by the same instance.

The hashing steps are exposed as plain functions so they can be checked
against fixed inputs:

    ```python
    ha1 = compute_ha1(None, "Mufasa", "testrealm@host.com", "Circle Of Life")
    ha2 = compute_ha2("GET", "/dir/index.html", qop="auth")
    compute_response(ha1, "dcd98b7102dd2f0e8b11d0f600bbdc7c", ha2,
                     qop="auth", nc="00000001", cnonce="0a4f113b")
    # '6629fae49393a05397450978507c4ef1'
    ```
"""

import logging
import uuid
from collections.abc import Callable
from threading import Lock
from urllib.request import parse_http_list

import httpx

from rest_client_core.auth.base import Authenticator, Challenge, parse_challenges
from rest_client_core.auth.credentials import DEFAULT_ENV_PREFIX, CredentialResolver
from rest_client_core.auth.exceptions import MalformedChallengeError
from rest_client_core.hashing import HashAlgorithm, hex_digest

logger = logging.getLogger(__name__)

SESSION_SUFFIX = "-SESS"

# Hash applied to HA1 for each challenge algorithm. SHA-512 challenges are
# answered with SHA-256 digests.
HA1_ALGORITHMS: dict[str, HashAlgorithm] = {
    "MD5": HashAlgorithm.MD5,
    "SHA-256": HashAlgorithm.SHA256,
    "SHA-512": HashAlgorithm.SHA256,
}

REQUIRED_PARAMETERS = ("realm", "nonce")


def parse_digest_parameters(parameters: str) -> dict[str, str]:
    """Parse ``key="value"`` challenge parameters into a dict.

    Keys are lower-cased; values are unquoted and trimmed. Commas inside
    quoted values (``qop="auth,auth-int"``) do not split the value.
    """
    result = {}
    for item in parse_http_list(parameters):
        key, sep, value = item.partition("=")
        if not sep:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] == '"':
            value = value[1:-1]
        result[key.strip().lower()] = value.strip()
    return result


def select_qop(qop: str) -> str:
    """Pick the directive to answer from a challenge's qop list, preferring ``auth``.

    Raises:
        MalformedChallengeError: If neither ``auth`` nor ``auth-int`` is offered.
    """
    directives = [directive.strip().lower() for directive in qop.split(",") if directive.strip()]
    if "auth" in directives:
        return "auth"
    if "auth-int" in directives:
        return "auth-int"
    raise MalformedChallengeError(f"Unsupported Digest qop: {qop!r}", challenge=qop)


def format_nonce_count(nonce_count: int) -> str:
    return f"{nonce_count:08d}"


def compute_ha1(
    algorithm: str | None,
    username: str,
    realm: str,
    password: str,
    nonce: str = "",
    cnonce: str = "",
) -> str:
    """Compute HA1 over the credentials.

    ``algorithm`` None means MD5. ``-sess`` variants rehash with ``nonce`` and ``cnonce``.

    Raises:
        MalformedChallengeError: If the algorithm is not supported.
    """
    name = (algorithm or "MD5").upper()
    session = name.endswith(SESSION_SUFFIX)
    base_name = name[: -len(SESSION_SUFFIX)] if session else name

    hash_algorithm = HA1_ALGORITHMS.get(base_name)
    if hash_algorithm is None:
        raise MalformedChallengeError(f"Unsupported Digest algorithm: {algorithm!r}", challenge=algorithm)

    ha1 = hex_digest(f"{username}:{realm}:{password}", hash_algorithm)
    if session:
        ha1 = hex_digest(f"{ha1}:{nonce}:{cnonce}", hash_algorithm)
    return ha1


def compute_ha2(method: str, uri: str, qop: str | None = None, body: bytes = b"") -> str:
    """Compute HA2 over the method and uri, plus the body hash for ``auth-int``."""
    if qop == "auth-int":
        return hex_digest(f"{method}:{uri}:{hex_digest(body, HashAlgorithm.MD5)}", HashAlgorithm.MD5)
    return hex_digest(f"{method}:{uri}", HashAlgorithm.MD5)


def compute_response(
    ha1: str,
    nonce: str,
    ha2: str,
    qop: str | None = None,
    nc: str | None = None,
    cnonce: str | None = None,
) -> str:
    """Compute the ``response`` value; ``nc`` and ``cnonce`` are only used with a qop."""
    if qop is None:
        return hex_digest(f"{ha1}:{nonce}:{ha2}", HashAlgorithm.MD5)
    return hex_digest(f"{ha1}:{nonce}:{nc}:{cnonce}:{qop}:{ha2}", HashAlgorithm.MD5)


def generate_client_nonce() -> str:
    return str(uuid.uuid4())[:8]


class DigestAuthenticator(Authenticator):
    """Answers ``Digest`` challenges.

    Args:
        username: Account name.
        password: Account password.
        cnonce_factory: Produces the client nonce for each answered challenge.

    The nonce count starts at 1 and advances by one for every challenge
    answered, across every request sent through this instance.
    """

    scheme = "Digest"

    def __init__(self, username: str, password: str, *, cnonce_factory: Callable[[], str] | None = None):
        self.username = username
        self.password = password
        self._cnonce_factory = cnonce_factory or generate_client_nonce
        self._nonce_count = 1
        self._nonce_count_lock = Lock()

    @classmethod
    def from_env(
        cls, prefix: str = DEFAULT_ENV_PREFIX, resolver: CredentialResolver | None = None
    ) -> "DigestAuthenticator":
        """Build from ``{prefix}_USERNAME`` and ``{prefix}_PASSWORD``."""
        resolver = resolver or CredentialResolver()
        return cls(*resolver.resolve_user_credentials(prefix))

    @property
    def nonce_count(self) -> int:
        """The ``nc`` value the next answered challenge will use."""
        return self._nonce_count

    def _take_nonce_count(self) -> int:
        with self._nonce_count_lock:
            nonce_count = self._nonce_count
            self._nonce_count += 1
            return nonce_count

    async def apply(self, request: httpx.Request, response: httpx.Response) -> None:
        body = None
        for challenge in parse_challenges(response):
            if not challenge.is_scheme(self.scheme):
                continue

            parameters = parse_digest_parameters(challenge.parameters)
            qop = select_qop(parameters["qop"]) if "qop" in parameters else None
            if qop == "auth-int" and body is None:
                body = await request.aread()

            request.headers["Authorization"] = self.build_authorization(
                request, challenge, parameters, qop=qop, body=body or b""
            )

    def build_authorization(
        self,
        request: httpx.Request,
        challenge: Challenge,
        parameters: dict[str, str],
        qop: str | None = None,
        body: bytes = b"",
    ) -> str:
        """Build the ``Authorization`` header value answering one challenge.

        Raises:
            MalformedChallengeError: If ``realm`` or ``nonce`` is missing, or the
                algorithm is not supported.
        """
        for name in REQUIRED_PARAMETERS:
            if name not in parameters:
                raise MalformedChallengeError(
                    f"Digest challenge is missing '{name}'", challenge=challenge.parameters
                )

        realm = parameters["realm"]
        nonce = parameters["nonce"]
        uri = request.url.raw_path.decode("ascii").split("?", 1)[0]
        cnonce = self._cnonce_factory()

        ha1 = compute_ha1(parameters.get("algorithm"), self.username, realm, self.password, nonce, cnonce)
        ha2 = compute_ha2(request.method, uri, qop=qop, body=body)
        nc = format_nonce_count(self._take_nonce_count())

        logger.debug(f"Answering Digest challenge for realm '{realm}' (nc={nc}, qop={qop})")

        fields = [
            f'username="{self.username}"',
            f'realm="{realm}"',
            f'nonce="{nonce}"',
            f'uri="{uri}"',
        ]
        if "opaque" in parameters:
            fields.append(f'opaque="{parameters["opaque"]}"')
        if qop is not None:
            fields.append(f'qop="{qop}"')
            fields.append(f'nc="{nc}"')
            fields.append(f'cnonce="{cnonce}"')
            fields.append(f'response="{compute_response(ha1, nonce, ha2, qop=qop, nc=nc, cnonce=cnonce)}"')
        else:
            fields.append(f'response="{compute_response(ha1, nonce, ha2)}"')

        return f"Digest {', '.join(fields)}"

    def __repr__(self) -> str:
        return f"DigestAuthenticator(username={self.username!r})"
