"""Authenticator capability and challenge parsing."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import httpx

logger = logging.getLogger(__name__)

WWW_AUTHENTICATE = "WWW-Authenticate"


@dataclass(frozen=True)
class Challenge:
    """One ``WWW-Authenticate`` header value split into scheme and parameters."""

    scheme: str
    parameters: str = ""

    def is_scheme(self, scheme: str) -> bool:
        return self.scheme.lower() == scheme.lower()


def parse_challenges(response: httpx.Response) -> list[Challenge]:
    """Return the challenges carried by a response, in header order.

    Each ``WWW-Authenticate`` header occurrence is one challenge; the first
    whitespace-separated token is its scheme.
    """
    challenges = []
    for value in response.headers.get_list(WWW_AUTHENTICATE):
        value = value.strip()
        if not value:
            continue
        scheme, _, parameters = value.partition(" ")
        challenges.append(Challenge(scheme=scheme, parameters=parameters.strip()))
    return challenges


class Authenticator(ABC):
    """Answers a server challenge by mutating the pending request.

    Subclasses declare the challenge ``scheme`` they answer. ``matches`` is a
    pure predicate over the response headers; ``apply`` must only be called
    for a response that ``matches`` accepted.
    """

    scheme: str = ""

    def matches(self, response: httpx.Response) -> bool:
        """Return True if any challenge on ``response`` uses this scheme."""
        return any(challenge.is_scheme(self.scheme) for challenge in parse_challenges(response))

    @abstractmethod
    async def apply(self, request: httpx.Request, response: httpx.Response) -> None:
        """Mutate ``request`` (normally its ``Authorization`` header) to satisfy ``response``."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
