"""Ordered collection of authenticators tried on a 401 response."""

from collections.abc import Iterable, Iterator, Sequence

from rest_client_core.auth.base import Authenticator
from rest_client_core.errors.exceptions import ConfigurationError


class AuthenticationPipeline(Sequence[Authenticator]):
    """Authenticators in trial order.

    Insertion order is preserved. Only the first authenticator whose
    ``matches`` accepts a 401 response is applied.

    Example:
        ```python
        pipeline = AuthenticationPipeline(
            DigestAuthenticator("user", "secret"),
            BasicAuthenticator("user", "secret"),
        )
        ```
    """

    def __init__(self, *authenticators: Authenticator | Iterable[Authenticator]):
        members: list[Authenticator] = []
        for item in authenticators:
            if isinstance(item, Authenticator):
                members.append(item)
            elif isinstance(item, Iterable):
                members.extend(item)
            else:
                members.append(item)

        for member in members:
            if not isinstance(member, Authenticator):
                raise ConfigurationError(f"Authentication pipeline members must be Authenticators, got {member!r}")

        self._authenticators = tuple(members)

    def __getitem__(self, index):
        return self._authenticators[index]

    def __len__(self) -> int:
        return len(self._authenticators)

    def __iter__(self) -> Iterator[Authenticator]:
        return iter(self._authenticators)

    def __repr__(self) -> str:
        return f"AuthenticationPipeline({', '.join(repr(a) for a in self._authenticators)})"
