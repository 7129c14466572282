"""Cryptographic digest helpers used by challenge/response authentication.

Example:
    ```python
    from rest_client_core.hashing import HashAlgorithm, hex_digest

    hex_digest("Mufasa:testrealm@host.com:Circle Of Life", HashAlgorithm.MD5)
    # '939e7578ed9e3c518a452acee763bce9'
    ```
"""

import hashlib
from collections.abc import Callable
from enum import Enum
from threading import Lock
from typing import Any


class HashAlgorithm(str, Enum):
    """Digest algorithms available to authenticators."""

    MD5 = "md5"
    SHA256 = "sha256"
    SHA512 = "sha512"


_constructor_cache: dict[HashAlgorithm, Callable[..., Any]] = {}
_constructor_lock = Lock()


def _get_constructor(algorithm: HashAlgorithm) -> Callable[..., Any]:
    constructor = _constructor_cache.get(algorithm)
    if constructor is not None:
        return constructor

    with _constructor_lock:
        # Double-check pattern for thread safety
        constructor = _constructor_cache.get(algorithm)
        if constructor is None:
            constructor = getattr(hashlib, algorithm.value)
            _constructor_cache[algorithm] = constructor
        return constructor


def get_hash_bytes(data: str | bytes, algorithm: HashAlgorithm, encoding: str = "utf-8") -> bytes:
    """Compute the raw digest of ``data``.

    Args:
        data: Bytes to hash, or text encoded with ``encoding`` first.
        algorithm: Digest algorithm to apply.
        encoding: Text encoding used when ``data`` is a string.

    Returns:
        The digest bytes.
    """
    if isinstance(data, str):
        data = data.encode(encoding)
    return _get_constructor(HashAlgorithm(algorithm))(data).digest()


def hex_digest(data: str | bytes, algorithm: HashAlgorithm, encoding: str = "utf-8") -> str:
    """Compute the lower-case hexadecimal digest of ``data``."""
    return get_hash_bytes(data, algorithm, encoding).hex()
