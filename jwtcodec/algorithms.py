"""Signing algorithms and the dispatch table that implements them.

Only HS256 (HMAC-SHA256) has an implementation. HS384 and HS512 are known
identifiers so that a codec can be configured with them, but any attempt to
sign or verify with one fails with :class:`UnsupportedAlgorithmError`.
Supporting another algorithm means adding an entry to ``_IMPLEMENTATIONS``.
"""

import hashlib
import hmac
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .errors import UnsupportedAlgorithmError


class Algorithm(str, Enum):
    """Algorithm identifiers as they appear in the token header ``alg`` field."""

    HS256 = "HS256"
    HS384 = "HS384"
    HS512 = "HS512"


@dataclass(frozen=True)
class SigningAlgorithm:
    """A sign/verify function pair for one algorithm."""

    algorithm: Algorithm
    sign: Callable[[bytes, bytes], bytes]
    verify: Callable[[bytes, bytes, bytes], bool]


def _hmac_sha256_sign(key: bytes, signing_input: bytes) -> bytes:
    return hmac.new(key, signing_input, hashlib.sha256).digest()


def _hmac_sha256_verify(key: bytes, signing_input: bytes, signature: bytes) -> bool:
    expected = _hmac_sha256_sign(key, signing_input)
    return hmac.compare_digest(expected, signature)


_IMPLEMENTATIONS: dict[Algorithm, SigningAlgorithm] = {
    Algorithm.HS256: SigningAlgorithm(
        Algorithm.HS256, _hmac_sha256_sign, _hmac_sha256_verify
    ),
}


def parse_algorithm(value: "Algorithm | str") -> Algorithm:
    """Resolve an identifier string or member to an :class:`Algorithm`.

    Raises:
        UnsupportedAlgorithmError: If ``value`` names no known algorithm.
    """
    if isinstance(value, Algorithm):
        return value
    try:
        return Algorithm(value)
    except ValueError:
        raise UnsupportedAlgorithmError(
            f"Unknown signing algorithm: {value!r}", algorithm=str(value)
        ) from None


def get_algorithm(value: "Algorithm | str") -> SigningAlgorithm:
    """Look up the sign/verify pair for an algorithm.

    Args:
        value: An :class:`Algorithm` member or its identifier (``"HS256"``).

    Returns:
        The :class:`SigningAlgorithm` entry from the dispatch table.

    Raises:
        UnsupportedAlgorithmError: If the algorithm is unknown or has no
            implementation.
    """
    algorithm = parse_algorithm(value)
    try:
        return _IMPLEMENTATIONS[algorithm]
    except KeyError:
        raise UnsupportedAlgorithmError(
            f"Signing algorithm {algorithm.value} is not supported",
            algorithm=algorithm.value,
        ) from None


def supported_algorithms() -> list[Algorithm]:
    """Return the algorithms that have a sign/verify implementation."""
    return list(_IMPLEMENTATIONS)
