"""Sign, decode and verify compact signed tokens.

A token is ``base64url(header).base64url(payload).base64url(signature)``,
unpadded and ``.``-joined. Time claims (``iat``, ``exp``) are epoch
milliseconds.

Example:
    >>> codec = TokenCodec("s3cret")
    >>> token = codec.sign("alice", 60_000, {"role": "admin"})
    >>> codec.verify(token)
    True
    >>> codec.decode_key(token, "sub")
    'alice'
"""

import base64
import binascii
import json
import logging
import string
import time
import uuid
from typing import Any, Callable

from .algorithms import Algorithm, SigningAlgorithm, get_algorithm, parse_algorithm
from .errors import (
    ClaimNotFoundError,
    ConfigError,
    ExpiredTokenError,
    MalformedTokenError,
    SerializationError,
    VerificationError,
)

logger = logging.getLogger(__name__)

# Placeholder used by TokenCodec() with no secret. Only fit for tests.
DEFAULT_SECRET = "key"
DEFAULT_ALGORITHM = Algorithm.HS256

RESERVED_CLAIMS = ("jti", "iat", "sub", "exp")

_B64URL_ALPHABET = frozenset(string.ascii_letters + string.digits + "-_")
_MISSING = object()


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64url_decode(segment: str) -> bytes:
    if not set(segment) <= _B64URL_ALPHABET:
        raise MalformedTokenError("Invalid base64url characters in token")
    padding = "=" * (-len(segment) % 4)
    try:
        return base64.urlsafe_b64decode(segment + padding)
    except (binascii.Error, ValueError) as e:
        raise MalformedTokenError(f"Invalid base64url segment: {e}") from e


def _json_segment(obj: dict[str, Any]) -> str:
    return _b64url_encode(
        json.dumps(obj, separators=(",", ":"), allow_nan=False).encode("utf-8")
    )


def _decode_object(segment: str, name: str) -> dict[str, Any]:
    raw = _b64url_decode(segment)
    try:
        obj = json.loads(raw.decode("utf-8"))
    except (ValueError, RecursionError) as e:
        raise MalformedTokenError(f"Invalid {name} encoding: {e}") from e
    if not isinstance(obj, dict):
        raise MalformedTokenError(f"Token {name} is not a JSON object")
    return obj


def _is_timestamp(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def now_ms() -> int:
    """Return the current time in epoch milliseconds."""
    return int(time.time() * 1000)


class TokenCodec:
    """Issue and check tokens signed with a fixed secret and algorithm.

    The secret string is stored as base64-encoded bytes; the HMAC key is the
    decoded bytes, i.e. the UTF-8 encoding of the original secret. Instances
    hold no mutable state and can be shared between threads.
    """

    __slots__ = ("_encoded_secret", "_algorithm", "_clock", "_default_ttl_millis")

    def __init__(
        self,
        secret: str | None = None,
        algorithm: Algorithm | str = DEFAULT_ALGORITHM,
        *,
        clock: Callable[[], int] | None = None,
        default_ttl_millis: int = -1,
    ) -> None:
        """Create a codec.

        Args:
            secret: Signing secret. If None the placeholder ``DEFAULT_SECRET``
                is used and a warning is logged.
            algorithm: :class:`Algorithm` member or identifier such as
                ``"HS256"``. Known but unimplemented algorithms are accepted
                here and rejected when signing or verifying.
            clock: Callable returning the current epoch milliseconds.
            default_ttl_millis: TTL used by :meth:`sign` when none is passed.
                Negative means tokens never expire.

        Raises:
            ConfigError: If ``secret`` is an empty string.
            UnsupportedAlgorithmError: If ``algorithm`` names no known algorithm.
        """
        if secret is None:
            logger.warning(
                "No secret given, using the placeholder secret. "
                "Tokens signed this way are not secure; pass an explicit secret."
            )
            secret = DEFAULT_SECRET
        if not secret:
            raise ConfigError("Secret must not be empty")

        self._encoded_secret = base64.b64encode(secret.encode("utf-8")).decode("ascii")
        self._algorithm = parse_algorithm(algorithm)
        self._clock = clock or now_ms
        self._default_ttl_millis = default_ttl_millis

    @classmethod
    def from_config(cls, config, *, clock: Callable[[], int] | None = None) -> "TokenCodec":
        """Build a codec from a :class:`~jwtcodec.config.CodecConfig`.

        The config TTL becomes the codec's default TTL. Unlike the bare
        constructor this never falls back to the placeholder secret.

        Raises:
            ConfigError: If the config has no secret.
        """
        if not config.secret:
            raise ConfigError("Secret is required")
        return cls(
            config.secret,
            config.algorithm,
            clock=clock,
            default_ttl_millis=config.ttl_millis,
        )

    @property
    def algorithm(self) -> Algorithm:
        return self._algorithm

    @property
    def default_ttl_millis(self) -> int:
        return self._default_ttl_millis

    def __repr__(self) -> str:
        return f"TokenCodec(algorithm={self._algorithm.value!r})"

    def _key(self) -> bytes:
        return base64.b64decode(self._encoded_secret)

    # ------------------------------------------------------------------
    # Signing
    # ------------------------------------------------------------------

    def sign(
        self,
        subject: str,
        ttl_millis: int | None = None,
        claims: dict[str, Any] | None = None,
    ) -> str:
        """Build and sign a token.

        Caller claims are merged first and the reserved claims are assigned
        afterwards, so ``jti``, ``iat``, ``sub`` and ``exp`` supplied by the
        caller are always replaced. With a negative TTL the token carries no
        ``exp`` at all, even if the caller supplied one.

        Args:
            subject: Principal the token is issued for (``sub``).
            ttl_millis: Lifetime in milliseconds; ``exp = iat + ttl_millis``.
                Negative means the token never expires. None uses the
                codec's ``default_ttl_millis``.
            claims: Extra claims to carry. None is an empty map.

        Returns:
            Compact token string.

        Raises:
            SerializationError: If a claim name is not a string or a value
                cannot be encoded as JSON.
            UnsupportedAlgorithmError: If the configured algorithm has no
                implementation.
        """
        impl = get_algorithm(self._algorithm)

        payload = dict(claims) if claims else {}
        replaced = [name for name in RESERVED_CLAIMS if name in payload]
        if replaced:
            logger.debug("Replacing caller-supplied reserved claims: %s", ", ".join(replaced))
        payload.pop("exp", None)

        for name in payload:
            if not isinstance(name, str):
                raise SerializationError(f"Claim names must be strings, got {name!r}")

        if ttl_millis is None:
            ttl_millis = self._default_ttl_millis

        now = self._clock()
        payload["jti"] = str(uuid.uuid4())
        payload["iat"] = now
        payload["sub"] = subject
        if ttl_millis >= 0:
            payload["exp"] = now + ttl_millis

        header = {"alg": self._algorithm.value, "typ": "JWT"}
        try:
            header_b64 = _json_segment(header)
            payload_b64 = _json_segment(payload)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Cannot serialize claims: {e}") from e

        signing_input = f"{header_b64}.{payload_b64}"
        signature = impl.sign(self._key(), signing_input.encode("ascii"))
        return f"{signing_input}.{_b64url_encode(signature)}"

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    def _parse(self, token: str, impl: SigningAlgorithm) -> dict[str, Any]:
        """Check a token and return its payload.

        Raises only MalformedTokenError or VerificationError (and subclasses).
        """
        if not isinstance(token, str):
            raise MalformedTokenError("Token must be a string")
        parts = token.split(".")
        if len(parts) != 3:
            raise MalformedTokenError("Token does not have three segments")
        header_b64, payload_b64, sig_b64 = parts
        for part in parts:
            if not set(part) <= _B64URL_ALPHABET:
                raise MalformedTokenError("Invalid base64url characters in token")

        header = _decode_object(header_b64, "header")
        if header.get("alg") != self._algorithm.value:
            raise VerificationError(
                f"Token algorithm {header.get('alg')!r} does not match {self._algorithm.value}"
            )
        if "typ" in header and header["typ"] != "JWT":
            raise VerificationError(f"Unsupported token type {header['typ']!r}")

        signature = _b64url_decode(sig_b64)
        # Reject non-canonical encodings so that every character of the
        # signature segment is covered by the check.
        if _b64url_encode(signature) != sig_b64:
            raise VerificationError("Signature encoding is not canonical")
        signing_input = f"{header_b64}.{payload_b64}".encode("ascii")
        if not impl.verify(self._key(), signing_input, signature):
            raise VerificationError("Signature verification failed")

        payload = _decode_object(payload_b64, "payload")

        now = self._clock()
        iat = payload.get("iat")
        if iat is not None:
            if not _is_timestamp(iat):
                raise VerificationError("Invalid 'iat' in payload")
            if iat > now:
                raise VerificationError("Token was issued in the future")
        exp = payload.get("exp")
        if exp is not None:
            if not _is_timestamp(exp):
                raise VerificationError("Invalid 'exp' in payload")
            if now > exp:
                raise ExpiredTokenError("Token has expired", expired_at=exp)

        return payload

    def decode(self, token: str) -> dict[str, Any]:
        """Verify a token and return all of its claims.

        The signature is always checked against the configured key.

        Raises:
            MalformedTokenError: If the token is not a well-formed compact token.
            VerificationError: If the header, signature or ``iat`` does not validate.
            ExpiredTokenError: If ``exp`` lies in the past.
            UnsupportedAlgorithmError: If the configured algorithm has no
                implementation.
        """
        return self._parse(token, get_algorithm(self._algorithm))

    def decode_key(self, token: str, key: str, default: Any = _MISSING) -> Any:
        """Verify a token and return a single claim.

        Args:
            token: Compact token string.
            key: Claim name.
            default: Returned when the claim is absent. If omitted a missing
                claim raises :class:`ClaimNotFoundError`.

        Raises:
            ClaimNotFoundError: If the claim is absent and no default is given.
            Everything :meth:`decode` raises.
        """
        claims = self.decode(token)
        if key in claims:
            return claims[key]
        if default is _MISSING:
            raise ClaimNotFoundError(key)
        return default

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------

    def verify(self, token: str) -> bool:
        """Return True if the token is well-formed, authentic and unexpired.

        Token problems never raise; they all map to False, so an expired token
        is indistinguishable from a tampered one here. Use :meth:`decode` to
        find out why a token was rejected.

        Raises:
            UnsupportedAlgorithmError: If the configured algorithm has no
                implementation. This is a misconfigured codec, not a bad token.
        """
        impl = get_algorithm(self._algorithm)
        try:
            self._parse(token, impl)
        except (MalformedTokenError, VerificationError) as e:
            logger.debug("Token rejected: %s", e)
            return False
        return True
