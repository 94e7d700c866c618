"""Custom exception classes for jwtcodec."""


class TokenError(Exception):
    """Base exception class for jwtcodec errors."""

    pass


class ConfigError(TokenError):
    """Configuration-related errors."""

    pass


class UnsupportedAlgorithmError(TokenError):
    """The configured signing algorithm has no implementation."""

    def __init__(self, message: str, algorithm: str | None = None):
        super().__init__(message)
        self.algorithm = algorithm


class SerializationError(TokenError):
    """Claims could not be serialized into a token payload."""

    pass


class MalformedTokenError(TokenError):
    """The token is not a well-formed three-segment compact token."""

    pass


class VerificationError(TokenError):
    """The token signature, header or issue time did not validate."""

    pass


class ExpiredTokenError(VerificationError):
    """The token carries an ``exp`` claim that lies in the past."""

    def __init__(self, message: str, expired_at: int | None = None):
        super().__init__(message)
        self.expired_at = expired_at


class ClaimNotFoundError(TokenError, KeyError):
    """A requested claim is not present in the token payload."""

    def __init__(self, claim: str):
        super().__init__(f"Claim not found: {claim!r}")
        self.claim = claim

    def __str__(self) -> str:
        return self.args[0]
