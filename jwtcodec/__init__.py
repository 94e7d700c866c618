"""jwtcodec - compact signed tokens (JWT-style) for Python.

Issue tokens carrying a subject, issue time, optional expiry and arbitrary
claims, signed with HMAC-SHA256, and later decode or verify them.

Example:
    >>> from jwtcodec import TokenCodec
    >>> codec = TokenCodec("s3cret")
    >>> token = codec.sign("alice", 60_000, {"role": "admin"})
    >>> codec.verify(token)
    True
    >>> codec.decode(token)["role"]
    'admin'
"""

from .algorithms import Algorithm, get_algorithm, supported_algorithms
from .codec import TokenCodec, DEFAULT_SECRET, RESERVED_CLAIMS
from .config import CodecConfig, load_config, save_config, get_default_config_path
from .errors import (
    TokenError,
    ConfigError,
    UnsupportedAlgorithmError,
    SerializationError,
    MalformedTokenError,
    VerificationError,
    ExpiredTokenError,
    ClaimNotFoundError,
)

__version__ = "1.0.0"
__all__ = [
    # Main class
    "TokenCodec",
    # Algorithms
    "Algorithm",
    "get_algorithm",
    "supported_algorithms",
    # Constants
    "DEFAULT_SECRET",
    "RESERVED_CLAIMS",
    # Config
    "CodecConfig",
    "load_config",
    "save_config",
    "get_default_config_path",
    # Errors
    "TokenError",
    "ConfigError",
    "UnsupportedAlgorithmError",
    "SerializationError",
    "MalformedTokenError",
    "VerificationError",
    "ExpiredTokenError",
    "ClaimNotFoundError",
]
