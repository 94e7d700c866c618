"""Bearer-token authentication for Flask views.

Requires the ``flask`` extra. The application must hold a
:class:`~jwtcodec.codec.TokenCodec` under ``app.config["TOKEN_CODEC"]``.
"""

import functools
import logging

from flask import current_app, g, jsonify, request

from .errors import MalformedTokenError, VerificationError

logger = logging.getLogger(__name__)

CODEC_CONFIG_KEY = "TOKEN_CODEC"


def require_token(f):
    """Decorator that enforces Bearer token authentication.

    On success, sets ``g.claims`` to the decoded token payload::

        {
            "jti": str,
            "iat": int,
            "sub": str,
            "exp": int,   # only if the token expires
            ...           # any extra claims
        }

    On failure, returns 401 JSON.
    """
    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        auth_header = request.headers.get("Authorization", "")

        if not auth_header.startswith("Bearer "):
            return jsonify({"error": "Authorization header required"}), 401

        token = auth_header[len("Bearer "):]
        codec = current_app.config[CODEC_CONFIG_KEY]

        try:
            g.claims = codec.decode(token)
        except (MalformedTokenError, VerificationError) as e:
            logger.debug("Rejected bearer token on %s: %s", request.path, e)
            return jsonify({"error": "Invalid or expired token"}), 401

        return f(*args, **kwargs)

    return wrapper
