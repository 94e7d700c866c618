"""Configuration management for jwtcodec."""

import json
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any

from .algorithms import Algorithm
from .errors import ConfigError

DEFAULT_CONFIG_FILENAME = ".jwtcodec.json"

ENV_SECRET = "JWT_SECRET"
ENV_ALGORITHM = "JWT_ALGORITHM"
ENV_TTL_MILLIS = "JWT_TTL_MILLIS"


@dataclass
class CodecConfig:
    """Settings for building a :class:`~jwtcodec.codec.TokenCodec`."""

    secret: str = ""
    algorithm: str = Algorithm.HS256.value
    ttl_millis: int = -1

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CodecConfig":
        """Create config from dictionary."""
        # Accept camelCase keys as well
        return cls(
            secret=data.get("secret", ""),
            algorithm=data.get("algorithm", Algorithm.HS256.value),
            ttl_millis=_parse_ttl(data.get("ttl_millis", data.get("ttlMillis", -1))),
        )


def _parse_ttl(value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"Invalid TTL: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid TTL: {value!r}") from e


def get_default_config_path() -> Path:
    """Get the default config file path (~/.jwtcodec.json)."""
    return Path.home() / DEFAULT_CONFIG_FILENAME


def apply_env_overrides(config: CodecConfig) -> CodecConfig:
    """Override config fields from JWT_SECRET, JWT_ALGORITHM and JWT_TTL_MILLIS.

    Returns:
        The same config instance.

    Raises:
        ConfigError: If JWT_TTL_MILLIS is not an integer.
    """
    secret = os.environ.get(ENV_SECRET)
    if secret:
        config.secret = secret
    algorithm = os.environ.get(ENV_ALGORITHM)
    if algorithm:
        config.algorithm = algorithm
    ttl = os.environ.get(ENV_TTL_MILLIS)
    if ttl:
        config.ttl_millis = _parse_ttl(ttl)
    return config


def load_config(config_path: Path | str | None = None, use_env: bool = True) -> CodecConfig:
    """Load configuration from file, then apply environment overrides.

    Args:
        config_path: Path to config file. If None, uses default path.
        use_env: Apply JWT_* environment overrides on top of the file.

    Returns:
        CodecConfig instance.

    Raises:
        ConfigError: If config file exists but cannot be parsed.
    """
    if config_path is None:
        config_path = get_default_config_path()
    else:
        config_path = Path(config_path)

    if not config_path.exists():
        config = CodecConfig()
    else:
        try:
            with open(config_path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in config file: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read config file: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError("Config file must contain a JSON object")
        config = CodecConfig.from_dict(data)

    if use_env:
        apply_env_overrides(config)
    return config


def save_config(config: CodecConfig, config_path: Path | str | None = None) -> None:
    """Write codec settings as JSON, readable only by the owner.

    The file holds the signing secret, so it is written to a temporary
    sibling with mode 0600 and then moved into place.

    Args:
        config: Settings to persist.
        config_path: Destination. Defaults to ``~/.jwtcodec.json``.

    Raises:
        ConfigError: If the file cannot be written.
    """
    path = get_default_config_path() if config_path is None else Path(config_path)
    tmp = path.with_name(path.name + ".tmp")

    try:
        fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(config.to_dict(), f, indent=2)
            f.write("\n")
        os.replace(tmp, path)
    except OSError as e:
        raise ConfigError(f"Cannot write config file {path}: {e}") from e
