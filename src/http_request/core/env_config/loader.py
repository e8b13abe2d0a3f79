"""
Load TransportConfig from environment variables and .env files.
"""

from typing import Any, Optional

from pydantic import ValidationError
from pydantic_settings import SettingsError

from ..config import TransportConfig
from ..exceptions import ConfigValidationError
from .validator import TransportSettings


def load_from_env(env_file: Optional[str] = None, **overrides: Any) -> TransportConfig:
    """
    Build a TransportConfig from HTTP_REQUEST_* variables.

    Priority (highest to lowest):
    1. **overrides (TransportSettings field names)
    2. Environment variables
    3. ``env_file``
    4. Defaults

    Raises:
        ConfigValidationError: Unknown override or invalid value

    Example:
        >>> config = load_from_env(".env.production", timeout_read=120)
        >>> transport = SessionTransport(config)
    """
    unknown = set(overrides) - set(TransportSettings.model_fields)
    if unknown:
        raise ConfigValidationError(
            f"Unknown settings: {', '.join(sorted(unknown))}",
            source="overrides",
        )

    try:
        if env_file is not None:
            settings = TransportSettings(_env_file=env_file, **overrides)
        else:
            settings = TransportSettings(**overrides)
    except (ValidationError, SettingsError) as e:
        raise ConfigValidationError(
            f"Invalid environment config: {e}",
            source=env_file or "environment",
        ) from e

    return settings.to_transport_config()
