"""
Transport configuration from the environment and from files.

Example:
    >>> from http_request.core.env_config import load_from_env, ConfigFileLoader
    >>>
    >>> config = load_from_env()                           # HTTP_REQUEST_* variables
    >>> config = load_from_env(".env", timeout_read=120)   # .env file plus overrides
    >>> config = ConfigFileLoader.from_file("transport.yaml")
    >>> transport = SessionTransport(config)
"""

from ..exceptions import ConfigValidationError
from .file_loader import ConfigFileLoader, build_transport_config
from .loader import load_from_env
from .validator import TransportSettings

__all__ = [
    "load_from_env",
    "TransportSettings",
    "ConfigFileLoader",
    "build_transport_config",
    "ConfigValidationError",
]
