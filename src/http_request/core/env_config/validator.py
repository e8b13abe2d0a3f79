"""
Pydantic settings for transport configuration from the environment.
"""

from typing import Dict, Literal, Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..config import PoolConfig, TimeoutConfig, TransportConfig
from ..logging.config import LoggingConfig


class TransportSettings(BaseSettings):
    """
    SessionTransport configuration read from environment variables.

    Reads from (highest priority first):
    1. Keyword arguments
    2. Environment variables (HTTP_REQUEST_*)
    3. .env file, when one is given
    4. Defaults

    Example .env file:
        HTTP_REQUEST_TIMEOUT_CONNECT=3
        HTTP_REQUEST_TIMEOUT_READ=60
        HTTP_REQUEST_VERIFY_SSL=false
        HTTP_REQUEST_HEADERS={"User-Agent": "billing/2.1"}
        HTTP_REQUEST_LOG_ENABLED=true
        HTTP_REQUEST_LOG_FORMAT=json

    Dict fields (headers, proxies) are parsed as JSON.
    """

    model_config = SettingsConfigDict(
        env_prefix='HTTP_REQUEST_',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    # Timeouts
    timeout_connect: float = Field(default=5.0, gt=0)
    timeout_read: float = Field(default=30.0, gt=0)

    # Connection pool
    pool_connections: int = Field(default=10, ge=1)
    pool_maxsize: int = Field(default=10, ge=1)
    pool_block: bool = Field(default=False)
    max_redirects: int = Field(default=30, ge=0)

    # Behaviour
    verify_ssl: bool = Field(default=True)
    allow_redirects: bool = Field(default=True)
    headers: Dict[str, str] = Field(default_factory=dict)
    proxies: Dict[str, str] = Field(default_factory=dict)

    # Round trip logging (off unless asked for)
    log_enabled: bool = Field(default=False)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="DEBUG")
    log_format: Literal["json", "text"] = Field(default="text")
    log_enable_console: bool = Field(default=True)
    log_file_path: Optional[str] = None

    @model_validator(mode='after')
    def check_log_output(self) -> 'TransportSettings':
        """Logging needs at least one output."""
        if self.log_enabled and not self.log_enable_console and not self.log_file_path:
            raise ValueError("log_enabled requires log_enable_console or log_file_path")
        return self

    def to_logging_config(self) -> Optional[LoggingConfig]:
        """LoggingConfig for round trip logging, None when disabled."""
        if not self.log_enabled:
            return None
        return LoggingConfig.create(
            level=self.log_level,
            format=self.log_format,
            enable_console=self.log_enable_console,
            enable_file=self.log_file_path is not None,
            file_path=self.log_file_path,
        )

    def to_transport_config(self) -> TransportConfig:
        return TransportConfig(
            timeout=TimeoutConfig(connect=self.timeout_connect, read=self.timeout_read),
            pool=PoolConfig(
                pool_connections=self.pool_connections,
                pool_maxsize=self.pool_maxsize,
                pool_block=self.pool_block,
                max_redirects=self.max_redirects,
            ),
            verify_ssl=self.verify_ssl,
            allow_redirects=self.allow_redirects,
            proxies=self.proxies,
            headers=self.headers,
            logging=self.to_logging_config(),
        )
