"""
Загрузка TransportConfig из YAML и JSON файлов.

Формат (секция ``http_request`` необязательна):

    http_request:
      timeout: {connect: 3, read: 60}
      pool: {connections: 10, maxsize: 20, block: false, max_redirects: 5}
      verify_ssl: true
      allow_redirects: true
      headers: {User-Agent: billing/2.1}
      proxies: {https: "http://proxy:8080"}
      logging: {level: DEBUG, format: json}
"""

from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union
import json
import os

import yaml

from ..config import PoolConfig, TimeoutConfig, TransportConfig
from ..exceptions import ConfigValidationError
from ..logging import LoggingConfig

CONFIG_FILE_ENV = "HTTP_REQUEST_CONFIG_FILE"


class ConfigFileLoader:
    """
    Загрузчик конфигурации транспорта из файлов.

    Examples:
        >>> config = ConfigFileLoader.from_yaml("transport.yaml")
        >>> config = ConfigFileLoader.from_file("transport.json")  # по расширению
        >>> config = ConfigFileLoader.from_env_path()  # из HTTP_REQUEST_CONFIG_FILE
    """

    @staticmethod
    def from_yaml(path: Union[str, Path]) -> TransportConfig:
        """
        Загрузить конфиг из YAML файла.

        Raises:
            FileNotFoundError: Если файл не найден
            ConfigValidationError: Если конфиг невалидный
        """
        return ConfigFileLoader._load(path, yaml.safe_load, yaml.YAMLError, "YAML")

    @staticmethod
    def from_json(path: Union[str, Path]) -> TransportConfig:
        """
        Загрузить конфиг из JSON файла.

        Raises:
            FileNotFoundError: Если файл не найден
            ConfigValidationError: Если конфиг невалидный
        """
        return ConfigFileLoader._load(path, json.load, json.JSONDecodeError, "JSON")

    @staticmethod
    def from_file(path: Union[str, Path]) -> TransportConfig:
        """
        Автоопределение формата по расширению (.yaml, .yml, .json).

        Raises:
            ValueError: Если формат не поддерживается
        """
        path = Path(path)
        suffix = path.suffix.lower()

        if suffix in (".yaml", ".yml"):
            return ConfigFileLoader.from_yaml(path)
        if suffix == ".json":
            return ConfigFileLoader.from_json(path)
        raise ValueError(
            f"Unsupported config file format: {suffix}. "
            f"Supported formats: .yaml, .yml, .json"
        )

    @staticmethod
    def from_env_path() -> Optional[TransportConfig]:
        """Загрузить из файла, указанного в HTTP_REQUEST_CONFIG_FILE (None если не задан)."""
        config_path = os.environ.get(CONFIG_FILE_ENV)
        if not config_path:
            return None
        return ConfigFileLoader.from_file(config_path)

    @staticmethod
    def _load(
        path: Union[str, Path],
        parse: Callable[[Any], Any],
        syntax_error: type,
        kind: str,
    ) -> TransportConfig:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = parse(f)
        except syntax_error as e:
            raise ConfigValidationError(f"Invalid {kind} syntax in {path}: {e}", source=str(path)) from e

        if not data:
            raise ConfigValidationError(f"Empty config file: {path}", source=str(path))

        return build_transport_config(data, str(path))


def _section(data: Dict[str, Any], name: str, source: str) -> Dict[str, Any]:
    value = data.get(name, {})
    if not isinstance(value, dict):
        raise ConfigValidationError(f"{name} must be a dictionary in {source}", source=source)
    return value


def build_transport_config(data: Dict[str, Any], source: str = "<dict>") -> TransportConfig:
    """
    Собрать TransportConfig из распарсенного словаря.

    Raises:
        ConfigValidationError: Неверная структура или значения
    """
    config_data = data.get("http_request", data) if isinstance(data, dict) else data
    if not isinstance(config_data, dict):
        raise ConfigValidationError(
            f"Config must be a dictionary, got {type(config_data).__name__} in {source}",
            source=source,
        )

    timeout_data = _section(config_data, "timeout", source)
    pool_data = _section(config_data, "pool", source)
    headers = _section(config_data, "headers", source)
    proxies = _section(config_data, "proxies", source)

    logging_data = _section(config_data, "logging", source) if "logging" in config_data else None

    try:
        logging_cfg = None
        if logging_data is not None:
            logging_cfg = LoggingConfig.create(
                level=logging_data.get("level", "INFO"),
                format=logging_data.get("format", "text"),
                enable_console=logging_data.get("enable_console", True),
                enable_file=logging_data.get("enable_file", False),
                file_path=logging_data.get("file_path"),
                enable_request_id=logging_data.get("enable_request_id", True),
            )
        return TransportConfig(
            timeout=TimeoutConfig(
                connect=float(timeout_data.get("connect", 5.0)),
                read=float(timeout_data.get("read", 30.0)),
            ),
            pool=PoolConfig(
                pool_connections=pool_data.get("connections", 10),
                pool_maxsize=pool_data.get("maxsize", 10),
                pool_block=pool_data.get("block", False),
                max_redirects=pool_data.get("max_redirects", 30),
            ),
            verify_ssl=config_data.get("verify_ssl", True),
            allow_redirects=config_data.get("allow_redirects", True),
            headers={str(k): str(v) for k, v in headers.items()},
            proxies={str(k): str(v) for k, v in proxies.items()},
            logging=logging_cfg,
        )
    except (ValueError, TypeError, AttributeError) as e:
        raise ConfigValidationError(f"Invalid config in {source}: {e}", source=source) from e
