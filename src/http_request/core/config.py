"""
Конфигурация транспорта http-request.

Все конфиги immutable (frozen dataclasses) для потокобезопасности.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Optional, Tuple, Union, TYPE_CHECKING
from types import MappingProxyType

if TYPE_CHECKING:
    from .logging import LoggingConfig

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TIMEOUT CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class TimeoutConfig:
    """
    Конфигурация таймаутов.

    Args:
        connect: Таймаут подключения (сек)
        read: Таймаут чтения данных (сек)

    Examples:
        >>> TimeoutConfig(connect=5, read=30)
    """
    connect: float = 5.0
    read: float = 30.0

    def __post_init__(self):
        """Валидация."""
        if self.connect <= 0:
            raise ValueError("connect timeout must be positive")
        if self.read <= 0:
            raise ValueError("read timeout must be positive")

    def as_tuple(self) -> Tuple[float, float]:
        """Вернуть как (connect, read) для requests."""
        return (self.connect, self.read)

    def bounded(self, remaining: Optional[float]) -> Tuple[float, float]:
        """(connect, read), each capped by the time left on a Context."""
        if remaining is None:
            return self.as_tuple()
        return (min(self.connect, remaining), min(self.read, remaining))

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CONNECTION POOL CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class PoolConfig:
    """
    Конфигурация connection pool.

    Args:
        pool_connections: Количество connection pools для кеширования
        pool_maxsize: Максимум соединений в пуле
        pool_block: Блокировать при достижении лимита
        max_redirects: Максимум редиректов
    """
    pool_connections: int = 10
    pool_maxsize: int = 10
    pool_block: bool = False
    max_redirects: int = 30

    def __post_init__(self):
        """Валидация."""
        if self.pool_connections <= 0:
            raise ValueError("pool_connections must be positive")
        if self.pool_maxsize <= 0:
            raise ValueError("pool_maxsize must be positive")
        if self.max_redirects < 0:
            raise ValueError("max_redirects must be non-negative")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TRANSPORT CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _freeze_dict(d: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    """Convert dict to immutable MappingProxyType."""
    if d is None:
        return MappingProxyType({})
    return MappingProxyType(dict(d))


@dataclass(frozen=True)
class TransportConfig:
    """
    Конфигурация базового транспорта (SessionTransport, HttpxTransport).

    Args:
        timeout: Конфигурация таймаутов
        pool: Конфигурация connection pool
        verify_ssl: Проверять SSL сертификаты
        allow_redirects: Следовать редиректам
        proxies: Прокси {"https": "http://proxy:8080"}
        headers: Заголовки, добавляемые если запрос их не задал
        logging: Логирование каждого round trip (None = выключено)

    Examples:
        >>> TransportConfig(verify_ssl=False)
        >>> TransportConfig.create(timeout=(3, 60), pool_maxsize=20)
    """
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    pool: PoolConfig = field(default_factory=PoolConfig)
    verify_ssl: bool = True
    allow_redirects: bool = True
    proxies: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """Freeze mutable dicts."""
        if isinstance(self.headers, dict):
            object.__setattr__(self, 'headers', _freeze_dict(self.headers))
        if isinstance(self.proxies, dict):
            object.__setattr__(self, 'proxies', _freeze_dict(self.proxies))

    @classmethod
    def create(
        cls,
        timeout: Union[float, Tuple[float, float], TimeoutConfig] = 30,
        verify_ssl: bool = True,
        allow_redirects: bool = True,
        proxies: Optional[Dict[str, str]] = None,
        headers: Optional[Dict[str, str]] = None,
        pool_connections: Optional[int] = None,
        pool_maxsize: Optional[int] = None,
        max_redirects: Optional[int] = None,
        logging: Optional['LoggingConfig'] = None,
    ) -> 'TransportConfig':
        """
        Удобный конструктор конфигурации.

        Args:
            timeout: Таймаут (число, (connect, read) или TimeoutConfig)
            verify_ssl: Проверять SSL
            allow_redirects: Следовать редиректам
            proxies: Прокси
            headers: Заголовки по умолчанию
            pool_connections: Количество connection pools
            pool_maxsize: Максимальный размер pool
            max_redirects: Максимальное количество редиректов
            logging: Конфигурация логирования

        Examples:
            >>> TransportConfig.create(timeout=60)
            >>> TransportConfig.create(timeout=(5, 60), max_redirects=5)
        """
        pool_kwargs = {}
        if pool_connections is not None:
            pool_kwargs['pool_connections'] = pool_connections
        if pool_maxsize is not None:
            pool_kwargs['pool_maxsize'] = pool_maxsize
        if max_redirects is not None:
            pool_kwargs['max_redirects'] = max_redirects

        return cls(
            timeout=_timeout_config(timeout),
            pool=PoolConfig(**pool_kwargs),
            verify_ssl=verify_ssl,
            allow_redirects=allow_redirects,
            proxies=proxies or {},
            headers=headers or {},
            logging=logging,
        )

    def with_timeout(self, timeout: Union[float, Tuple[float, float], TimeoutConfig]) -> 'TransportConfig':
        """
        Создать новый конфиг с изменённым timeout.

        Example:
            >>> new_config = config.with_timeout((3, 10))
        """
        return replace(self, timeout=_timeout_config(timeout))

    def with_headers(self, headers: Dict[str, str]) -> 'TransportConfig':
        """Создать новый конфиг с дополнительными заголовками."""
        merged = dict(self.headers)
        merged.update(headers)
        return replace(self, headers=merged)


def _timeout_config(timeout: Union[float, Tuple[float, float], TimeoutConfig]) -> TimeoutConfig:
    if isinstance(timeout, TimeoutConfig):
        return timeout
    if isinstance(timeout, tuple):
        return TimeoutConfig(connect=timeout[0], read=timeout[1])
    return TimeoutConfig(connect=min(5.0, float(timeout)), read=float(timeout))
