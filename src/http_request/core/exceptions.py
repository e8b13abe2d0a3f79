"""
Иерархия исключений http-request.

Классификация:
- ConfigurationError - запрос собран неправильно (опции, URL, query)
- CodecError - ошибки encode/decode тела
- ContextError - отмена или истёкший deadline
- ConfigValidationError - невалидный конфиг транспорта

Ошибки транспорта (requests.exceptions.*, httpx.*) пробрасываются как есть.
"""

from typing import Any, Optional

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class RequestBuilderError(Exception):
    """Базовое исключение http-request."""

    def __init__(self, message: str, **kwargs):
        self.message = message
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# КОНФИГУРАЦИЯ ЗАПРОСА
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ConfigurationError(RequestBuilderError):
    """Запрос не может быть собран. Не ретраить."""


class InvalidOptionTypeError(ConfigurationError):
    """
    Опция не распознана ни движком, ни одним Hook.handle_option.

    Args:
        option: Значение опции
    """

    def __init__(self, option: Any):
        self.option = option
        self.option_type = type(option).__name__
        super().__init__(f"invalid option type: {self.option_type}")


class InvalidURLError(ConfigurationError):
    """
    Итоговый URL не парсится.

    Args:
        url: URL после склейки base_url + url
        reason: Причина
    """

    def __init__(self, url: str, reason: str = ""):
        self.url = url
        msg = f"invalid url: {url!r}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class QueryBuildError(ConfigurationError):
    """Request.query не удалось превратить в query string."""


class CoercionError(ConfigurationError):
    """
    Значение не приводится к Values.

    Args:
        value_type: Имя типа
        message: Дополнительное сообщение
    """

    def __init__(self, value_type: str, message: str = ""):
        self.value_type = value_type
        msg = message or f"unsupported type {value_type}"
        super().__init__(msg)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ENCODE / DECODE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class CodecError(RequestBuilderError):
    """Ошибка кодирования или декодирования тела."""

    def __init__(self, message: str, content_type: Optional[str] = None):
        self.content_type = content_type
        super().__init__(message)


class EncodeError(CodecError):
    """Тело запроса не удалось закодировать."""


class NoEncoderError(EncodeError):
    """Ни один Hook не предоставляет encode."""

    def __init__(self):
        super().__init__("no encoder")


class DecodeError(CodecError):
    """Тело ответа не удалось декодировать."""


class NoDecoderError(DecodeError):
    """Ни один Hook не предоставляет decode."""

    def __init__(self):
        super().__init__("no decoder")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CONTEXT
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ContextError(RequestBuilderError):
    """Context запроса больше не активен."""


class ContextCancelledError(ContextError):
    """Context отменён через cancel()."""

    def __init__(self, request_id: Optional[str] = None):
        self.request_id = request_id
        msg = "context cancelled"
        if request_id:
            msg += f" (request_id: {request_id})"
        super().__init__(msg)


class DeadlineExceededError(ContextError):
    """Deadline контекста истёк до отправки запроса."""

    def __init__(self, request_id: Optional[str] = None):
        self.request_id = request_id
        msg = "context deadline exceeded"
        if request_id:
            msg += f" (request_id: {request_id})"
        super().__init__(msg)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ФАЙЛЫ КОНФИГУРАЦИИ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ConfigValidationError(RequestBuilderError):
    """
    Конфиг транспорта (env, .env, YAML, JSON) невалиден.

    Args:
        message: Описание ошибки
        source: Файл или "environment"
    """

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        super().__init__(message)
