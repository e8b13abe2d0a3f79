# src/http_request/hooks/auth.py
"""Hooks для аутентификации (Bearer, Basic, API key)."""

import requests
from requests.auth import HTTPBasicAuth

from ..core.extension import Hook, HookOrder


def bearer_auth(token: str) -> Hook:
    """
    Authorization: Bearer <token>

    Args:
        token: Токен доступа
    """
    def on_request(request: requests.PreparedRequest) -> None:
        request.headers["Authorization"] = f"Bearer {token}"

    return Hook(name="bearer_auth", order=HookOrder.AUTH, on_request=on_request)


def basic_auth(username: str, password: str) -> Hook:
    """Basic аутентификация через requests.auth.HTTPBasicAuth."""
    auth = HTTPBasicAuth(username, password)

    def on_request(request: requests.PreparedRequest) -> None:
        auth(request)

    return Hook(name="basic_auth", order=HookOrder.AUTH, on_request=on_request)


def api_key_auth(key: str, header: str = "X-API-Key") -> Hook:
    """
    API ключ в заголовке.

    Args:
        key: Значение ключа
        header: Имя заголовка
    """
    def on_request(request: requests.PreparedRequest) -> None:
        request.headers[header] = key

    return Hook(name="api_key_auth", order=HookOrder.AUTH, on_request=on_request)
