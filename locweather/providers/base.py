from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests
from requests import Response


class ProviderError(RuntimeError):
    """Base provider error."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthError(ProviderError):
    """Raised when a provider is called without a usable API key."""


class NetworkError(ProviderError):
    """Raised on transport failures and non-success HTTP statuses."""


class ParseError(ProviderError):
    """Raised when a provider payload is malformed or incomplete."""


@dataclass
class RequestConfig:
    timeout: float = 10.0


class HttpProvider:
    """Base class that adds timeouts and error classification for HTTP providers.

    Every call is attempted exactly once; callers decide what to do on failure.
    """

    def __init__(
        self,
        api_key: str,
        session: Optional[requests.Session] = None,
        request_config: Optional[RequestConfig] = None,
    ) -> None:
        self.api_key = api_key
        self.request_config = request_config or RequestConfig()
        self.session = session or requests.Session()
        self._log = logging.getLogger(self.__class__.__name__)

    def _require_key(self) -> str:
        if not self.api_key or not self.api_key.strip():
            raise AuthError(f"{self.__class__.__name__} requires an API key")
        return self.api_key

    def _handle_response(self, response: Response) -> Response:
        if not 200 <= response.status_code < 300:
            message = self._error_message(response)
            self._log.error("Provider returned %s: %s", response.status_code, message)
            raise NetworkError(f"HTTP {response.status_code}: {message}", status_code=response.status_code)
        return response

    def _request(self, method: str, url: str, **kwargs) -> Response:
        try:
            response = self.session.request(
                method,
                url,
                timeout=self.request_config.timeout,
                **kwargs,
            )
        except requests.Timeout as exc:
            self._log.error("Request timed out", exc_info=exc)
            raise NetworkError("timeout") from exc
        except requests.RequestException as exc:
            self._log.error("Request failed", exc_info=exc)
            raise NetworkError("request failed") from exc
        return self._handle_response(response)

    def _json(self, response: Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            self._log.error("Failed to decode JSON", exc_info=exc)
            raise ParseError("invalid json") from exc

    def _error_message(self, response: Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            return response.text[:200] or (response.reason or "")
        if isinstance(payload, dict):
            message = payload.get("message") or payload.get("error")
            if isinstance(message, dict):
                message = message.get("message") or message.get("title")
            if message:
                return str(message)
        return response.text[:200]


__all__ = [
    "AuthError",
    "HttpProvider",
    "NetworkError",
    "ParseError",
    "ProviderError",
    "RequestConfig",
]
