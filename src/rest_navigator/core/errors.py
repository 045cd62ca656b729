from __future__ import annotations

import json
from typing import Any, Dict, Optional, Protocol, Type

import httpx

from .http import HttpStatus, is_success, media_type


class RestClientError(Exception):
    """Base error for client failures."""


class HttpError(RestClientError):
    """Non-success HTTP response; subclasses narrow it down by status code."""

    default_status: int = 0

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        data: Any = None,
        method: Optional[str] = None,
        uri: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = self.default_status if status_code is None else status_code
        self.data = data
        self.method = method
        self.uri = uri


class BadRequestError(HttpError):
    default_status = HttpStatus.BAD_REQUEST


class AuthenticationError(HttpError):
    default_status = HttpStatus.UNAUTHORIZED


class AuthorizationError(HttpError):
    default_status = HttpStatus.FORBIDDEN


class NotFoundError(HttpError):
    """404 or 410. Raised with status_code=0 when a link lookup fails locally."""

    default_status = HttpStatus.NOT_FOUND


class RequestTimeoutError(HttpError):
    default_status = HttpStatus.REQUEST_TIMEOUT


class ConflictError(HttpError):
    default_status = HttpStatus.CONFLICT


class ConcurrencyError(HttpError):
    """The entity changed since it was last read; the write was rejected."""

    default_status = HttpStatus.PRECONDITION_FAILED


class RangeNotSatisfiableError(HttpError):
    default_status = HttpStatus.RANGE_NOT_SATISFIABLE


class LinkParseError(RestClientError, ValueError):
    """Malformed Link header or HAL `_links` entry."""


class UriTemplateError(RestClientError, ValueError):
    """Malformed RFC 6570 URI Template."""


class EndpointConfigError(RestClientError, ValueError):
    """Endpoint constructed or set up inconsistently."""


class EntityParseError(RestClientError):
    pass


class EntityValidationError(RestClientError):
    pass


class TransportError(RestClientError):
    """Network-level failure reported by the HTTP client."""


class RequestCancelledError(RestClientError):
    """The caller's cancellation signal fired before the response arrived."""


_ERRORS_BY_STATUS: Dict[int, Type[HttpError]] = {
    HttpStatus.BAD_REQUEST: BadRequestError,
    HttpStatus.UNAUTHORIZED: AuthenticationError,
    HttpStatus.FORBIDDEN: AuthorizationError,
    HttpStatus.NOT_FOUND: NotFoundError,
    HttpStatus.GONE: NotFoundError,
    HttpStatus.REQUEST_TIMEOUT: RequestTimeoutError,
    HttpStatus.CONFLICT: ConflictError,
    HttpStatus.PRECONDITION_FAILED: ConcurrencyError,
    HttpStatus.RANGE_NOT_SATISFIABLE: RangeNotSatisfiableError,
}


def error_type_for_status(status_code: int) -> Type[HttpError]:
    return _ERRORS_BY_STATUS.get(status_code, HttpError)


class ErrorPolicy(Protocol):
    def handle(self, response: httpx.Response) -> None:
        """Raise an appropriate error for non-success responses."""


class DefaultErrorPolicy:
    """
    Maps status codes to the HttpError taxonomy.
    - 2xx passes through
    - JSON bodies (application/json, *+json) are parsed and attached as `data`
    - message comes from the body's message/details/error field when present
    """

    def handle(self, response: httpx.Response) -> None:
        if is_success(response):
            return
        raise self.to_error(response)

    def to_error(self, response: httpx.Response) -> HttpError:
        data = self._json_body(response)
        message: Optional[str] = None
        if isinstance(data, dict):
            for key in ("message", "details", "error"):
                value = data.get(key)
                if isinstance(value, str) and value:
                    message = value
                    break
        if message is None:
            message = f"HTTP {response.status_code} {response.reason_phrase}".rstrip()

        method: Optional[str] = None
        uri: Optional[str] = None
        try:
            method = response.request.method
            uri = str(response.request.url)
        except RuntimeError:
            # Response built without an attached request.
            pass

        error_type = error_type_for_status(response.status_code)
        return error_type(
            message,
            status_code=response.status_code,
            data=data,
            method=method,
            uri=uri,
        )

    @staticmethod
    def _json_body(response: httpx.Response) -> Any:
        ctype = media_type(response)
        if not ctype or not (ctype == "application/json" or ctype.endswith("+json")):
            return None
        if not response.content:
            return None
        try:
            return json.loads(response.text)
        except ValueError:
            return None


__all__ = [
    "RestClientError",
    "HttpError",
    "BadRequestError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "RequestTimeoutError",
    "ConflictError",
    "ConcurrencyError",
    "RangeNotSatisfiableError",
    "LinkParseError",
    "UriTemplateError",
    "EndpointConfigError",
    "EntityParseError",
    "EntityValidationError",
    "TransportError",
    "RequestCancelledError",
    "ErrorPolicy",
    "DefaultErrorPolicy",
    "error_type_for_status",
]
