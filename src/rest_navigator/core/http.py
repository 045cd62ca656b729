"""
HTTP vocabulary shared by endpoints and transports.

Responses travel through the library as `httpx.Response` objects whose body has
already been read. Transports other than the bundled httpx one only need to
build such a response; they never have to talk to a real network.
"""

from __future__ import annotations

from typing import Mapping, Optional, Protocol, Union

import anyio
import httpx


class HttpMethod:
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"


class HttpHeader:
    ACCEPT = "Accept"
    ALLOW = "Allow"
    CONTENT_TYPE = "Content-Type"
    ETAG = "ETag"
    IF_MATCH = "If-Match"
    IF_NONE_MATCH = "If-None-Match"
    LINK = "Link"
    LOCATION = "Location"


class HttpStatus:
    OK = 200
    CREATED = 201
    NO_CONTENT = 204
    NOT_MODIFIED = 304
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    REQUEST_TIMEOUT = 408
    CONFLICT = 409
    GONE = 410
    PRECONDITION_FAILED = 412
    RANGE_NOT_SATISFIABLE = 416


# Cancellation signal accepted by every request-issuing operation.
Cancellation = anyio.Event

HeadersInput = Union[httpx.Headers, Mapping[str, str]]


class Transport(Protocol):
    """Sends HTTP requests on behalf of endpoints."""

    default_headers: httpx.Headers

    async def send(
        self,
        uri: str,
        method: str,
        *,
        cancellation: Optional[Cancellation] = None,
        headers: Optional[HeadersInput] = None,
        content: Optional[Union[str, bytes]] = None,
    ) -> httpx.Response: ...


def is_success(response: httpx.Response) -> bool:
    return 200 <= response.status_code < 300


def media_type(response: httpx.Response) -> Optional[str]:
    """Content type without parameters, lower-cased (`None` if absent)."""
    raw = response.headers.get(HttpHeader.CONTENT_TYPE)
    if not raw:
        return None
    return raw.split(";", 1)[0].strip().lower()


__all__ = [
    "HttpMethod",
    "HttpHeader",
    "HttpStatus",
    "Cancellation",
    "HeadersInput",
    "Transport",
    "is_success",
    "media_type",
]
