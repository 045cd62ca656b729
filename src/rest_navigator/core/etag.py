from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

import httpx

from .endpoint import Endpoint
from .errors import RequestCancelledError
from .http import Cancellation, HeadersInput, HttpHeader, HttpMethod, HttpStatus


@dataclass(frozen=True)
class ResponseCache:
    """Snapshot of a response body together with its content type and entity tag."""

    content: str
    content_type: Optional[str] = None
    etag: Optional[str] = None

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ResponseCache":
        return cls(
            content=response.text,
            content_type=response.headers.get(HttpHeader.CONTENT_TYPE),
            etag=response.headers.get(HttpHeader.ETAG),
        )


class ETagEndpoint(Endpoint):
    """
    Endpoint that uses entity tags for caching and to avoid lost updates.

    The single-slot `response_cache` is cleared before every mutating request
    and refilled only by GETs, so writes always carry the tag of the state the
    caller last observed.
    """

    def __init__(self, referrer: Endpoint, uri: str):
        super().__init__(referrer, uri)
        self.response_cache: Optional[ResponseCache] = None

    async def get_content(self, cancellation: Optional[Cancellation] = None) -> str:
        """GET the resource, reusing the cached body on 304 Not Modified."""
        cache = self.response_cache
        headers = {}
        if cache is not None and cache.etag:
            headers[HttpHeader.IF_NONE_MATCH] = cache.etag

        response = await self.transport.send(
            self.uri, HttpMethod.GET, cancellation=cancellation, headers=headers
        )
        if response.status_code == HttpStatus.NOT_MODIFIED and cache is not None:
            return cache.content

        self.handle(response)
        cache = ResponseCache.from_response(response)
        self.response_cache = cache
        return cache.content

    async def put_content(
        self, entity: Any, cancellation: Optional[Cancellation] = None
    ) -> httpx.Response:
        """PUT `entity`, guarded with If-Match when a tag is cached."""
        content = self.serializer.serialize(entity)
        headers = {HttpHeader.CONTENT_TYPE: self.serializer.supported_media_types[0]}
        return await self._send_invalidating(
            HttpMethod.PUT, cancellation=cancellation, headers=headers, content=content
        )

    async def delete_content(
        self, cancellation: Optional[Cancellation] = None
    ) -> httpx.Response:
        """DELETE the resource, guarded with If-Match when a tag is cached."""
        return await self._send_invalidating(
            HttpMethod.DELETE, cancellation=cancellation, headers={}
        )

    async def _send_invalidating(
        self,
        method: str,
        *,
        cancellation: Optional[Cancellation],
        headers: HeadersInput,
        content: Optional[Union[str, bytes]] = None,
        conditional: bool = True,
    ) -> httpx.Response:
        previous = self.response_cache
        headers = dict(headers)
        if conditional and previous is not None and previous.etag:
            headers[HttpHeader.IF_MATCH] = previous.etag

        self.response_cache = None
        try:
            return await self.send(
                method, cancellation=cancellation, headers=headers, content=content
            )
        except RequestCancelledError:
            # No response was handled; restore the old snapshot unless another
            # operation refilled the slot meanwhile.
            if self.response_cache is None:
                self.response_cache = previous
            raise


__all__ = ["ResponseCache", "ETagEndpoint"]
