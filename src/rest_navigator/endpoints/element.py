from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar, Union

import httpx

from rest_navigator.core.endpoint import Endpoint
from rest_navigator.core.errors import ConcurrencyError
from rest_navigator.core.etag import ETagEndpoint
from rest_navigator.core.http import (
    Cancellation,
    HttpHeader,
    HttpMethod,
    HttpStatus,
    is_success,
)
from rest_navigator.core.observability import log_event

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 3

UpdateAction = Callable[[T], Union[Optional[T], Awaitable[Optional[T]]]]


class ElementEndpoint(ETagEndpoint, Generic[T]):
    """
    Endpoint for an individual resource.

    `entity_type` (e.g. a pydantic model) is handed to the serializer when
    decoding; without it entities are plain JSON values.
    """

    def __init__(
        self, referrer: Endpoint, uri: str, entity_type: Optional[Any] = None
    ):
        super().__init__(referrer, uri)
        self.entity_type = entity_type

    def _deserialize(self, text: str) -> T:
        return self.serializer.deserialize(text, self.entity_type)

    def _deserialize_optional(self, response: httpx.Response) -> Optional[T]:
        if not response.text.strip():
            return None
        return self._deserialize(response.text)

    @property
    def response(self) -> Optional[T]:
        """The cached entity as last received from the server, decoded afresh."""
        cache = self.response_cache
        if cache is None or not cache.content.strip():
            return None
        return self._deserialize(cache.content)

    async def read(self, cancellation: Optional[Cancellation] = None) -> T:
        return self._deserialize(await self.get_content(cancellation))

    async def exists(self, cancellation: Optional[Cancellation] = None) -> bool:
        """HEAD the element; 404/410 mean False, other failures raise."""
        response = await self.transport.send(
            self.uri, HttpMethod.HEAD, cancellation=cancellation
        )
        if is_success(response):
            return True
        if response.status_code in (HttpStatus.NOT_FOUND, HttpStatus.GONE):
            return False
        self.error_policy.handle(response)
        return False

    @property
    def set_allowed(self) -> Optional[bool]:
        return self.is_method_allowed(HttpMethod.PUT)

    async def set(
        self, entity: T, cancellation: Optional[Cancellation] = None
    ) -> Optional[T]:
        """
        Replace the element. Sends If-Match with the tag from the last read, so
        a stale write raises ConcurrencyError instead of overwriting.
        Returns the entity echoed by the server, or None for an empty body.
        """
        response = await self.put_content(entity, cancellation)
        return self._deserialize_optional(response)

    @property
    def merge_allowed(self) -> Optional[bool]:
        return self.is_method_allowed(HttpMethod.PATCH)

    async def merge(
        self, entity: Any, cancellation: Optional[Cancellation] = None
    ) -> Optional[T]:
        """PATCH a partial entity. Not tag-guarded: the server composes the diff."""
        content = self.serializer.serialize(entity)
        response = await self._send_invalidating(
            HttpMethod.PATCH,
            cancellation=cancellation,
            headers={HttpHeader.CONTENT_TYPE: self.serializer.supported_media_types[0]},
            content=content,
            conditional=False,
        )
        return self._deserialize_optional(response)

    async def update(
        self,
        update_action: UpdateAction,
        max_retries: int = DEFAULT_MAX_RETRIES,
        cancellation: Optional[Cancellation] = None,
    ) -> Optional[T]:
        """
        Read, modify and write back the entity with optimistic concurrency.

        `update_action` may change the entity in place (returning None) or
        return a replacement; coroutine functions are awaited. On
        ConcurrencyError the whole read-modify-write cycle is retried up to
        `max_retries` times before the error propagates.
        """
        attempt = 0
        while True:
            entity = await self.read(cancellation)
            updated = update_action(entity)
            if inspect.isawaitable(updated):
                updated = await updated
            if updated is not None:
                entity = updated

            try:
                return await self.set(entity, cancellation)
            except ConcurrencyError as exc:
                if attempt >= max_retries:
                    raise
                attempt += 1
                log_event(
                    "update_conflict",
                    uri=self.uri,
                    status=exc.status_code,
                    attempt=attempt,
                )

    @property
    def delete_allowed(self) -> Optional[bool]:
        return self.is_method_allowed(HttpMethod.DELETE)

    async def delete(self, cancellation: Optional[Cancellation] = None) -> None:
        await self.delete_content(cancellation)


__all__ = ["ElementEndpoint", "UpdateAction", "DEFAULT_MAX_RETRIES"]
