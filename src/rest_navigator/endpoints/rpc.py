"""RPC-style endpoints: each is invoked with a POST."""

from __future__ import annotations

from typing import Any, Generic, Optional, TypeVar

from rest_navigator.core.endpoint import Endpoint
from rest_navigator.core.http import Cancellation, HttpHeader, HttpMethod

TEntity = TypeVar("TEntity")
TResult = TypeVar("TResult")


class RpcEndpoint(Endpoint):
    async def probe(self, cancellation: Optional[Cancellation] = None) -> None:
        """OPTIONS request to learn links and allowed methods without invoking."""
        await self.send(HttpMethod.OPTIONS, cancellation=cancellation)

    @property
    def invoke_allowed(self) -> Optional[bool]:
        return self.is_method_allowed(HttpMethod.POST)

    async def _post(self, entity: Any, cancellation: Optional[Cancellation]):
        return await self.send(
            HttpMethod.POST,
            cancellation=cancellation,
            headers={HttpHeader.CONTENT_TYPE: self.serializer.supported_media_types[0]},
            content=self.serializer.serialize(entity),
        )


class ActionEndpoint(RpcEndpoint):
    """No input, no output."""

    async def invoke(self, cancellation: Optional[Cancellation] = None) -> None:
        await self.send(HttpMethod.POST, cancellation=cancellation)


class ConsumerEndpoint(RpcEndpoint, Generic[TEntity]):
    """Takes an entity as input."""

    async def invoke(
        self, entity: TEntity, cancellation: Optional[Cancellation] = None
    ) -> None:
        await self._post(entity, cancellation)


class ProducerEndpoint(RpcEndpoint, Generic[TResult]):
    """Returns a result."""

    def __init__(self, referrer: Endpoint, uri: str, result_type: Optional[Any] = None):
        super().__init__(referrer, uri)
        self.result_type = result_type

    async def invoke(self, cancellation: Optional[Cancellation] = None) -> TResult:
        response = await self.send(HttpMethod.POST, cancellation=cancellation)
        return self.serializer.deserialize(response.text, self.result_type)


class FunctionEndpoint(RpcEndpoint, Generic[TEntity, TResult]):
    """Takes an entity as input and returns a result."""

    def __init__(self, referrer: Endpoint, uri: str, result_type: Optional[Any] = None):
        super().__init__(referrer, uri)
        self.result_type = result_type

    async def invoke(
        self, entity: TEntity, cancellation: Optional[Cancellation] = None
    ) -> TResult:
        response = await self._post(entity, cancellation)
        return self.serializer.deserialize(response.text, self.result_type)


__all__ = [
    "RpcEndpoint",
    "ActionEndpoint",
    "ConsumerEndpoint",
    "ProducerEndpoint",
    "FunctionEndpoint",
]
