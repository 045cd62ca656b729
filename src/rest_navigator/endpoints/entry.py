from __future__ import annotations

from typing import Optional

from rest_navigator.core.endpoint import Endpoint, EndpointConfig, ensure_trailing_slash
from rest_navigator.core.errors import DefaultErrorPolicy, ErrorPolicy
from rest_navigator.core.http import Cancellation, HttpHeader, HttpMethod, Transport
from rest_navigator.core.links import LinkExtractor, default_link_extractor
from rest_navigator.core.serializers import JsonSerializer, Serializer
from rest_navigator.transports.http import HttpxTransport


class EntryEndpoint(Endpoint):
    """
    Top-level URI of an API. Subclass it and expose child endpoints as
    attributes or methods.

    Unset collaborators default to HttpxTransport, JsonSerializer,
    DefaultErrorPolicy and a Link-header + HAL extractor. A transport created
    here is closed by `aclose()` / `async with`.
    """

    def __init__(
        self,
        uri: str,
        *,
        transport: Optional[Transport] = None,
        serializer: Optional[Serializer] = None,
        error_policy: Optional[ErrorPolicy] = None,
        link_extractor: Optional[LinkExtractor] = None,
        timeout_seconds: float = 10.0,
    ):
        self._owned_transport: Optional[HttpxTransport] = None
        if transport is None:
            self._owned_transport = HttpxTransport(timeout_seconds=timeout_seconds)
            transport = self._owned_transport
        serializer = serializer or JsonSerializer()

        super().__init__(
            None,
            ensure_trailing_slash(uri),
            config=EndpointConfig(
                transport=transport,
                serializer=serializer,
                error_policy=error_policy or DefaultErrorPolicy(),
                link_extractor=link_extractor or default_link_extractor(),
            ),
        )

        transport.default_headers[HttpHeader.ACCEPT] = ", ".join(
            serializer.supported_media_types
        )

    async def read_meta(self, cancellation: Optional[Cancellation] = None) -> None:
        """Fetch links and capabilities of the API root."""
        await self.send(HttpMethod.GET, cancellation=cancellation)

    async def aclose(self) -> None:
        if self._owned_transport is not None:
            await self._owned_transport.aclose()

    async def __aenter__(self) -> "EntryEndpoint":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


__all__ = ["EntryEndpoint"]
