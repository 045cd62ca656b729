from __future__ import annotations

from collections.abc import Mapping
from functools import partial
from typing import Any, Callable, Generic, List, Optional, Sequence, TypeVar, Union

from rest_navigator.core.endpoint import Endpoint
from rest_navigator.core.etag import ETagEndpoint, ResponseCache
from rest_navigator.core.http import Cancellation, HttpHeader, HttpMethod

from .element import ElementEndpoint

T = TypeVar("T")
TElement = TypeVar("TElement", bound=Endpoint)

ElementFactory = Callable[[Endpoint, str], TElement]

CHILD_REL = "child"
DEFAULT_CHILD_TEMPLATE = "./{id}"


def entity_id(element: Any) -> str:
    """Extract the `id` of a dict-like or attribute-style entity."""
    if isinstance(element, Mapping):
        value = element.get("id")
    else:
        value = getattr(element, "id", None)
    if value is None or value == "":
        raise ValueError(f"Element {element!r} does not have an id property.")
    return str(value)


class GenericCollectionEndpoint(ETagEndpoint, Generic[T, TElement]):
    """
    Collection of `T`s whose elements are addressed as `TElement`s.

    `element_factory(referrer, uri)` builds element endpoints. Children are
    located through the "child" link template, defaulting to "./{id}".
    """

    def __init__(
        self,
        referrer: Endpoint,
        uri: str,
        element_factory: ElementFactory,
        entity_type: Optional[Any] = None,
    ):
        super().__init__(referrer, uri)
        self.element_factory = element_factory
        self.entity_type = entity_type
        self.set_default_link_template(CHILD_REL, DEFAULT_CHILD_TEMPLATE)

    def get(self, element: Union[T, str, int]) -> TElement:
        """Element endpoint for an id or for an entity carrying an id."""
        if isinstance(element, (str, int)) and not isinstance(element, bool):
            element_id = str(element)
            if not element_id:
                raise ValueError("id must not be empty.")
        else:
            element_id = entity_id(element)
        return self.element_factory(self, self.link_template(CHILD_REL, {"id": element_id}))

    @property
    def read_all_allowed(self) -> Optional[bool]:
        return self.is_method_allowed(HttpMethod.GET)

    async def read_all(self, cancellation: Optional[Cancellation] = None) -> List[T]:
        list_type = List[self.entity_type] if self.entity_type is not None else None
        return self.serializer.deserialize(await self.get_content(cancellation), list_type)

    @property
    def create_allowed(self) -> Optional[bool]:
        return self.is_method_allowed(HttpMethod.POST)

    async def create(
        self, entity: T, cancellation: Optional[Cancellation] = None
    ) -> TElement:
        """
        POST a new element. The result is addressed by the Location header if
        present, otherwise by the id found in the response body. Its response
        cache is pre-filled from the creation response.
        """
        response = await self.send(
            HttpMethod.POST,
            cancellation=cancellation,
            headers={HttpHeader.CONTENT_TYPE: self.serializer.supported_media_types[0]},
            content=self.serializer.serialize(entity),
        )

        location = response.headers.get(HttpHeader.LOCATION)
        if location:
            element = self.element_factory(self, self.resolve(location))
        else:
            created = self.serializer.deserialize(response.text, self.entity_type)
            element = self.get(created)

        if isinstance(element, ETagEndpoint):
            element.response_cache = ResponseCache.from_response(response)
        return element

    @property
    def create_all_allowed(self) -> Optional[bool]:
        return self.is_method_allowed(HttpMethod.PATCH)

    async def create_all(
        self, entities: Sequence[T], cancellation: Optional[Cancellation] = None
    ) -> None:
        """Add or update several elements with one PATCH."""
        await self._send_invalidating(
            HttpMethod.PATCH,
            cancellation=cancellation,
            headers={HttpHeader.CONTENT_TYPE: self.serializer.supported_media_types[0]},
            content=self.serializer.serialize(list(entities)),
            conditional=False,
        )

    @property
    def set_all_allowed(self) -> Optional[bool]:
        return self.is_method_allowed(HttpMethod.PUT)

    async def set_all(
        self, entities: Sequence[T], cancellation: Optional[Cancellation] = None
    ) -> None:
        """Replace the entire collection; If-Match guarded like ElementEndpoint.set."""
        await self.put_content(list(entities), cancellation)


class CollectionEndpoint(GenericCollectionEndpoint[T, ElementEndpoint[T]]):
    """Collection whose elements are plain ElementEndpoints of the same entity type."""

    def __init__(self, referrer: Endpoint, uri: str, entity_type: Optional[Any] = None):
        super().__init__(
            referrer,
            uri,
            partial(ElementEndpoint, entity_type=entity_type),
            entity_type=entity_type,
        )


__all__ = [
    "CHILD_REL",
    "DEFAULT_CHILD_TEMPLATE",
    "ElementFactory",
    "GenericCollectionEndpoint",
    "CollectionEndpoint",
    "entity_id",
]
