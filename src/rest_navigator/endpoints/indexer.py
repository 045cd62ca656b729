from __future__ import annotations

from typing import Generic, TypeVar

from rest_navigator.core.endpoint import Endpoint

from .collection import CHILD_REL, DEFAULT_CHILD_TEMPLATE, ElementFactory

TElement = TypeVar("TElement", bound=Endpoint)


class IndexerEndpoint(Endpoint, Generic[TElement]):
    """Addresses child endpoints by id without being a readable collection itself."""

    def __init__(self, referrer: Endpoint, uri: str, element_factory: ElementFactory):
        super().__init__(referrer, uri)
        self.element_factory = element_factory
        self.set_default_link_template(CHILD_REL, DEFAULT_CHILD_TEMPLATE)

    def get(self, id: str) -> TElement:
        if id is None or id == "":
            raise ValueError("id must not be None or empty.")
        return self.element_factory(self, self.link_template(CHILD_REL, {"id": id}))


__all__ = ["IndexerEndpoint"]
