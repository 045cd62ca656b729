"""Typed endpoints built on the navigation and entity-tag core."""

from .collection import CollectionEndpoint, GenericCollectionEndpoint, entity_id
from .element import ElementEndpoint
from .entry import EntryEndpoint
from .indexer import IndexerEndpoint
from .raw import BlobEndpoint, UploadEndpoint
from .rpc import (
    ActionEndpoint,
    ConsumerEndpoint,
    FunctionEndpoint,
    ProducerEndpoint,
    RpcEndpoint,
)

__all__ = [
    "EntryEndpoint",
    "ElementEndpoint",
    "GenericCollectionEndpoint",
    "CollectionEndpoint",
    "IndexerEndpoint",
    "RpcEndpoint",
    "ActionEndpoint",
    "ConsumerEndpoint",
    "ProducerEndpoint",
    "FunctionEndpoint",
    "BlobEndpoint",
    "UploadEndpoint",
    "entity_id",
]
