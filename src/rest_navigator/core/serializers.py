from __future__ import annotations

import json
from typing import Any, List, Optional, Protocol, Sequence

import pydantic_core
from pydantic import TypeAdapter, ValidationError

from .errors import EntityParseError, EntityValidationError


class Serializer(Protocol):
    """Controls how entities sent to and received from the server are encoded."""

    @property
    def supported_media_types(self) -> Sequence[str]: ...

    def serialize(self, entity: Any) -> str: ...

    def deserialize(self, text: str, entity_type: Optional[Any] = None) -> Any: ...


class JsonSerializer:
    """
    JSON serializer.
    - Serializes dicts, lists and pydantic models (field aliases honoured)
    - Deserializes to plain JSON values, or validates against `entity_type`
      (a pydantic model, `List[Model]`, or any type a TypeAdapter accepts)
    """

    def __init__(self, media_types: Optional[Sequence[str]] = None):
        self._media_types: List[str] = (
            list(media_types) if media_types is not None else ["application/json"]
        )
        if not self._media_types:
            raise ValueError("At least one media type is required.")

    @property
    def supported_media_types(self) -> List[str]:
        return list(self._media_types)

    def serialize(self, entity: Any) -> str:
        return pydantic_core.to_json(entity, by_alias=True).decode("utf-8")

    def deserialize(self, text: str, entity_type: Optional[Any] = None) -> Any:
        if entity_type is None:
            try:
                return json.loads(text)
            except ValueError as exc:
                snippet = (text or "")[:500]
                raise EntityParseError(
                    f"Expected JSON, got non-JSON body snippet: {snippet!r}"
                ) from exc

        try:
            return TypeAdapter(entity_type).validate_json(text)
        except ValidationError as exc:
            if any(err.get("type") == "json_invalid" for err in exc.errors()):
                snippet = (text or "")[:500]
                raise EntityParseError(
                    f"Expected JSON, got non-JSON body snippet: {snippet!r}"
                ) from exc
            name = getattr(entity_type, "__name__", repr(entity_type))
            raise EntityValidationError(
                f"Response did not match type {name}: {exc}"
            ) from exc


__all__ = ["Serializer", "JsonSerializer"]
