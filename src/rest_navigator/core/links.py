"""
Link discovery from HTTP responses.

Two sources are supported:
  - the `Link` header (RFC 8288)
  - the `_links` object of HAL documents (application/hal+json)
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Iterable, List, Optional, Protocol, Tuple
from urllib.parse import unquote

import httpx
from pydantic import BaseModel, ConfigDict

from .errors import LinkParseError
from .http import HttpHeader, media_type

HAL_MEDIA_TYPE = "application/hal+json"

_TOKEN_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")
_BARE_VALUE_RE = re.compile(r"[^\s,;]*")


class Link(BaseModel):
    """A link to another resource; `href` is a URI Template when `templated`."""

    rel: str
    href: str
    title: Optional[str] = None
    templated: bool = False

    model_config = ConfigDict(frozen=True)


class LinkExtractor(Protocol):
    def get_links(self, response: httpx.Response) -> List[Link]:
        """Extract links from the response; malformed input raises LinkParseError."""


# --- Link header (RFC 8288) ------------------------------------------------- #


def _skip_ws(value: str, pos: int) -> int:
    while pos < len(value) and value[pos] in " \t\r\n":
        pos += 1
    return pos


def _read_quoted(value: str, pos: int) -> Tuple[str, int]:
    """Read a quoted-string starting at `pos` (the opening quote)."""
    out: List[str] = []
    pos += 1
    while pos < len(value):
        ch = value[pos]
        if ch == "\\" and pos + 1 < len(value):
            out.append(value[pos + 1])
            pos += 2
            continue
        if ch == '"':
            return "".join(out), pos + 1
        out.append(ch)
        pos += 1
    raise LinkParseError(f"Unterminated quoted string in Link header: {value!r}")


def _decode_ext_value(raw: str) -> str:
    """Decode an RFC 8187 ext-value such as UTF-8''%E2%82%AC%20rates."""
    parts = raw.split("'", 2)
    if len(parts) != 3:
        raise LinkParseError(f"Invalid extended parameter value in Link header: {raw!r}")
    charset = parts[0] or "utf-8"
    try:
        return unquote(parts[2], encoding=charset, errors="strict")
    except (LookupError, UnicodeDecodeError) as exc:
        raise LinkParseError(
            f"Cannot decode extended parameter value {raw!r}: {exc}"
        ) from exc


def _parse_params(value: str, pos: int) -> Tuple[Dict[str, str], int]:
    params: Dict[str, str] = {}
    extended: Dict[str, str] = {}
    while True:
        pos = _skip_ws(value, pos)
        if pos >= len(value) or value[pos] == ",":
            break
        if value[pos] != ";":
            raise LinkParseError(
                f"Unexpected character {value[pos]!r} at position {pos} in Link header: "
                f"{value!r}"
            )
        pos = _skip_ws(value, pos + 1)

        match = _TOKEN_RE.match(value, pos)
        if not match:
            raise LinkParseError(f"Missing parameter name in Link header: {value!r}")
        name = match.group(0).lower()
        pos = _skip_ws(value, match.end())

        param_value = ""
        if pos < len(value) and value[pos] == "=":
            pos = _skip_ws(value, pos + 1)
            if pos < len(value) and value[pos] == '"':
                param_value, pos = _read_quoted(value, pos)
            else:
                bare = _BARE_VALUE_RE.match(value, pos)
                param_value = bare.group(0) if bare else ""
                pos = bare.end() if bare else pos

        if name.endswith("*"):
            extended.setdefault(name[:-1], _decode_ext_value(param_value))
        else:
            # Only the first occurrence of a parameter counts.
            params.setdefault(name, param_value)

    params.update(extended)
    return params, pos


def parse_link_header(value: str) -> List[Link]:
    links: List[Link] = []
    pos = 0
    while True:
        while pos < len(value) and value[pos] in " \t\r\n,":
            pos += 1
        if pos >= len(value):
            break
        if value[pos] != "<":
            raise LinkParseError(f"Expected '<' at position {pos} in Link header: {value!r}")
        end = value.find(">", pos)
        if end < 0:
            raise LinkParseError(f"Unterminated URI reference in Link header: {value!r}")
        href = value[pos + 1 : end].strip()

        params, pos = _parse_params(value, end + 1)
        rel = params.get("rel")
        if not rel:
            raise LinkParseError("The link header is lacking the mandatory 'rel' field.")
        templated = params.get("templated", "").lower() == "true"
        for rel_type in rel.split():
            links.append(
                Link(rel=rel_type, href=href, title=params.get("title"), templated=templated)
            )
    return links


class HeaderLinkExtractor:
    """Extracts links from `Link` response headers."""

    def get_links(self, response: httpx.Response) -> List[Link]:
        links: List[Link] = []
        # Several Link header lines are equivalent to one comma-joined line.
        for value in response.headers.get_list(HttpHeader.LINK):
            links.extend(parse_link_header(value))
        return links


# --- HAL ------------------------------------------------------------------- #


def _parse_hal_link(rel: str, obj: Any) -> Link:
    if not isinstance(obj, dict):
        raise LinkParseError(f"HAL link for rel={rel} must be an object, got {type(obj).__name__}.")
    href = obj.get("href")
    if not isinstance(href, str) or not href:
        raise LinkParseError(f"HAL link for rel={rel} is lacking the mandatory 'href' field.")
    title = obj.get("title")
    return Link(
        rel=rel,
        href=href,
        title=title if isinstance(title, str) else None,
        templated=bool(obj.get("templated")),
    )


def parse_hal_links(payload: Any) -> List[Link]:
    """
    Normalize the `_links` object of a HAL document into Link values.
    A relation may hold a single link object or an array of them.
    """
    if not isinstance(payload, dict):
        return []
    container = payload.get("_links")
    if container is None:
        return []
    if not isinstance(container, dict):
        raise LinkParseError("HAL '_links' must be an object.")

    links: List[Link] = []
    for rel, entry in container.items():
        entries: Iterable[Any] = entry if isinstance(entry, list) else [entry]
        links.extend(_parse_hal_link(rel, obj) for obj in entries)
    return links


class HalLinkExtractor:
    """Extracts links from HAL bodies (application/hal+json)."""

    def get_links(self, response: httpx.Response) -> List[Link]:
        if media_type(response) != HAL_MEDIA_TYPE or not response.content:
            return []
        try:
            payload = json.loads(response.text)
        except ValueError as exc:
            raise LinkParseError(f"Expected a JSON body for {HAL_MEDIA_TYPE}: {exc}") from exc
        return parse_hal_links(payload)


class AggregateLinkExtractor:
    """Concatenates the results of several extractors in order."""

    def __init__(self, *extractors: LinkExtractor):
        self.extractors: Tuple[LinkExtractor, ...] = extractors

    def get_links(self, response: httpx.Response) -> List[Link]:
        links: List[Link] = []
        for extractor in self.extractors:
            links.extend(extractor.get_links(response))
        return links


def default_link_extractor() -> AggregateLinkExtractor:
    return AggregateLinkExtractor(HeaderLinkExtractor(), HalLinkExtractor())


__all__ = [
    "HAL_MEDIA_TYPE",
    "Link",
    "LinkExtractor",
    "HeaderLinkExtractor",
    "HalLinkExtractor",
    "AggregateLinkExtractor",
    "default_link_extractor",
    "parse_link_header",
    "parse_hal_links",
]
