from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple, Union
from urllib.parse import urljoin, urlsplit, urlunsplit

import httpx

from .errors import EndpointConfigError, ErrorPolicy, NotFoundError
from .http import Cancellation, HeadersInput, HttpHeader, Transport
from .links import Link, LinkExtractor
from .serializers import Serializer
from .uritemplate import UriTemplate

# Relative references with this prefix resolve as if the base URI ended in "/".
IMPLY_TRAILING_SLASH = "./"


@dataclass(frozen=True)
class EndpointConfig:
    """Collaborators shared by an entry endpoint and everything reached from it."""

    transport: Transport
    serializer: Serializer
    error_policy: ErrorPolicy
    link_extractor: LinkExtractor


def ensure_trailing_slash(uri: str) -> str:
    """Append "/" to the path component, leaving any query or fragment in place."""
    parts = urlsplit(uri)
    if parts.path.endswith("/"):
        return uri
    return urlunsplit(parts._replace(path=parts.path + "/"))


class Endpoint:
    """
    Navigation node for one remote resource.

    - `referrer` is the endpoint used to navigate here; configuration is
      inherited from it. Entry points pass `config` instead.
    - Links and allowed methods are cached from the last response and are
      replaced wholesale, never mutated in place.
    - Default links/templates are fallbacks for rels the server does not
      provide; they can only be registered before the first response.
    """

    def __init__(
        self,
        referrer: Optional["Endpoint"],
        uri: str,
        *,
        config: Optional[EndpointConfig] = None,
    ):
        if referrer is not None:
            if config is not None:
                raise EndpointConfigError(
                    "config must not be specified if referrer is specified."
                )
            self.uri = referrer.resolve(uri)
            self.config = referrer.config
        else:
            if config is None:
                raise EndpointConfigError(
                    "config must be specified if referrer is not specified."
                )
            missing = [
                name
                for name in ("transport", "serializer", "error_policy", "link_extractor")
                if getattr(config, name) is None
            ]
            if missing:
                raise EndpointConfigError(
                    f"config is missing required collaborators: {', '.join(missing)}"
                )
            parts = urlsplit(uri)
            if not parts.scheme or not parts.netloc:
                raise EndpointConfigError(
                    f"Entry endpoint URI must be absolute, got {uri!r}."
                )
            self.uri = uri
            self.config = config

        self._links: Tuple[Link, ...] = ()
        self._allowed_methods: Optional[FrozenSet[str]] = None
        self._default_links: Dict[str, str] = {}
        self._default_link_templates: Dict[str, str] = {}
        self._defaults_sealed = False

    # --- configuration accessors --- #

    @property
    def transport(self) -> Transport:
        return self.config.transport

    @property
    def serializer(self) -> Serializer:
        return self.config.serializer

    @property
    def error_policy(self) -> ErrorPolicy:
        return self.config.error_policy

    @property
    def link_extractor(self) -> LinkExtractor:
        return self.config.link_extractor

    # --- URI handling --- #

    def resolve(self, relative_uri: str) -> str:
        """
        Resolve `relative_uri` against this endpoint's URI.
        Prefix with "./" to imply a trailing slash on the base URI.
        """
        if relative_uri.startswith(IMPLY_TRAILING_SLASH):
            return urljoin(ensure_trailing_slash(self.uri), relative_uri)
        return urljoin(self.uri, relative_uri)

    # --- request pipeline --- #

    async def send(
        self,
        method: str,
        *,
        cancellation: Optional[Cancellation] = None,
        headers: Optional[HeadersInput] = None,
        content: Optional[Union[str, bytes]] = None,
    ) -> httpx.Response:
        response = await self.transport.send(
            self.uri,
            method,
            cancellation=cancellation,
            headers=headers,
            content=content,
        )
        self.handle(response)
        return response

    def handle(self, response: httpx.Response) -> None:
        """Cache links and capabilities from `response`, then apply the error policy."""
        self._links = tuple(self.link_extractor.get_links(response))
        self._defaults_sealed = True

        allow = response.headers.get(HttpHeader.ALLOW)
        if allow is not None:
            self._allowed_methods = frozenset(
                m.strip().upper() for m in allow.split(",") if m.strip()
            )

        self.error_policy.handle(response)

    # --- links --- #

    @property
    def links(self) -> Tuple[Link, ...]:
        return self._links

    def set_default_link(self, rel: str, href: Optional[str] = None) -> None:
        """Register (or with href=None, remove) the fallback link for `rel`."""
        self._check_defaults_open()
        defaults = dict(self._default_links)
        if href:
            defaults[rel] = self.resolve(href)
        else:
            defaults.pop(rel, None)
        self._default_links = defaults

    def set_default_link_template(self, rel: str, href: Optional[str] = None) -> None:
        """Register (or with href=None, remove) the fallback link template for `rel`."""
        self._check_defaults_open()
        defaults = dict(self._default_link_templates)
        if href:
            UriTemplate(href)  # malformed templates fail at registration
            defaults[rel] = href
        else:
            defaults.pop(rel, None)
        self._default_link_templates = defaults

    def _check_defaults_open(self) -> None:
        if self._defaults_sealed:
            raise EndpointConfigError(
                f"Default links of {self.uri} can only be set before the first response."
            )

    def get_links(self, rel: str) -> List[Link]:
        """All non-templated links for `rel` with hrefs resolved; [] if none."""
        current = self._links
        links = [
            link.model_copy(update={"href": self.resolve(link.href)})
            for link in current
            if not link.templated and link.rel == rel
        ]
        if not links:
            default = self._default_links.get(rel)
            if default:
                links.append(Link(rel=rel, href=default))
        return links

    def link(self, rel: str) -> str:
        links = self.get_links(rel)
        if not links:
            raise NotFoundError(
                f"No link with rel={rel} provided by endpoint {self.uri}.",
                status_code=0,
            )
        return links[0].href

    def get_link_template(self, rel: str) -> str:
        current = self._links
        template = next(
            (link.href for link in current if link.templated and link.rel == rel),
            None,
        ) or self._default_link_templates.get(rel)
        if not template:
            raise NotFoundError(
                f"No link template with rel={rel} provided by endpoint {self.uri}.",
                status_code=0,
            )
        return template

    def link_template(self, rel: str, variables: Mapping[str, Any]) -> str:
        expanded = UriTemplate(self.get_link_template(rel)).expand(variables)
        return self.resolve(expanded)

    # --- capabilities --- #

    @property
    def allowed_methods(self) -> Optional[FrozenSet[str]]:
        return self._allowed_methods

    def is_method_allowed(self, method: str) -> Optional[bool]:
        """True/False per the last Allow header; None if none was seen."""
        allowed = self._allowed_methods
        if allowed is None:
            return None
        return method.upper() in allowed

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.uri!r})"


__all__ = [
    "IMPLY_TRAILING_SLASH",
    "EndpointConfig",
    "Endpoint",
    "ensure_trailing_slash",
]
