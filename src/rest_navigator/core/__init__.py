"""Core navigation surface for rest-navigator (transport-agnostic)."""

from .endpoint import Endpoint, EndpointConfig, ensure_trailing_slash
from .errors import (
    AuthenticationError,
    AuthorizationError,
    BadRequestError,
    ConcurrencyError,
    ConflictError,
    DefaultErrorPolicy,
    EndpointConfigError,
    EntityParseError,
    EntityValidationError,
    ErrorPolicy,
    HttpError,
    LinkParseError,
    NotFoundError,
    RangeNotSatisfiableError,
    RequestCancelledError,
    RequestTimeoutError,
    RestClientError,
    TransportError,
    UriTemplateError,
)
from .etag import ETagEndpoint, ResponseCache
from .http import Cancellation, HttpHeader, HttpMethod, HttpStatus, Transport
from .links import (
    AggregateLinkExtractor,
    HalLinkExtractor,
    HeaderLinkExtractor,
    Link,
    LinkExtractor,
    default_link_extractor,
)
from .serializers import JsonSerializer, Serializer
from .uritemplate import UriTemplate

__all__ = [
    # Endpoints
    "Endpoint",
    "EndpointConfig",
    "ETagEndpoint",
    "ResponseCache",
    "ensure_trailing_slash",
    # HTTP
    "Cancellation",
    "HttpHeader",
    "HttpMethod",
    "HttpStatus",
    "Transport",
    # Links
    "Link",
    "LinkExtractor",
    "HeaderLinkExtractor",
    "HalLinkExtractor",
    "AggregateLinkExtractor",
    "default_link_extractor",
    "UriTemplate",
    # Serialization
    "Serializer",
    "JsonSerializer",
    # Errors
    "ErrorPolicy",
    "DefaultErrorPolicy",
    "RestClientError",
    "HttpError",
    "BadRequestError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "RequestTimeoutError",
    "ConflictError",
    "ConcurrencyError",
    "RangeNotSatisfiableError",
    "LinkParseError",
    "UriTemplateError",
    "EndpointConfigError",
    "EntityParseError",
    "EntityValidationError",
    "TransportError",
    "RequestCancelledError",
]
