"""rest_navigator package exports."""

from .config import NavigatorConfig, create_entry_from_env, load_env_config
from .core import (
    AggregateLinkExtractor,
    AuthenticationError,
    AuthorizationError,
    BadRequestError,
    Cancellation,
    ConcurrencyError,
    ConflictError,
    DefaultErrorPolicy,
    Endpoint,
    EndpointConfig,
    EndpointConfigError,
    EntityParseError,
    EntityValidationError,
    ErrorPolicy,
    ETagEndpoint,
    HalLinkExtractor,
    HeaderLinkExtractor,
    HttpError,
    HttpHeader,
    HttpMethod,
    HttpStatus,
    JsonSerializer,
    Link,
    LinkExtractor,
    LinkParseError,
    NotFoundError,
    RangeNotSatisfiableError,
    RequestCancelledError,
    RequestTimeoutError,
    ResponseCache,
    RestClientError,
    Serializer,
    Transport,
    TransportError,
    UriTemplate,
    UriTemplateError,
)
from .core.logging import setup_logging
from .endpoints import (
    ActionEndpoint,
    BlobEndpoint,
    CollectionEndpoint,
    ConsumerEndpoint,
    ElementEndpoint,
    EntryEndpoint,
    FunctionEndpoint,
    GenericCollectionEndpoint,
    IndexerEndpoint,
    ProducerEndpoint,
    RpcEndpoint,
    UploadEndpoint,
)
from .transports import HttpxTransport

__all__ = [
    # Endpoints
    "Endpoint",
    "EndpointConfig",
    "ETagEndpoint",
    "ResponseCache",
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
    # HTTP / transport
    "Cancellation",
    "HttpHeader",
    "HttpMethod",
    "HttpStatus",
    "Transport",
    "HttpxTransport",
    # Links
    "Link",
    "LinkExtractor",
    "HeaderLinkExtractor",
    "HalLinkExtractor",
    "AggregateLinkExtractor",
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
    # Config / logging
    "NavigatorConfig",
    "load_env_config",
    "create_entry_from_env",
    "setup_logging",
]
