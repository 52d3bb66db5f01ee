"""Typed async HTTP client for endpoint-described APIs.

Example:
    ```python
    from pydantic import BaseModel
    from typedhttp import APIClient, Endpoint, StdlibLogger

    class User(BaseModel):
        id: str
        name: str

    async with APIClient(logger=StdlibLogger()) as client:
        endpoint = Endpoint(
            url="https://api.example.com/users/1",
            identity="users.get",
            auth_headers={"Authorization": "Bearer <token>"},
        )
        result = await client.get(endpoint, User)
        print(result.data.name, result.response.status_code)
    ```
"""

from ._client import APIClient
from ._codec import JSONCodec, PydanticJSONCodec
from ._config import Config
from ._hooks import (
    APIAnalytics,
    APIClientLogger,
    InMemoryAnalytics,
    NullLogger,
    StdlibLogger,
    UnauthorizedHandler,
)
from ._transport import HttpxTransport, Transport
from ._utils import APIEndpoint, Endpoint, HTTPMethod, MultipartPayload, RequestSpec
from ._version import __version__
from .models import (
    AnalyticsRecord,
    APIError,
    APIErrorKind,
    APIResponse,
    DecodingFailedError,
    EmptyResponse,
    EncodingFailedError,
    Failure,
    HTTPResponse,
    InvalidResponseError,
    MissingAuthHeaderError,
    NetworkError,
    Result,
    ServerError,
    Success,
    UnknownError,
)

__all__ = [
    "__version__",
    "APIAnalytics",
    "APIClient",
    "APIClientLogger",
    "APIEndpoint",
    "APIError",
    "APIErrorKind",
    "APIResponse",
    "AnalyticsRecord",
    "Config",
    "DecodingFailedError",
    "EmptyResponse",
    "EncodingFailedError",
    "Endpoint",
    "Failure",
    "HTTPMethod",
    "HTTPResponse",
    "HttpxTransport",
    "InMemoryAnalytics",
    "InvalidResponseError",
    "JSONCodec",
    "MissingAuthHeaderError",
    "MultipartPayload",
    "NetworkError",
    "NullLogger",
    "PydanticJSONCodec",
    "RequestSpec",
    "Result",
    "ServerError",
    "StdlibLogger",
    "Success",
    "Transport",
    "UnauthorizedHandler",
    "UnknownError",
]
