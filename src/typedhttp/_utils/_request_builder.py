from typing import TYPE_CHECKING, Any, Optional, Union

from httpx import Headers

from ..models.exceptions import EncodingFailedError, MissingAuthHeaderError
from ._endpoint import APIEndpoint
from ._multipart import MultipartPayload, build_multipart_body, generate_boundary
from ._request_spec import HTTPMethod, RequestSpec, method_name
from .constants import (
    CONTENT_TYPE_MULTIPART,
    DEFAULT_JSON_HEADERS,
    HEADER_CONTENT_TYPE,
    MULTIPART_TIMEOUT_SECONDS,
    NO_CACHE_HEADERS,
)

if TYPE_CHECKING:
    from .._codec import JSONCodec
    from .._hooks import Hooks


def log_prefix(method: Union[HTTPMethod, str], endpoint: APIEndpoint) -> str:
    return f"{method_name(method)}:{endpoint.identity} REQUEST"


def build_request(endpoint: APIEndpoint, method: HTTPMethod) -> RequestSpec:
    """Create the base request for an endpoint.

    Auth headers replace default headers of the same name, compared
    case-insensitively.

    Raises:
        MissingAuthHeaderError: If the endpoint returns no auth header mapping.
            An empty mapping is valid and means no authentication.
    """
    auth_headers = endpoint.auth_headers
    if auth_headers is None:
        raise MissingAuthHeaderError()

    headers = Headers(DEFAULT_JSON_HEADERS)
    headers.update(auth_headers)
    return RequestSpec(method=method, endpoint=endpoint, headers=headers)


def attach_json_body(
    spec: RequestSpec,
    body: Any,
    codec: "JSONCodec",
    *,
    hooks: Optional["Hooks[Any]"] = None,
    log_body: bool = False,
) -> RequestSpec:
    if body is None:
        return spec

    try:
        spec.content = codec.encode(body)
    except Exception as e:
        raise EncodingFailedError() from e

    if log_body and hooks is not None:
        try:
            text = spec.content.decode("utf-8")
        except UnicodeDecodeError:
            return spec
        hooks.info(
            f"{log_prefix(spec.method, spec.endpoint)} | body string: {text}"
        )
    return spec


def attach_multipart(
    spec: RequestSpec,
    payload: MultipartPayload,
    *,
    hooks: Optional["Hooks[Any]"] = None,
    log_body: bool = False,
) -> RequestSpec:
    """Encode ``payload`` as ``multipart/form-data`` into the request.

    A fresh boundary is generated for every request. Multipart uploads use a
    fixed timeout and bypass all caches.

    Raises:
        EncodingFailedError: If a file cannot be read.
    """
    boundary = generate_boundary()

    try:
        content = build_multipart_body(payload, boundary)
    except OSError as e:
        raise EncodingFailedError() from e

    spec.headers[HEADER_CONTENT_TYPE] = f"{CONTENT_TYPE_MULTIPART}; boundary={boundary}"
    spec.headers.update(NO_CACHE_HEADERS)
    spec.timeout = MULTIPART_TIMEOUT_SECONDS
    spec.no_cache = True
    spec.content = content

    if log_body and hooks is not None:
        hooks.info(
            f"{log_prefix(spec.method, spec.endpoint)} | body string: {payload.string_value}"
        )
    return spec
