"""Response validation and typed decoding."""

from typing import Any, Optional, TypeVar

from ._codec import JSONCodec
from ._hooks import Hooks
from ._utils._endpoint import APIEndpoint
from ._utils.constants import (
    HEADER_REQUEST_ID,
    REQUEST_ID_MISSING,
    UNAUTHORIZED_STATUS_CODE,
)
from .models.exceptions import DecodingFailedError, InvalidResponseError, ServerError
from .models.responses import EmptyResponse, HTTPResponse

T = TypeVar("T")


def ensure_http_response(response: Any) -> HTTPResponse:
    if not isinstance(response, HTTPResponse):
        raise InvalidResponseError(response)
    return response


def validate_response(
    response: HTTPResponse,
    endpoint: APIEndpoint,
    hooks: Optional[Hooks[Any]] = None,
) -> HTTPResponse:
    """Raise ``ServerError`` for any status outside 200-299.

    A 401 runs the unauthorized handler with ``endpoint`` before raising.
    """
    status_code = response.status_code
    if 200 <= status_code <= 299:
        return response

    if status_code == UNAUTHORIZED_STATUS_CODE and hooks is not None:
        hooks.unauthorized(endpoint)

    request_id = response.headers.get(HEADER_REQUEST_ID, REQUEST_ID_MISSING)
    raise ServerError(response=response, status_code=status_code, request_id=request_id)


def decode_response(
    response: HTTPResponse,
    type_: type[T],
    codec: JSONCodec,
) -> T:
    """Decode the response body into ``type_``.

    An empty body decodes to ``EmptyResponse`` without touching the codec.

    Raises:
        DecodingFailedError: If the codec rejects the body. The codec error is
            kept as ``__cause__``.
    """
    if not response.content and type_ is EmptyResponse:
        return EmptyResponse()  # type: ignore[return-value]

    try:
        return codec.decode(response.content, type_)
    except Exception as e:
        raise DecodingFailedError(response=response, message=str(e)) from e
