from enum import Enum
from typing import Any, Optional

from .responses import HTTPResponse


class APIErrorKind(str, Enum):
    MISSING_AUTH_HEADER = "missing_auth_header"
    ENCODING_FAILED = "encoding_failed"
    NETWORK_ERROR = "network_error"
    INVALID_RESPONSE = "invalid_response"
    SERVER_ERROR = "server_error"
    DECODING_FAILED = "decoding_failed"
    UNKNOWN = "unknown"


_CLIENT_ERROR_KINDS = frozenset(
    {
        APIErrorKind.MISSING_AUTH_HEADER,
        APIErrorKind.ENCODING_FAILED,
        APIErrorKind.DECODING_FAILED,
    }
)


class APIError(Exception):
    """Base class of every error raised or delivered by the client.

    Each subclass corresponds to exactly one ``APIErrorKind``, so callers can
    either catch a specific subclass or branch on ``error.kind``.
    """

    kind: APIErrorKind = APIErrorKind.UNKNOWN

    def __init__(self, description: str):
        self.description = description
        super().__init__(description)

    @property
    def is_client_error(self) -> bool:
        """Whether the error was caused by how the request was built.

        Client errors are not worth retrying; network and server errors may be.
        """
        return self.kind in _CLIENT_ERROR_KINDS

    def get_response(self) -> Optional[HTTPResponse]:
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.description!r})"


class MissingAuthHeaderError(APIError):
    kind = APIErrorKind.MISSING_AUTH_HEADER

    def __init__(self) -> None:
        super().__init__("Authentication header is missing")


class EncodingFailedError(APIError):
    kind = APIErrorKind.ENCODING_FAILED

    def __init__(self) -> None:
        super().__init__("Failed to encode request body")


class NetworkError(APIError):
    kind = APIErrorKind.NETWORK_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Network error: {message}")


class InvalidResponseError(APIError):
    kind = APIErrorKind.INVALID_RESPONSE

    def __init__(self, response: Any):
        self.response = response
        super().__init__("Invalid response received")


class ServerError(APIError):
    kind = APIErrorKind.SERVER_ERROR

    def __init__(self, response: HTTPResponse, status_code: int, request_id: str):
        self.response = response
        self.status_code = status_code
        self.request_id = request_id
        super().__init__(f"Server error {status_code}, Request ID: {request_id}")

    def get_response(self) -> Optional[HTTPResponse]:
        return self.response


class DecodingFailedError(APIError):
    kind = APIErrorKind.DECODING_FAILED

    def __init__(self, response: HTTPResponse, message: str):
        self.response = response
        self.message = message
        super().__init__(f"Failed to decode response: {message}")

    def get_response(self) -> Optional[HTTPResponse]:
        return self.response


class UnknownError(APIError):
    kind = APIErrorKind.UNKNOWN

    def __init__(self) -> None:
        super().__init__("Unknown error occurred")
