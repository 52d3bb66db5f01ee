from .exceptions import (
    APIError,
    APIErrorKind,
    DecodingFailedError,
    EncodingFailedError,
    InvalidResponseError,
    MissingAuthHeaderError,
    NetworkError,
    ServerError,
    UnknownError,
)
from .responses import AnalyticsRecord, APIResponse, EmptyResponse, HTTPResponse
from .results import Failure, Result, ResultCallback, Success

__all__ = [
    "APIError",
    "APIErrorKind",
    "APIResponse",
    "AnalyticsRecord",
    "DecodingFailedError",
    "EmptyResponse",
    "EncodingFailedError",
    "Failure",
    "HTTPResponse",
    "InvalidResponseError",
    "MissingAuthHeaderError",
    "NetworkError",
    "Result",
    "ResultCallback",
    "ServerError",
    "Success",
    "UnknownError",
]
