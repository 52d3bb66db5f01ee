from ._endpoint import APIEndpoint, Endpoint
from ._multipart import (
    MultipartPayload,
    build_multipart_body,
    generate_boundary,
    mime_type_for_path,
)
from ._request_builder import (
    attach_json_body,
    attach_multipart,
    build_request,
    log_prefix,
)
from ._request_spec import HTTPMethod, RequestSpec, method_name

__all__ = [
    "APIEndpoint",
    "Endpoint",
    "HTTPMethod",
    "MultipartPayload",
    "RequestSpec",
    "attach_json_body",
    "attach_multipart",
    "build_multipart_body",
    "build_request",
    "generate_boundary",
    "log_prefix",
    "method_name",
    "mime_type_for_path",
]
