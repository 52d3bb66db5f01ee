# Headers
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_ACCEPT = "Accept"
HEADER_USER_AGENT = "User-Agent"
HEADER_REQUEST_ID = "x-request-id"
HEADER_CACHE_CONTROL = "Cache-Control"
HEADER_PRAGMA = "Pragma"

# Content types
CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_MULTIPART = "multipart/form-data"
CONTENT_TYPE_OCTET_STREAM = "application/octet-stream"

DEFAULT_JSON_HEADERS = {
    HEADER_CONTENT_TYPE: CONTENT_TYPE_JSON,
    HEADER_ACCEPT: CONTENT_TYPE_JSON,
}

# Multipart uploads are never cached and always use a fixed timeout
MULTIPART_TIMEOUT_SECONDS = 60.0
NO_CACHE_HEADERS = {
    HEADER_CACHE_CONTROL: "no-cache, no-store, max-age=0",
    HEADER_PRAGMA: "no-cache",
}
MULTIPART_BOUNDARY_PREFIX = "Boundary-"

REQUEST_ID_MISSING = "N/A"
UNAUTHORIZED_STATUS_CODE = 401

# Environment variables
ENV_TIMEOUT = "TYPEDHTTP_TIMEOUT"
ENV_FOLLOW_REDIRECTS = "TYPEDHTTP_FOLLOW_REDIRECTS"
ENV_VERIFY_SSL = "TYPEDHTTP_VERIFY_SSL"
ENV_LOG_REQUEST_BODY = "TYPEDHTTP_LOG_REQUEST_BODY"
ENV_LOG_RESPONSE_BODY = "TYPEDHTTP_LOG_RESPONSE_BODY"
ENV_USER_AGENT = "TYPEDHTTP_USER_AGENT"
