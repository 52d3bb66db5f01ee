from contextlib import contextmanager
from typing import Iterator, Union

from opentelemetry import trace
from opentelemetry.trace import Span, Status, StatusCode

from ._utils._endpoint import APIEndpoint
from ._utils._request_spec import HTTPMethod, method_name
from .models.exceptions import APIError

ATTR_HTTP_METHOD = "http.request.method"
ATTR_HTTP_STATUS_CODE = "http.response.status_code"
ATTR_ENDPOINT = "typedhttp.endpoint"
ATTR_ERROR_KIND = "typedhttp.error.kind"

tracer = trace.get_tracer("typedhttp")


@contextmanager
def request_span(
    method: Union[HTTPMethod, str], endpoint: APIEndpoint
) -> Iterator[Span]:
    """Open a client span around one verb call.

    ``APIError`` raised inside the block marks the span as failed and is
    re-raised unchanged.
    """
    with tracer.start_as_current_span(
        f"{method_name(method)} {endpoint.identity}",
        kind=trace.SpanKind.CLIENT,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        span.set_attribute(ATTR_HTTP_METHOD, method_name(method))
        span.set_attribute(ATTR_ENDPOINT, endpoint.identity)
        try:
            yield span
        except APIError as e:
            response = e.get_response()
            if response is not None:
                span.set_attribute(ATTR_HTTP_STATUS_CODE, response.status_code)
            span.set_attribute(ATTR_ERROR_KIND, e.kind.value)
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, e.description))
            raise
