"""Transport executor: puts a built request on the wire."""

import asyncio
import logging
from typing import Any, Optional, Protocol, runtime_checkable

import httpx

from ._config import Config
from ._utils._request_spec import RequestSpec
from ._utils._ssl_context import get_httpx_client_kwargs
from .models.exceptions import APIError, NetworkError
from .models.responses import HTTPResponse

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """Sends a request and returns the raw response.

    Transport-level failures (DNS, connection, timeouts, cancellation) must be
    raised; anything returned that is not an ``HTTPResponse`` is treated as an
    invalid response by the client.
    """

    async def send(self, request: RequestSpec) -> Any: ...

    async def aclose(self) -> None: ...


class HttpxTransport:
    """Default transport backed by a shared ``httpx.AsyncClient``."""

    def __init__(
        self,
        config: Optional[Config] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._config = config or Config()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(**get_httpx_client_kwargs(self._config))

    async def send(self, request: RequestSpec) -> HTTPResponse:
        logger.debug(f"Request: {request.method.value} {request.url}")

        kwargs: dict[str, Any] = {"headers": request.headers}
        if request.content is not None:
            kwargs["content"] = request.content
        if request.timeout is not None:
            kwargs["timeout"] = httpx.Timeout(request.timeout)

        response = await self._client.request(request.method.value, request.url, **kwargs)
        return HTTPResponse(
            url=str(response.url),
            status_code=response.status_code,
            headers=response.headers,
            content=response.content,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


async def execute(transport: Transport, request: RequestSpec) -> Any:
    """Send ``request``, normalizing transport failures into ``NetworkError``.

    Timeouts surface as ``NetworkError`` as well, and so does a cancellation
    raised by the transport itself. When the calling task is being cancelled
    (``task.cancel()``, ``asyncio.timeout``, task groups) the
    ``CancelledError`` propagates so the caller's cancellation still works.
    """
    try:
        return await transport.send(request)
    except APIError:
        raise
    except asyncio.CancelledError as e:
        task = asyncio.current_task()
        if task is not None and task.cancelling():
            raise
        raise NetworkError("Request was cancelled") from e
    except httpx.TimeoutException as e:
        raise NetworkError(f"Request timed out: {e}") from e
    except Exception as e:
        raise NetworkError(str(e) or type(e).__name__) from e
