import asyncio
import logging
import threading
from concurrent.futures import Future
from datetime import datetime, timezone
from typing import (
    Any,
    Awaitable,
    Callable,
    Generic,
    Optional,
    TypeVar,
    Union,
    overload,
)

from ._codec import JSONCodec, PydanticJSONCodec
from ._config import Config
from ._hooks import APIAnalytics, APIClientLogger, Hooks, UnauthorizedHandler
from ._tracing import ATTR_HTTP_STATUS_CODE, request_span
from ._transport import HttpxTransport, Transport, execute
from ._utils._endpoint import APIEndpoint
from ._utils._multipart import MultipartPayload
from ._utils._request_builder import (
    attach_json_body,
    attach_multipart,
    build_request,
    log_prefix,
)
from ._utils._request_spec import HTTPMethod, method_name
from ._validation import decode_response, ensure_http_response, validate_response
from .models.exceptions import APIError, NetworkError, UnknownError
from .models.responses import APIResponse, EmptyResponse, HTTPResponse
from .models.results import Failure, Result, Success

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=APIEndpoint)
T = TypeVar("T")

CallbackHandle = Union["asyncio.Task[None]", "Future[None]"]


def _now() -> datetime:
    return datetime.now(timezone.utc)


async def _cancel_pending() -> None:
    # let tasks submitted just before this one take their first step
    await asyncio.sleep(0)
    current = asyncio.current_task()
    pending = [task for task in asyncio.all_tasks() if task is not current]
    for task in pending:
        task.cancel()
    await asyncio.gather(*pending, return_exceptions=True)


class _BackgroundLoop:
    """Event loop on a daemon thread for callbacks issued outside any loop."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None

    def submit(self, coro: Awaitable[None]) -> "Future[None]":
        with self._lock:
            if self._loop is None or self._loop.is_closed():
                self._loop = asyncio.new_event_loop()
                self._thread = threading.Thread(
                    target=self._loop.run_forever,
                    name="typedhttp-callbacks",
                    daemon=True,
                )
                self._thread.start()
            loop = self._loop
        return asyncio.run_coroutine_threadsafe(coro, loop)  # type: ignore[arg-type]

    def stop(self) -> None:
        """Cancel in-flight calls, wait for their callbacks, then stop the loop.

        Each cancelled call still delivers a ``Failure`` to its callback.
        """
        with self._lock:
            loop, thread = self._loop, self._thread
            self._loop = self._thread = None
        if loop is None:
            return
        if thread is not threading.current_thread():
            asyncio.run_coroutine_threadsafe(_cancel_pending(), loop).result()
        loop.call_soon_threadsafe(loop.stop)
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        loop.close()


class APIClient(Generic[E]):
    """Generic HTTP client for typed endpoints.

    Every verb is available as a coroutine that returns the typed result or
    raises an ``APIError``, and as a ``*_with_callback`` variant that runs the
    same call concurrently and hands exactly one ``Success`` or ``Failure`` to
    the callback.

    Each call logs when it starts, when a response arrives and when it fails,
    and records exactly one analytics entry.

    Examples:
        >>> client = APIClient(logger=StdlibLogger(), analytics=InMemoryAnalytics())
        >>> user = await client.get(Endpoint(url=..., identity="user"), User)
        >>> user.data.name
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        *,
        transport: Optional[Transport] = None,
        encoder: Optional[JSONCodec] = None,
        decoder: Optional[JSONCodec] = None,
        analytics: Optional[APIAnalytics] = None,
        logger: Optional[APIClientLogger] = None,
        unauthorized_handler: Optional[UnauthorizedHandler[E]] = None,
    ) -> None:
        self._config = config or Config()
        self._owns_transport = transport is None
        self._transport: Transport = transport or HttpxTransport(self._config)
        self._encoder: JSONCodec = encoder or PydanticJSONCodec()
        self._decoder: JSONCodec = decoder or PydanticJSONCodec()
        self._hooks: Hooks[E] = Hooks(
            logger=logger,
            analytics=analytics,
            unauthorized_handler=unauthorized_handler,
        )
        self._background = _BackgroundLoop()
        self._tasks: set["asyncio.Task[None]"] = set()

    @property
    def config(self) -> Config:
        return self._config

    async def __aenter__(self) -> "APIClient[E]":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the default transport and stop the callback loop.

        An injected transport is left open for its owner to close.
        """
        self._background.stop()
        if self._owns_transport:
            await self._transport.aclose()

    # GET

    @overload
    async def get(
        self,
        endpoint: E,
        response_type: type[T],
        *,
        log_response_body: Optional[bool] = None,
    ) -> APIResponse[T]: ...

    @overload
    async def get(
        self,
        endpoint: E,
        response_type: None = None,
        *,
        log_response_body: Optional[bool] = None,
    ) -> HTTPResponse: ...

    async def get(
        self,
        endpoint: E,
        response_type: Optional[type[T]] = None,
        *,
        log_response_body: Optional[bool] = None,
    ) -> Union[APIResponse[T], HTTPResponse]:
        return await self._request(
            endpoint,
            HTTPMethod.GET,
            response_type=response_type,
            log_response_body=log_response_body,
        )

    def get_with_callback(
        self,
        endpoint: E,
        callback: Callable[[Result[Any]], None],
        response_type: Optional[type[T]] = None,
        *,
        log_response_body: Optional[bool] = None,
    ) -> CallbackHandle:
        return self._dispatch(
            lambda: self.get(
                endpoint, response_type, log_response_body=log_response_body
            ),
            callback,
        )

    # POST

    @overload
    async def post(
        self,
        endpoint: E,
        body: Any,
        response_type: type[T],
        *,
        log_request_body: Optional[bool] = None,
        log_response_body: Optional[bool] = None,
    ) -> APIResponse[T]: ...

    @overload
    async def post(
        self,
        endpoint: E,
        body: Any,
        response_type: None = None,
        *,
        log_request_body: Optional[bool] = None,
        log_response_body: Optional[bool] = None,
    ) -> HTTPResponse: ...

    async def post(
        self,
        endpoint: E,
        body: Any,
        response_type: Optional[type[T]] = None,
        *,
        log_request_body: Optional[bool] = None,
        log_response_body: Optional[bool] = None,
    ) -> Union[APIResponse[T], HTTPResponse]:
        """Send ``body`` as JSON.

        Without ``response_type`` the body is only checked to be empty or a
        JSON object and the response metadata is returned.
        """
        return await self._request(
            endpoint,
            HTTPMethod.POST,
            body=body,
            response_type=response_type,
            log_request_body=log_request_body,
            log_response_body=log_response_body,
        )

    def post_with_callback(
        self,
        endpoint: E,
        body: Any,
        callback: Callable[[Result[Any]], None],
        response_type: Optional[type[T]] = None,
        *,
        log_request_body: Optional[bool] = None,
        log_response_body: Optional[bool] = None,
    ) -> CallbackHandle:
        return self._dispatch(
            lambda: self.post(
                endpoint,
                body,
                response_type,
                log_request_body=log_request_body,
                log_response_body=log_response_body,
            ),
            callback,
        )

    # PUT

    @overload
    async def put(
        self,
        endpoint: E,
        body: Any,
        response_type: type[T],
        *,
        log_request_body: Optional[bool] = None,
        log_response_body: Optional[bool] = None,
    ) -> APIResponse[T]: ...

    @overload
    async def put(
        self,
        endpoint: E,
        body: Any,
        response_type: None = None,
        *,
        log_request_body: Optional[bool] = None,
        log_response_body: Optional[bool] = None,
    ) -> HTTPResponse: ...

    async def put(
        self,
        endpoint: E,
        body: Any,
        response_type: Optional[type[T]] = None,
        *,
        log_request_body: Optional[bool] = None,
        log_response_body: Optional[bool] = None,
    ) -> Union[APIResponse[T], HTTPResponse]:
        return await self._request(
            endpoint,
            HTTPMethod.PUT,
            body=body,
            response_type=response_type,
            log_request_body=log_request_body,
            log_response_body=log_response_body,
        )

    def put_with_callback(
        self,
        endpoint: E,
        body: Any,
        callback: Callable[[Result[Any]], None],
        response_type: Optional[type[T]] = None,
        *,
        log_request_body: Optional[bool] = None,
        log_response_body: Optional[bool] = None,
    ) -> CallbackHandle:
        return self._dispatch(
            lambda: self.put(
                endpoint,
                body,
                response_type,
                log_request_body=log_request_body,
                log_response_body=log_response_body,
            ),
            callback,
        )

    # DELETE

    @overload
    async def delete(
        self,
        endpoint: E,
        response_type: type[T],
        *,
        body: Any = None,
        log_request_body: Optional[bool] = None,
        log_response_body: Optional[bool] = None,
    ) -> APIResponse[T]: ...

    @overload
    async def delete(
        self,
        endpoint: E,
        response_type: None = None,
        *,
        body: Any = None,
        log_request_body: Optional[bool] = None,
        log_response_body: Optional[bool] = None,
    ) -> HTTPResponse: ...

    async def delete(
        self,
        endpoint: E,
        response_type: Optional[type[T]] = None,
        *,
        body: Any = None,
        log_request_body: Optional[bool] = None,
        log_response_body: Optional[bool] = None,
    ) -> Union[APIResponse[T], HTTPResponse]:
        return await self._request(
            endpoint,
            HTTPMethod.DELETE,
            body=body,
            response_type=response_type,
            log_request_body=log_request_body,
            log_response_body=log_response_body,
        )

    def delete_with_callback(
        self,
        endpoint: E,
        callback: Callable[[Result[Any]], None],
        response_type: Optional[type[T]] = None,
        *,
        body: Any = None,
        log_request_body: Optional[bool] = None,
        log_response_body: Optional[bool] = None,
    ) -> CallbackHandle:
        return self._dispatch(
            lambda: self.delete(
                endpoint,
                response_type,
                body=body,
                log_request_body=log_request_body,
                log_response_body=log_response_body,
            ),
            callback,
        )

    # Multipart

    async def multipart_upload(
        self,
        endpoint: E,
        method: Union[HTTPMethod, str],
        payload: MultipartPayload,
        *,
        log_request_body: Optional[bool] = None,
        log_response_body: Optional[bool] = None,
    ) -> HTTPResponse:
        """Upload form fields and files as ``multipart/form-data``.

        The response body is never decoded; only the response metadata is
        returned.

        Args:
            endpoint: Target endpoint.
            method: HTTP verb to use, usually ``POST`` or ``PUT``.
            payload: Form fields and files to send.

        Raises:
            EncodingFailedError: If a file cannot be read. Nothing is sent.
        """
        result = await self._perform(
            endpoint,
            method,
            multipart=payload,
            response_type=None,
            log_request_body=log_request_body,
            log_response_body=log_response_body,
        )
        return result.response

    def multipart_upload_with_callback(
        self,
        endpoint: E,
        method: HTTPMethod,
        payload: MultipartPayload,
        callback: Callable[[Result[HTTPResponse]], None],
        *,
        log_request_body: Optional[bool] = None,
        log_response_body: Optional[bool] = None,
    ) -> CallbackHandle:
        return self._dispatch(
            lambda: self.multipart_upload(
                endpoint,
                method,
                payload,
                log_request_body=log_request_body,
                log_response_body=log_response_body,
            ),
            callback,
        )

    # Raw

    async def send_raw(
        self,
        endpoint: E,
        method: Union[HTTPMethod, str],
        body: Any = None,
        *,
        log_request_body: Optional[bool] = None,
    ) -> HTTPResponse:
        """Build and send a JSON request without validating the response.

        Any status code is returned as is. Analytics are only recorded when
        the request could not be built or sent.
        """
        prefix = log_prefix(method, endpoint)
        start_time = _now()
        self._hooks.info(f"{prefix} | started")

        try:
            method = HTTPMethod(method)
            spec = build_request(endpoint, method)
            attach_json_body(
                spec,
                body,
                self._encoder,
                hooks=self._hooks,
                log_body=self._flag(log_request_body, self._config.log_request_body),
            )
            response = ensure_http_response(await execute(self._transport, spec))
        except asyncio.CancelledError:
            self._report_failure(
                prefix, endpoint, method, start_time, NetworkError("Request was cancelled")
            )
            raise
        except Exception as e:
            error = self._normalize(e)
            self._report_failure(prefix, endpoint, method, start_time, error)
            if error is e:
                raise
            raise error from e

        self._hooks.info(f"{prefix} | Response code: {response.status_code}")
        return response

    # Internals

    async def _request(
        self,
        endpoint: E,
        method: HTTPMethod,
        *,
        body: Any = None,
        response_type: Optional[type[T]] = None,
        log_request_body: Optional[bool] = None,
        log_response_body: Optional[bool] = None,
    ) -> Union[APIResponse[T], HTTPResponse]:
        result = await self._perform(
            endpoint,
            method,
            body=body,
            response_type=response_type or EmptyResponse,
            log_request_body=log_request_body,
            log_response_body=log_response_body,
        )
        if response_type is None:
            return result.response
        return result

    async def _perform(
        self,
        endpoint: E,
        method: Union[HTTPMethod, str],
        *,
        body: Any = None,
        multipart: Optional[MultipartPayload] = None,
        response_type: Optional[type[Any]],
        log_request_body: Optional[bool] = None,
        log_response_body: Optional[bool] = None,
    ) -> APIResponse[Any]:
        prefix = log_prefix(method, endpoint)
        log_request = self._flag(log_request_body, self._config.log_request_body)
        log_response = self._flag(log_response_body, self._config.log_response_body)

        start_time = _now()
        self._hooks.info(f"{prefix} | started")

        with request_span(method, endpoint) as span:
            response: Optional[HTTPResponse] = None
            try:
                method = HTTPMethod(method)
                spec = build_request(endpoint, method)
                if multipart is not None:
                    attach_multipart(
                        spec, multipart, hooks=self._hooks, log_body=log_request
                    )
                else:
                    attach_json_body(
                        spec, body, self._encoder, hooks=self._hooks, log_body=log_request
                    )

                response = ensure_http_response(await execute(self._transport, spec))
                self._hooks.info(f"{prefix} | Response code: {response.status_code}")
                span.set_attribute(ATTR_HTTP_STATUS_CODE, response.status_code)

                validate_response(response, endpoint, self._hooks)

                if log_response and response.text is not None:
                    self._hooks.info(f"{prefix} | responseData string: {response.text}")

                data = None
                if response_type is not None:
                    data = decode_response(response, response_type, self._decoder)
            except asyncio.CancelledError:
                self._report_failure(
                    prefix,
                    endpoint,
                    method,
                    start_time,
                    NetworkError("Request was cancelled"),
                    response,
                )
                raise
            except Exception as e:
                error = self._normalize(e)
                self._report_failure(
                    prefix, endpoint, method, start_time, error, response
                )
                if error is e:
                    raise
                raise error from e

            self._hooks.record(
                endpoint.identity,
                method.value,
                start_time,
                _now(),
                True,
                status_code=response.status_code,
            )
            return APIResponse(data=data, response=response)

    def _report_failure(
        self,
        prefix: str,
        endpoint: E,
        method: Union[HTTPMethod, str],
        start_time: datetime,
        error: APIError,
        response: Optional[HTTPResponse] = None,
    ) -> None:
        self._hooks.error(f"{prefix} | error: {error.description}")
        self._hooks.record(
            endpoint.identity,
            method_name(method),
            start_time,
            _now(),
            False,
            status_code=response.status_code if response is not None else None,
            error=error.description,
        )

    @staticmethod
    def _normalize(error: Exception) -> APIError:
        if isinstance(error, APIError):
            return error
        logger.debug("Unclassified failure during request", exc_info=error)
        return UnknownError()

    @staticmethod
    def _flag(value: Optional[bool], default: bool) -> bool:
        return default if value is None else value

    def _dispatch(
        self,
        operation: Callable[[], Awaitable[T]],
        callback: Callable[[Result[T]], None],
    ) -> CallbackHandle:
        def deliver(result: Result[T]) -> None:
            try:
                callback(result)
            except Exception:
                logger.exception("Result callback raised")

        async def run() -> None:
            result: Result[T]
            try:
                result = Success(await operation())
            except asyncio.CancelledError as e:
                cancelled = NetworkError("Request was cancelled")
                cancelled.__cause__ = e
                deliver(Failure(cancelled))
                raise
            except APIError as e:
                result = Failure(e)
            except Exception as e:
                error = UnknownError()
                error.__cause__ = e
                result = Failure(error)

            deliver(result)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return self._background.submit(run())

        task = loop.create_task(run())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task
