import asyncio
import json
import sys
from pathlib import Path
from typing import Any, AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import Headers

# Ensure local source package (src/typedhttp) is importable before tests collect
_PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
_SRC_PATH: Path = _PROJECT_ROOT / "src"
if _SRC_PATH.exists():
    sys.path.insert(0, str(_SRC_PATH))

from typedhttp import (  # noqa: E402
    APIClient,
    Config,
    Endpoint,
    HTTPResponse,
    InMemoryAnalytics,
    RequestSpec,
)


class RecordingLogger:
    def __init__(self) -> None:
        self.lines: list[tuple[str, str]] = []

    def info(self, value: str) -> None:
        self.lines.append(("info", value))

    def debug(self, value: str) -> None:
        self.lines.append(("debug", value))

    def error(self, value: str) -> None:
        self.lines.append(("error", value))

    def warn(self, value: str) -> None:
        self.lines.append(("warn", value))

    def messages(self, level: Optional[str] = None) -> list[str]:
        return [line for lvl, line in self.lines if level is None or lvl == level]


class UnauthorizedRecorder:
    def __init__(self) -> None:
        self.calls: list[Endpoint] = []

    def __call__(self, endpoint: Endpoint) -> None:
        self.calls.append(endpoint)


class FakeTransport:
    """In-process transport returning canned responses keyed by URL."""

    def __init__(self) -> None:
        self.routes: dict[str, Any] = {}
        self.requests: list[RequestSpec] = []
        self.closed = False

    def add_response(
        self,
        url: str,
        *,
        status_code: int = 200,
        json_body: Any = None,
        content: bytes = b"",
        headers: Optional[dict[str, str]] = None,
        delay: float = 0.0,
    ) -> None:
        if json_body is not None:
            content = json.dumps(json_body).encode()
        self.routes[url] = (
            HTTPResponse(
                url=url,
                status_code=status_code,
                headers=Headers(headers or {}),
                content=content,
            ),
            delay,
        )

    def add_raw(self, url: str, value: Any) -> None:
        self.routes[url] = (value, 0.0)

    def add_exception(self, url: str, error: BaseException) -> None:
        self.routes[url] = (error, 0.0)

    async def send(self, request: RequestSpec) -> Any:
        self.requests.append(request)
        value, delay = self.routes[request.url]
        if delay:
            await asyncio.sleep(delay)
        if isinstance(value, BaseException):
            raise value
        return value

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def base_url() -> str:
    return "https://api.example.com"


@pytest.fixture
def token() -> str:
    return "test-token"


@pytest.fixture
def endpoint(base_url: str, token: str) -> Endpoint:
    return Endpoint(
        url=f"{base_url}/users",
        identity="users",
        auth_headers={"Authorization": f"Bearer {token}"},
    )


@pytest.fixture
def public_endpoint(base_url: str) -> Endpoint:
    return Endpoint(url=f"{base_url}/public", identity="public", auth_headers={})


@pytest.fixture
def unauthenticated_endpoint(base_url: str) -> Endpoint:
    return Endpoint(url=f"{base_url}/private", identity="private", auth_headers=None)


@pytest.fixture
def config() -> Config:
    return Config(verify_ssl=False)


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def analytics() -> InMemoryAnalytics:
    return InMemoryAnalytics()


@pytest.fixture
def unauthorized() -> UnauthorizedRecorder:
    return UnauthorizedRecorder()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest_asyncio.fixture
async def client(
    config: Config,
    logger: RecordingLogger,
    analytics: InMemoryAnalytics,
    unauthorized: UnauthorizedRecorder,
) -> AsyncGenerator[APIClient[Endpoint], None]:
    """Client on the default httpx transport, for use with ``httpx_mock``."""
    api_client: APIClient[Endpoint] = APIClient(
        config,
        logger=logger,
        analytics=analytics,
        unauthorized_handler=unauthorized,
    )
    yield api_client
    await api_client.aclose()


@pytest.fixture
def fake_client(
    config: Config,
    transport: FakeTransport,
    logger: RecordingLogger,
    analytics: InMemoryAnalytics,
    unauthorized: UnauthorizedRecorder,
) -> APIClient[Endpoint]:
    """Client on an in-process fake transport."""
    return APIClient(
        config,
        transport=transport,
        logger=logger,
        analytics=analytics,
        unauthorized_handler=unauthorized,
    )
