from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, Optional, TypeVar

from httpx import Headers
from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


@dataclass(frozen=True)
class HTTPResponse:
    """Status, headers and raw body of a received HTTP response."""

    url: str
    status_code: int
    headers: Headers = field(default_factory=Headers)
    content: bytes = b""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code <= 299

    @property
    def text(self) -> Optional[str]:
        """Body decoded as UTF-8, or ``None`` when it is not valid text."""
        try:
            return self.content.decode("utf-8")
        except UnicodeDecodeError:
            return None


@dataclass(frozen=True)
class APIResponse(Generic[T]):
    """A decoded payload together with the response it came from."""

    data: T
    response: HTTPResponse


class EmptyResponse(BaseModel):
    """Marker type for responses that carry no meaningful payload.

    Decoding an empty body into this type always succeeds.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)


class AnalyticsRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    endpoint: str
    method: str
    start_time: datetime
    end_time: datetime
    success: bool
    status_code: Optional[int] = Field(default=None)
    error: Optional[str] = Field(default=None)

    @property
    def duration(self) -> float:
        """Wall-clock duration of the call in seconds."""
        return (self.end_time - self.start_time).total_seconds()
