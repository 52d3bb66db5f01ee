"""Logger, analytics and unauthorized-handler hooks fired around every call."""

import logging
import threading
from datetime import datetime
from typing import Callable, Generic, Optional, Protocol, TypeVar, runtime_checkable

from .models.responses import AnalyticsRecord

logger = logging.getLogger(__name__)

E = TypeVar("E")

UnauthorizedHandler = Callable[[E], None]


@runtime_checkable
class APIClientLogger(Protocol):
    def info(self, value: str) -> None: ...

    def debug(self, value: str) -> None: ...

    def error(self, value: str) -> None: ...

    def warn(self, value: str) -> None: ...


@runtime_checkable
class APIAnalytics(Protocol):
    def add_analytics(
        self,
        endpoint: str,
        method: str,
        start_time: datetime,
        end_time: datetime,
        success: bool,
        status_code: Optional[int],
        error: Optional[str],
    ) -> None: ...


class StdlibLogger:
    """Forwards client log lines to a standard library logger."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger("typedhttp.client")

    def info(self, value: str) -> None:
        self._logger.info(value)

    def debug(self, value: str) -> None:
        self._logger.debug(value)

    def error(self, value: str) -> None:
        self._logger.error(value)

    def warn(self, value: str) -> None:
        self._logger.warning(value)


class NullLogger:
    def info(self, value: str) -> None:
        pass

    def debug(self, value: str) -> None:
        pass

    def error(self, value: str) -> None:
        pass

    def warn(self, value: str) -> None:
        pass


class InMemoryAnalytics:
    """Analytics sink that keeps every record in memory.

    Safe to share between concurrent calls and threads.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: list[AnalyticsRecord] = []

    def add_analytics(
        self,
        endpoint: str,
        method: str,
        start_time: datetime,
        end_time: datetime,
        success: bool,
        status_code: Optional[int],
        error: Optional[str],
    ) -> None:
        record = AnalyticsRecord(
            endpoint=endpoint,
            method=method,
            start_time=start_time,
            end_time=end_time,
            success=success,
            status_code=status_code,
            error=error,
        )
        with self._lock:
            self._records.append(record)

    @property
    def records(self) -> list[AnalyticsRecord]:
        with self._lock:
            return list(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def summary(self) -> dict[str, float]:
        """Aggregate call count, success rate and average duration."""
        records = self.records
        total = len(records)
        successful = sum(1 for record in records if record.success)
        average = sum(record.duration for record in records) / max(total, 1)
        return {
            "total_calls": total,
            "successful_calls": successful,
            "success_rate": successful / max(total, 1) * 100,
            "average_duration": average,
        }


class Hooks(Generic[E]):
    """Invokes the configured hooks without ever letting them fail a call."""

    def __init__(
        self,
        logger: Optional[APIClientLogger] = None,
        analytics: Optional[APIAnalytics] = None,
        unauthorized_handler: Optional[UnauthorizedHandler[E]] = None,
    ) -> None:
        self.logger = logger
        self.analytics = analytics
        self.unauthorized_handler = unauthorized_handler

    def _log(self, level: str, value: str) -> None:
        if self.logger is None:
            return
        try:
            getattr(self.logger, level)(value)
        except Exception:
            logger.exception("Client logger failed while writing a %s line", level)

    def info(self, value: str) -> None:
        self._log("info", value)

    def debug(self, value: str) -> None:
        self._log("debug", value)

    def error(self, value: str) -> None:
        self._log("error", value)

    def warn(self, value: str) -> None:
        self._log("warn", value)

    def record(
        self,
        endpoint: str,
        method: str,
        start_time: datetime,
        end_time: datetime,
        success: bool,
        status_code: Optional[int] = None,
        error: Optional[str] = None,
    ) -> None:
        if self.analytics is None:
            return
        try:
            self.analytics.add_analytics(
                endpoint=endpoint,
                method=method,
                start_time=start_time,
                end_time=end_time,
                success=success,
                status_code=status_code,
                error=error,
            )
        except Exception:
            logger.exception("Analytics sink failed for %s %s", method, endpoint)

    def unauthorized(self, endpoint: E) -> None:
        if self.unauthorized_handler is None:
            return
        try:
            self.unauthorized_handler(endpoint)
        except Exception:
            logger.exception("Unauthorized handler failed for %s", endpoint)
