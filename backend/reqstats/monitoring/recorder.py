"""
In-process request metrics: per-status-code counts, a short rolling window
that is cleared every reset interval, and cumulative/average response time.
"""
import logging
import os
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from starlette.types import ASGIApp, Receive, Scope, Send

from reqstats.monitoring.observer import ResponseObserver
from reqstats.monitoring.rwlock import ReadWriteLock
from reqstats.monitoring.snapshot import MetricsSnapshot, format_duration, ns_to_seconds

logger = logging.getLogger(__name__)

RESET_INTERVAL_SECONDS = 1.0
TIME_FORMAT = "%Y-%m-%d %H:%M:%S.%f %z %Z"


@dataclass(frozen=True)
class ScopeToken:
    started_ns: int
    observer: ResponseObserver


class MetricsRecorder:
    """
    Thread-safe request metrics. One instance per process, shared by every
    request path that records or reads metrics.

    A daemon thread clears the window counts every reset_interval seconds for
    the lifetime of the process.
    """

    def __init__(
        self,
        reset_interval: float = RESET_INTERVAL_SECONDS,
        clock: Callable[[], int] = time.perf_counter_ns,
    ):
        if reset_interval <= 0:
            raise ValueError("reset_interval must be positive")
        self._clock = clock
        self._lock = ReadWriteLock()
        self.started_at = datetime.now(timezone.utc)
        self._started_ns = clock()
        self.pid = os.getpid()
        self._window_counts: dict[str, int] = {}
        self._total_counts: dict[str, int] = {}
        self._total_response_time_ns = 0
        self.reset_interval = reset_interval

        self._resetter = threading.Thread(
            target=self._reset_forever,
            name="stats-window-reset",
            daemon=True,
        )
        self._resetter.start()
        logger.info(
            "telemetry stats_resetter_started interval_s=%s pid=%s",
            reset_interval,
            self.pid,
        )

    def _reset_forever(self) -> None:
        while True:
            time.sleep(self.reset_interval)
            self.reset_window()

    def reset_window(self) -> None:
        with self._lock.write_locked():
            self._window_counts = {}

    def begin(self) -> ScopeToken:
        return ScopeToken(started_ns=self._clock(), observer=ResponseObserver())

    def end(self, token: ScopeToken, status: int | None = None) -> int:
        """Record a finished scope. Uses the observed status unless one is given."""
        if status is None:
            status = token.observer.status
        return self.end_with_status(token.started_ns, status)

    def end_with_status(self, started_ns: int, status: int) -> int:
        """
        Count one response with the given status and add its elapsed time.
        Any integer status is recorded as-is. Returns elapsed nanoseconds.
        """
        elapsed_ns = self._clock() - started_ns
        key = str(status)
        with self._lock.write_locked():
            self._window_counts[key] = self._window_counts.get(key, 0) + 1
            self._total_counts[key] = self._total_counts.get(key, 0) + 1
            self._total_response_time_ns += elapsed_ns
        return elapsed_ns

    def snapshot(self) -> MetricsSnapshot:
        with self._lock.read_locked():
            now = datetime.now().astimezone()
            uptime_ns = self._clock() - self._started_ns
            window_counts = dict(self._window_counts)
            total_counts = dict(self._total_counts)
            total_ns = self._total_response_time_ns

        count = sum(window_counts.values())
        total_count = sum(total_counts.values())
        average_ns = total_ns // total_count if total_count > 0 else 0

        return MetricsSnapshot(
            pid=self.pid,
            uptime=format_duration(uptime_ns),
            uptime_sec=ns_to_seconds(uptime_ns),
            time=now.strftime(TIME_FORMAT),
            unixtime=int(now.timestamp()),
            status_code_count=window_counts,
            total_status_code_count=total_counts,
            count=count,
            total_count=total_count,
            total_response_time=format_duration(total_ns),
            total_response_time_sec=ns_to_seconds(total_ns),
            average_response_time=format_duration(average_ns),
            average_response_time_sec=ns_to_seconds(average_ns),
            uptime_ns=uptime_ns,
            total_response_time_ns=total_ns,
            average_response_time_ns=average_ns,
        )

    def wrap(self, app: ASGIApp) -> ASGIApp:
        """
        Wrap an ASGI app so every HTTP request it serves is recorded.
        Exceptions, cancellation included, propagate unchanged; if no response
        was started the request is counted as 500.
        """

        async def recorded_app(scope: Scope, receive: Receive, send: Send) -> None:
            if scope["type"] != "http":
                await app(scope, receive, send)
                return
            token = self.begin()
            try:
                await app(scope, receive, token.observer.wrap_send(send))
            except BaseException:
                token.observer.mark_failed()
                raise
            finally:
                elapsed_ns = self.end(token)
                logger.debug(
                    "telemetry request method=%s path=%s status=%s duration_ms=%.1f",
                    scope.get("method", ""),
                    scope.get("path", ""),
                    token.observer.status,
                    elapsed_ns / 1_000_000,
                )

        return recorded_app
