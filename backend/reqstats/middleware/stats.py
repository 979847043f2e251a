"""Stats middleware: record status counts and latency for every HTTP request."""
from starlette.types import ASGIApp, Receive, Scope, Send

from reqstats.monitoring.recorder import MetricsRecorder


class StatsMiddleware:
    """Install a MetricsRecorder with app.add_middleware(StatsMiddleware, recorder=recorder)."""

    def __init__(self, app: ASGIApp, recorder: MetricsRecorder):
        self.app = app
        self._recorded_app = recorder.wrap(app)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self._recorded_app(scope, receive, send)
