import logging

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from reqstats.middleware import StatsMiddleware
from reqstats.monitoring import MetricsRecorder, MetricsSnapshot
from settings import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

recorder = MetricsRecorder(reset_interval=settings.stats_reset_interval_seconds)

app = FastAPI(title=settings.app_name, debug=settings.debug)
app.state.recorder = recorder


def get_recorder(request: Request) -> MetricsRecorder:
    return request.app.state.recorder


@app.exception_handler(Exception)
def unhandled_exception_handler(request: Request, exc: Exception):
    """Return consistent JSON error for unhandled exceptions (500). Skip validation/HTTP errors."""
    from fastapi.exceptions import RequestValidationError
    if isinstance(exc, (HTTPException, RequestValidationError)):
        raise exc
    logger.exception("telemetry unhandled_exception path=%s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "An unexpected error occurred. Please try again later."},
    )


# Order: last added = outermost. Stats wraps CORS so preflight responses are counted too.
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(StatsMiddleware, recorder=recorder)


@app.get("/favicon.ico", include_in_schema=False)
def favicon():
    """Return 204 so browser favicon requests don't log 404."""
    return Response(status_code=204)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get(settings.stats_path, response_model=MetricsSnapshot)
def stats(recorder: MetricsRecorder = Depends(get_recorder)):
    """Request counts per status code (last window and lifetime), uptime and response times."""
    return recorder.snapshot()
