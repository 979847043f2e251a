"""Pydantic model for the /stats payload and duration formatting helpers."""
from pydantic import BaseModel, Field

NS_PER_US = 1_000
NS_PER_MS = 1_000_000
NS_PER_SEC = 1_000_000_000
NS_PER_MIN = 60 * NS_PER_SEC
NS_PER_HOUR = 60 * NS_PER_MIN


def _with_fraction(value: int, unit: int) -> str:
    """Render value/unit as a decimal, trimming trailing zeros (1500, 1000 -> '1.5')."""
    whole, rest = divmod(value, unit)
    if rest == 0:
        return str(whole)
    digits = len(str(unit)) - 1
    return f"{whole}.{str(rest).rjust(digits, '0').rstrip('0')}"


def format_duration(ns: int) -> str:
    """
    Format a nanosecond duration for humans: '0s', '850ns', '1.5µs', '200ms',
    '1.5s', '2m0s', '1h0m0s'.
    """
    if ns == 0:
        return "0s"
    sign = "-" if ns < 0 else ""
    ns = abs(ns)
    if ns < NS_PER_US:
        return f"{sign}{ns}ns"
    if ns < NS_PER_MS:
        return f"{sign}{_with_fraction(ns, NS_PER_US)}µs"
    if ns < NS_PER_SEC:
        return f"{sign}{_with_fraction(ns, NS_PER_MS)}ms"
    hours, rest = divmod(ns, NS_PER_HOUR)
    minutes, rest = divmod(rest, NS_PER_MIN)
    seconds = _with_fraction(rest, NS_PER_SEC) + "s"
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}"
    if minutes:
        return f"{sign}{minutes}m{seconds}"
    return sign + seconds


def ns_to_seconds(ns: int) -> float:
    return ns / NS_PER_SEC


class MetricsSnapshot(BaseModel):
    pid: int
    uptime: str
    uptime_sec: float
    time: str
    unixtime: int
    status_code_count: dict[str, int]
    total_status_code_count: dict[str, int]
    count: int
    total_count: int
    total_response_time: str
    total_response_time_sec: float
    average_response_time: str
    average_response_time_sec: float

    # Raw values for in-process consumers; not part of the JSON payload
    uptime_ns: int = Field(default=0, exclude=True)
    total_response_time_ns: int = Field(default=0, exclude=True)
    average_response_time_ns: int = Field(default=0, exclude=True)
