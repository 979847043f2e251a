from reqstats.monitoring.observer import ResponseObserver
from reqstats.monitoring.recorder import MetricsRecorder, ScopeToken
from reqstats.monitoring.snapshot import MetricsSnapshot, format_duration

__all__ = ["MetricsRecorder", "MetricsSnapshot", "ResponseObserver", "ScopeToken", "format_duration"]
