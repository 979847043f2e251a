"""In-process HTTP request metrics for ASGI apps."""
