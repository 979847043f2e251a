"""
Response observer: decorates an ASGI send callable and remembers the status
code the downstream app sends. Status is 200 unless the app says otherwise.
"""
from starlette.types import Message, Send

DEFAULT_STATUS = 200


class ResponseObserver:
    def __init__(self, default_status: int = DEFAULT_STATUS):
        self.status = default_status
        self.started = False

    def wrap_send(self, send: Send) -> Send:
        async def observing_send(message: Message) -> None:
            if message["type"] == "http.response.start":
                self.status = int(message.get("status", self.status))
                self.started = True
            await send(message)

        return observing_send

    def mark_failed(self, status: int = 500) -> None:
        """Record a failure status unless a response is already on the wire."""
        if not self.started:
            self.status = status
