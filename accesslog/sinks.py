"""
AccessLog - Response Output Sinks
===================================

What:  The capability interface every response output sink implements,
       plus the two concrete sinks shipped with the package.
How:   ResponseSink declares write/forward/close. forward and close have
       no-op defaults, so a sink with nothing to close simply inherits them
       and LogWriter never has to inspect the sink's type.

Sinks:
    SendSink:    adapts an ASGI `send` callable (used by the middleware)
    BufferSink:  collects bytes in memory (tests, offline formatting)

Error handling:
    Sinks raise whatever their transport raises. Nothing here catches,
    wraps or retries.
"""

from abc import ABC, abstractmethod

from starlette.types import Message, Send


class ResponseSink(ABC):
    """Output sink for a single HTTP response."""

    @abstractmethod
    async def write(self, data: bytes) -> int:
        """Write a chunk of response body. Returns the number of bytes accepted."""

    async def forward(self, message: Message) -> None:
        """Pass a non-body ASGI message (response start, trailers) through."""
        return None

    async def close(self) -> None:
        """Finish the response. Sinks with nothing to release keep this no-op."""
        return None


class SendSink(ResponseSink):
    """
    Sink writing to an ASGI `send` channel.

    Body chunks are emitted with `more_body=True`; close() emits the
    terminating empty body message. This keeps the response open until the
    writer has logged, regardless of how the app framed its body.
    """

    def __init__(self, send: Send):
        self._send = send
        self.closed = False

    async def write(self, data: bytes) -> int:
        await self._send(
            {"type": "http.response.body", "body": bytes(data), "more_body": True}
        )
        return len(data)

    async def forward(self, message: Message) -> None:
        await self._send(message)

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        await self._send({"type": "http.response.body", "body": b"", "more_body": False})


class BufferSink(ResponseSink):
    """In-memory sink. Keeps every written byte and every forwarded message."""

    def __init__(self) -> None:
        self.data = bytearray()
        self.messages: list = []
        self.closed = False

    async def write(self, data: bytes) -> int:
        self.data.extend(data)
        return len(data)

    async def forward(self, message: Message) -> None:
        self.messages.append(message)

    async def close(self) -> None:
        self.closed = True
