"""
AccessLog - Capturing Writer
==============================

What:  Records every byte written to a response while forwarding it
       unchanged, then emits one access log line when the response closes.
How:   LogWriter sits between the application and the real output sink.
       write() appends to an in-memory buffer before forwarding; close()
       runs the formatter over the full buffer, hands the line to the
       injected logger and then closes the sink.
Who:   Created by AccessLogMiddleware, one instance per HTTP request.
When:  Constructed when the request enters the middleware; closed when the
       application sends its final body message.

Lifecycle:
    LogWriter(...)           → timestamp captured
    __call__(start message)  → ResponseInfo populated, message forwarded
    write(chunk) × N         → buffer += chunk, chunk forwarded
    close()                  → formatter(now, response, request, body) → logger
                             → sink.close()

Ordering:
    The buffer grows strictly in write order and the formatter only ever
    sees it from close()/log(), after the last write. A writer is owned by
    a single request flow and is never shared, so no locking is involved.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from starlette.datastructures import Headers
from starlette.requests import Request
from starlette.types import Message

from accesslog.exceptions import WriterClosedError
from accesslog.sinks import ResponseSink


class ResponseInfo:
    """
    What the log formatters know about the response.

    status defaults to 200 until an `http.response.start` message arrives,
    headers to an empty Headers mapping.
    """

    def __init__(self, status: int = 200, headers: Optional[Headers] = None):
        self.status = status
        self.headers = headers if headers is not None else Headers()
        self.started = False

    def start(self, message: Message) -> None:
        """Record status and headers from an `http.response.start` message."""
        self.status = int(message["status"])
        self.headers = Headers(raw=list(message.get("headers", [])))
        self.started = True

    def __repr__(self) -> str:
        return f"ResponseInfo(status={self.status}, started={self.started})"


# A formatter turns the data captured for one request into one log line.
# Called once, after the response body is complete; it must not mutate its
# arguments.
Formatter = Callable[[datetime, ResponseInfo, Request, bytes], str]


def local_now() -> datetime:
    """Timezone-aware current time in the server's local zone."""
    return datetime.now(timezone.utc).astimezone()


class LogWriter:
    """
    Chained writer keeping the response body in memory for logging.

    Attributes:
        now:        Timestamp captured at construction
        request:    The inbound request
        response:   Status/headers of the outbound response
        sink:       Underlying output sink (owned by this writer)
        body:       Every byte written so far, in order
        formatter:  Builds the log line
        logger:     Receives the log line
    """

    def __init__(
        self,
        request: Request,
        sink: ResponseSink,
        formatter: Formatter,
        logger: logging.Logger,
        level: int = logging.INFO,
        response: Optional[ResponseInfo] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.now = (clock or local_now)()
        self.request = request
        self.response = response if response is not None else ResponseInfo()
        self.sink = sink
        self.body = bytearray()
        self.formatter = formatter
        self.logger = logger
        self.level = level
        self.closed = False
        self._logged = False

    async def write(self, data: bytes) -> int:
        """
        Buffer `data`, then forward it to the sink.

        Returns the sink's byte count. Anything the sink raises propagates
        untouched; the bytes stay in the buffer either way.
        """
        if self.closed:
            raise WriterClosedError(context={"path": self.request.url.path})
        self.body.extend(data)
        return await self.sink.write(data)

    def log(self) -> None:
        """Format the captured request and emit it. Runs at most once."""
        if self._logged:
            return
        self._logged = True
        line = self.formatter(self.now, self.response, self.request, bytes(self.body))
        self.logger.log(self.level, "%s", line)

    async def close(self) -> None:
        """Flush the log line, then close the underlying sink."""
        if self.closed:
            return
        self.closed = True
        self.log()
        await self.sink.close()

    async def __call__(self, message: Message) -> None:
        """ASGI `send` replacement installed by the middleware."""
        kind = message["type"]

        if kind == "http.response.start":
            self.response.start(message)
            await self.sink.forward(message)
        elif kind == "http.response.body":
            body = message.get("body", b"")
            if body:
                await self.write(body)
            if not message.get("more_body", False):
                await self.close()
        elif kind == "http.response.pathsend":
            # The server streams the file itself; nothing passes through write().
            await self.sink.forward(message)
            self.closed = True
            self.log()
        else:
            await self.sink.forward(message)
