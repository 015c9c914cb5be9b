"""
AccessLog - Package Initializer
=================================

What: Access logging middleware for ASGI applications (Starlette, FastAPI).
How:  A capturing writer wraps the response `send` channel, buffers the body
      and, when the response completes, emits a single Common or Combined
      Log Format line through an injected logger.

Layout:
    ┌─────────────────────────────────────┐
    │   middleware  (per-request wiring)  │  ← AccessLogMiddleware + presets
    ├─────────────────────────────────────┤
    │   writer      (capture + emit)      │  ← LogWriter, ResponseInfo
    ├─────────────────────────────────────┤
    │   formatters  (pure line builders)  │  ← common, combined
    ├─────────────────────────────────────┤
    │   sinks       (output capability)   │  ← SendSink, BufferSink
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
