"""
AccessLog - Log Line Formatters
=================================

What:  Pure functions turning one request/response exchange into one line
       of text, plus a registry of the named presets.
How:   Every formatter has the signature
           formatter(now, response, request, body) -> str
       and reads the request's ASGI scope directly, so it sees what the
       client actually sent (raw path, protocol version, peer address).

Formats:
    common:    host ident user [time] "method uri proto" status length
               127.0.0.1 - frank [10/Oct/2000:13:55:36 -0700] "GET /a.gif HTTP/1.0" 200 2326

    combined:  common + "referer" "user-agent"
               ... 200 2326 "http://example.com/start.html" "Mozilla/4.08"

    ident is always "-". length is the number of body bytes captured by
    the writer, so it is 0 for an empty body.
"""

import base64
import binascii
from datetime import datetime
from typing import Dict

from starlette.requests import Request

from accesslog.exceptions import UnknownFormatError
from accesslog.writer import Formatter, ResponseInfo

# Month names are fixed English abbreviations whatever LC_TIME says
MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_timestamp(now: datetime) -> str:
    """10/Oct/2000:13:55:36 -0700"""
    return "%02d/%s/%04d:%s" % (
        now.day, MONTHS[now.month - 1], now.year, now.strftime("%H:%M:%S %z")
    )


def _remote_host(request: Request) -> str:
    client = request.scope.get("client")
    if not client or not client[0]:
        return "-"
    return str(client[0])


def _username(request: Request) -> str:
    """Username from HTTP Basic credentials, "-" when absent or unreadable."""
    authorization = request.headers.get("authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() != "basic" or not credentials:
        return "-"
    try:
        decoded = base64.b64decode(credentials.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return "-"
    username, _, _ = decoded.partition(":")
    return username or "-"


def _protocol(request: Request) -> str:
    return f"HTTP/{request.scope.get('http_version', '1.1')}"


def _request_uri(request: Request) -> str:
    scope = request.scope
    method = scope.get("method", "")
    if method == "CONNECT" and scope.get("http_version") == "2":
        return request.headers.get("host", "")

    raw_path = scope.get("raw_path")
    path = raw_path.decode("latin-1") if raw_path else scope.get("path", "/")
    query = scope.get("query_string", b"")
    if query:
        path = f"{path}?{query.decode('latin-1')}"
    return path


def _quote(value: str) -> str:
    """Escape quotes and backslashes; anything outside printable ASCII becomes \\xNN."""
    escaped = []
    for char in value:
        code = ord(char)
        if char in ('"', "\\"):
            escaped.append("\\" + char)
        elif 0x20 <= code <= 0x7E:
            escaped.append(char)
        elif code <= 0xFF:
            escaped.append("\\x%02x" % code)
        else:
            escaped.append("\\u%04x" % code if code <= 0xFFFF else "\\U%08x" % code)
    return "".join(escaped)


def common_log_formatter(
    now: datetime, response: ResponseInfo, request: Request, body: bytes
) -> str:
    """Build a line in the Common Log Format."""
    return '%s - %s [%s] "%s %s %s" %d %d' % (
        _remote_host(request),
        _username(request),
        format_timestamp(now),
        request.scope.get("method", "-"),
        _quote(_request_uri(request)),
        _protocol(request),
        response.status,
        len(body),
    )


def combined_log_formatter(
    now: datetime, response: ResponseInfo, request: Request, body: bytes
) -> str:
    """Build a line in the Combined Log Format (common + referer + user agent)."""
    return '%s "%s" "%s"' % (
        common_log_formatter(now, response, request, body),
        _quote(request.headers.get("referer", "")),
        _quote(request.headers.get("user-agent", "")),
    )


FORMATTERS: Dict[str, Formatter] = {
    "common": common_log_formatter,
    "combined": combined_log_formatter,
}


def get_formatter(name: str) -> Formatter:
    """Look up a preset formatter by name (case-insensitive)."""
    try:
        return FORMATTERS[name.lower()]
    except KeyError:
        raise UnknownFormatError(name, FORMATTERS.keys()) from None
