"""
HTTP middleware for the Shop API backend
- unexpected errors rendered inside the middleware stack
- security headers on every response
- access log in Apache "combined" format
- raw request body capture (for webhook signature checks)
"""
import logging
import time
from datetime import datetime, timezone

from fastapi import Request
from starlette.datastructures import MutableHeaders
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from .errors import convert_error, error_response

access_logger = logging.getLogger("shop_api.access")

SECURITY_HEADERS = {
    "X-Frame-Options": "SAMEORIGIN",
    "X-XSS-Protection": "1; mode=block",
}


class ErrorHandlerMiddleware:
    """
    Renders exceptions no route handler dealt with as the error envelope.

    Installed innermost, so the 500 response still passes through CORS,
    security headers, session and gzip on its way out.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            if response_started:
                raise
            response = error_response(convert_error(exc), exc)
            await response(scope, receive, send)


class SecurityHeadersMiddleware:
    """
    Adds clickjacking and XSS filter headers.

    Headers already set by a handler are left untouched.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for name, value in SECURITY_HEADERS.items():
                    headers.setdefault(name, value)
            await send(message)

        await self.app(scope, receive, send_wrapper)


def get_client_ip(request: Request) -> str:
    """Get the client IP, considering proxies"""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "-"


def format_access_line(request: Request, status_code: int, content_length, when: datetime) -> str:
    """
    Apache combined log format:
    ip - - [date] "METHOD /path?query HTTP/1.1" status length "referer" "user-agent"
    """
    path = request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"
    http_version = request.scope.get("http_version", "1.1")
    referer = request.headers.get("referer", "-")
    user_agent = request.headers.get("user-agent", "-")
    timestamp = when.strftime("%d/%b/%Y:%H:%M:%S %z")
    return (
        f'{get_client_ip(request)} - - [{timestamp}] '
        f'"{request.method} {path} HTTP/{http_version}" {status_code} {content_length or "-"} '
        f'"{referer}" "{user_agent}"'
    )


class AccessLogMiddleware(BaseHTTPMiddleware):
    """One log line per request, written after the response is produced"""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            # raised by middleware outside ErrorHandlerMiddleware
            self._log(request, 500, None, start)
            raise

        self._log(request, response.status_code, response.headers.get("content-length"), start)
        return response

    @staticmethod
    def _log(request: Request, status_code: int, content_length, start: float) -> None:
        elapsed_ms = (time.perf_counter() - start) * 1000
        line = format_access_line(request, status_code, content_length, datetime.now(timezone.utc))
        access_logger.info(f"{line} {elapsed_ms:.1f}ms")


def _charset(content_type: str) -> str:
    for part in content_type.split(";")[1:]:
        key, _, value = part.strip().partition("=")
        if key.lower() == "charset" and value:
            return value.strip('"')
    return "utf-8"


async def get_raw_body(request: Request) -> str:
    """
    FastAPI dependency returning the request body exactly as sent, as text.

    Webhook signatures are checked against this, not against the parsed JSON.
    """
    body = await request.body()
    if not body:
        return ""
    return body.decode(_charset(request.headers.get("content-type", "")), errors="replace")
