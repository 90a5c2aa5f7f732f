import logging
import time
import uuid
from typing import Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        response = await call_next(request)

        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        response.headers["x-request-id"] = request_id
        logger.info(
            "%s %s -> %s",
            request.method,
            request.url.path,
            response.status_code,
            extra={
                "props": {
                    "request_id": request_id,
                    "status": response.status_code,
                    "duration_ms": elapsed_ms,
                }
            },
        )
        return response


class HSTSMiddleware(BaseHTTPMiddleware):
    """Adds Strict-Transport-Security to responses served over https."""

    def __init__(self, app, max_age: int = 31536000):
        super().__init__(app)
        self.header_value = f"max-age={max_age}"

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        if request.url.scheme == "https":
            response.headers["strict-transport-security"] = self.header_value
        return response


class CookiePolicyMiddleware(BaseHTTPMiddleware):
    """
    Cookie consent policy:
    - consent is needed for every request
    - until the consent cookie is present, only essential cookies are sent
    - cookies are otherwise passed through as the endpoint set them
    """

    def __init__(
        self,
        app,
        consent_cookie: str = "cookie_consent",
        essential: Iterable[str] = (),
    ):
        super().__init__(app)
        self.consent_cookie = consent_cookie
        self.essential = set(essential) | {consent_cookie}

    def has_consent(self, request: Request) -> bool:
        return request.cookies.get(self.consent_cookie) == "yes"

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        consent = self.has_consent(request)

        kept = []
        for key, value in response.raw_headers:
            if key.lower() != b"set-cookie":
                kept.append((key, value))
                continue

            header = value.decode("latin-1")
            name = header.split("=", 1)[0].strip()
            if not consent and name not in self.essential:
                logger.debug("Dropped non-essential cookie %s (no consent)", name)
                continue

            kept.append((key, value))

        response.raw_headers[:] = kept
        return response

