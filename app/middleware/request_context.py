"""Request context middleware: client address resolution and timing."""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.utils.logger import client_ip_var, logger

UNKNOWN_CLIENT = "unknown"


def resolve_client_ip(request: Request) -> str:
    """Originating address: first X-Forwarded-For hop, else the socket peer."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        first_hop = forwarded_for.split(",")[0].strip()
        if first_hop:
            return first_hop

    if request.client and request.client.host:
        return request.client.host

    return UNKNOWN_CLIENT


def get_client_ip(request: Request) -> str:
    """FastAPI dependency returning the address resolved by the middleware."""
    return getattr(request.state, "client_ip", None) or resolve_client_ip(request)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Publishes the client address to request.state and the log context,
    adds an X-Process-Time header and logs slow requests."""

    SLOW_REQUEST_THRESHOLD = 0.5  # seconds

    EXCLUDED_PATHS = {
        "/health",
        "/",
    }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        client_ip = resolve_client_ip(request)
        request.state.client_ip = client_ip
        token = client_ip_var.set(client_ip)

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            client_ip_var.reset(token)

        process_time = time.perf_counter() - start_time
        response.headers["X-Process-Time"] = f"{process_time:.4f}"

        path = request.url.path
        if path not in self.EXCLUDED_PATHS:
            if process_time >= self.SLOW_REQUEST_THRESHOLD:
                logger.warning(
                    f"[SLOW REQUEST] {request.method} {path} - {process_time:.3f}s ({client_ip})"
                )
            else:
                logger.debug(f"[REQUEST] {request.method} {path} - {process_time:.3f}s")

        return response
