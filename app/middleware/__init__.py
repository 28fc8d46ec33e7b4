from app.middleware.request_context import (
    RequestContextMiddleware,
    get_client_ip,
    resolve_client_ip,
)

__all__ = ["RequestContextMiddleware", "get_client_ip", "resolve_client_ip"]
