"""Custom middleware components."""

from recipes_api.core.middleware.access_log import AccessLogMiddleware
from recipes_api.core.middleware.request_id import RequestIDMiddleware
from recipes_api.core.middleware.security_headers import SecurityHeadersMiddleware


__all__ = [
    "AccessLogMiddleware",
    "RequestIDMiddleware",
    "SecurityHeadersMiddleware",
]
