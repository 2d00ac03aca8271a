from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from src.api.core.constants import API_VERSION_HEADER
from src.api.core.messages import MessageCode, get_default_message
from src.utils.logger import get_client_ip, get_logger
from src.utils.settings.app import AppSettings

logger = get_logger(__name__)

# Left to CORSMiddleware
CORS_HEADERS = {
    "Access-Control-Allow-Origin",
    "Access-Control-Allow-Methods",
    "Access-Control-Allow-Headers",
    "Access-Control-Allow-Credentials",
    "Access-Control-Expose-Headers",
    "Access-Control-Max-Age",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    def __init__(self, app, is_production: bool = False):
        super().__init__(app)
        self.is_production = is_production
        self.app_settings = AppSettings()

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        headers = {
            "X-Content-Type-Options": "nosniff",
            "X-Frame-Options": "DENY",
            "Referrer-Policy": "strict-origin-when-cross-origin",
            "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
            "X-Permitted-Cross-Domain-Policies": "none",
            API_VERSION_HEADER: self.app_settings.API_VERSION,
        }

        if self.is_production:
            headers["Content-Security-Policy"] = self._get_csp()
            if request.url.scheme == "https":
                headers["Strict-Transport-Security"] = (
                    "max-age=31536000; includeSubDomains"
                )

        for key, value in headers.items():
            if key not in response.headers and key not in CORS_HEADERS:
                response.headers[key] = value

        return response

    def _get_csp(self) -> str:
        """Content Security Policy for the JSON API and its docs."""
        csp = {
            "default-src": ["'self'"],
            "img-src": ["'self'", "data:", "https:"],
            "connect-src": ["'self'", self.app_settings.APP_URL],
            "frame-src": ["https://js.stripe.com", "https://hooks.stripe.com"],
            "object-src": ["'none'"],
            "base-uri": ["'self'"],
            "form-action": ["'self'"],
            "frame-ancestors": ["'none'"],
        }
        return "; ".join(
            f"{directive} {' '.join(sources)}" for directive, sources in csp.items()
        )


class PayloadSizeMiddleware(BaseHTTPMiddleware):
    """Enforce request and response size limits declared via Content-Length."""

    def __init__(
        self,
        app,
        max_request_size: int | None = None,
        max_response_size: int | None = None,
    ):
        super().__init__(app)
        app_settings = AppSettings()
        self.max_request_size = max_request_size or app_settings.MAX_REQUEST_SIZE
        self.max_response_size = max_response_size or app_settings.MAX_RESPONSE_SIZE

    def _too_large(self, description: str) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            content={
                "message_code": MessageCode.FILE_TOO_LARGE,
                "message": get_default_message(MessageCode.FILE_TOO_LARGE),
                "details": {"description": description},
            },
        )

    async def dispatch(self, request: Request, call_next) -> Response:
        content_length = request.headers.get("Content-Length")
        if (
            content_length
            and content_length.isdigit()
            and int(content_length) > self.max_request_size
        ):
            logger.warning(
                f"Request too large: {content_length} bytes",
                ip_address=get_client_ip(request),
            )
            return self._too_large(
                f"Request size ({content_length} bytes) exceeds maximum allowed "
                f"({self.max_request_size} bytes)"
            )

        response = await call_next(request)

        response_length = response.headers.get("Content-Length")
        if (
            response_length
            and response_length.isdigit()
            and int(response_length) > self.max_response_size
        ):
            logger.error(
                f"Response too large: {response_length} bytes",
                path=request.url.path,
            )

        return response
