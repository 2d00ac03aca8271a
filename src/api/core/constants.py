# Response header carrying the API version
API_VERSION_HEADER = "X-Iridium-Version"

# Session cookie JWT
JWT_ALGORITHM = "HS256"

# Invitations
INVITATION_TTL_DAYS = 7
INVITATION_TOKEN_BYTES = 32

# Organizations stay restorable for this long after a soft delete
ORGANIZATION_DELETION_GRACE_DAYS = 30

# Passwords
MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 128

# Interest list
INTEREST_NOTE_MAX_LENGTH = 500

# Rate limiting settings
AUTH_RATE_LIMIT = 10  # requests per window
AUTH_RATE_LIMIT_WINDOW_SECONDS = 60
INTEREST_RATE_LIMIT = 5
INTEREST_RATE_LIMIT_WINDOW_SECONDS = 3600

# Analytics
DEFAULT_ANALYTICS_RANGE_DAYS = 30
DEFAULT_TOP_USERS_LIMIT = 10
DEFAULT_REVENUE_RANGE_DAYS = 90

# Object storage
DEFAULT_SIGNED_URL_EXPIRY_SECONDS = 3600
DEFAULT_LIST_OBJECTS_MAX_KEYS = 200
MAX_UPLOAD_SIZE = 10 * 1024 * 1024  # 10MB

# Authentication endpoints configuration
SKIP_AUTH_PATHS = {
    "/openapi.json",
    "/docs",
    "/redoc",
    "/health",
    "/health/liveness",
    "/",
    "/stripe/webhook",
    "/v1/auth/sign-up",
    "/v1/auth/sign-in",
    "/v1/auth/sign-out",
    "/v1/auth/session",
    "/v1/interest",
}

SKIP_AUTH_PATTERNS: list = [
    ("GET", r"^/v1/invitations/token/[A-Za-z0-9]+$"),  # invitation preview
]

# Pagination
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class RateLimitKeys:
    """Typed rate limiting cache key generators."""

    @staticmethod
    def user(scope: str, user_id: str) -> str:
        return f"rate_limit:{scope}:user:{user_id}"

    @staticmethod
    def ip(scope: str, ip_address: str) -> str:
        return f"rate_limit:{scope}:ip:{ip_address}"
