from fastapi import APIRouter

from src.api.admin.router import router as admin_router
from src.api.analytics.router import router as analytics_router
from src.api.auth.router import router as auth_router
from src.api.billing.router import router as billing_router
from src.api.chat.router import router as chat_router
from src.api.email.router import router as email_router
from src.api.files.router import router as files_router
from src.api.flags.router import router as flags_router
from src.api.health.router import router as health_router, root_router
from src.api.interest.router import router as interest_router
from src.api.invitation.router import router as invitation_router
from src.api.organization.router import router as organization_router
from src.api.stripe.router import router as stripe_router
from src.api.user.router import router as user_router

# V1 API router
v1_router = APIRouter(prefix="/v1")

# Include domain routers
v1_router.include_router(admin_router)
v1_router.include_router(analytics_router)
v1_router.include_router(auth_router)
v1_router.include_router(billing_router)
v1_router.include_router(chat_router)
v1_router.include_router(email_router)
v1_router.include_router(files_router)
v1_router.include_router(flags_router)
v1_router.include_router(interest_router)
v1_router.include_router(invitation_router)
v1_router.include_router(organization_router)
v1_router.include_router(user_router)

# Main API router
api_router = APIRouter()
api_router.include_router(root_router)
api_router.include_router(health_router)
api_router.include_router(stripe_router)
api_router.include_router(v1_router)
