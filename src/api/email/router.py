from fastapi import APIRouter, Request

from src.api.core.decorators.admin import admin
from src.api.core.dependencies import CurrentUserAuthDep, EmailServiceDep
from src.api.core.messages import APIResponse, MessageCode
from src.api.email.models import SentEmailModel
from src.api.email.requests import SendEmailRequest, SendEmailResponse
from src.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/email", tags=["email"])


@router.post("/send", response_model=SendEmailResponse)
@admin()
async def send_email(
    request: Request,
    email_request: SendEmailRequest,
    current_user: CurrentUserAuthDep,
    email_service: EmailServiceDep,
) -> SendEmailResponse:
    """
    Send an email (Admin only).

    Provider errors surface as a 500; without a Resend key the send is skipped.
    """
    result = await email_service.send_email(
        to=email_request.to,
        subject=email_request.subject,
        html=email_request.html,
        text=email_request.text,
        reply_to=email_request.reply_to,
        cc=email_request.cc,
        bcc=email_request.bcc,
    )
    logger.info(
        "Admin email processed",
        skipped=result.skipped,
        recipients=len(email_request.to),
        admin_user_id=str(current_user.user.id),
    )

    if result.skipped:
        return APIResponse.success(
            message_code=MessageCode.EMAIL_SKIPPED,
            data=SentEmailModel(email_id=None, status="skipped"),
        )
    return APIResponse.success(
        message_code=MessageCode.EMAIL_SENT,
        data=SentEmailModel(email_id=result.email_id, status="sent"),
    )
