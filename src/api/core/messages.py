"""Centralized message codes and default messages for API responses."""

from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel


class MessageCode(str, Enum):
    """Centralized message codes for API responses."""

    # Success codes
    SUCCESS = "SUCCESS"
    CREATED = "CREATED"
    UPDATED = "UPDATED"
    DELETED = "DELETED"

    # Authentication & Authorization
    AUTH_REQUIRED = "AUTH_REQUIRED"
    FORBIDDEN = "FORBIDDEN"
    ADMIN_REQUIRED = "ADMIN_REQUIRED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_SESSION = "INVALID_SESSION"
    USER_BANNED = "USER_BANNED"
    EMAIL_ALREADY_REGISTERED = "EMAIL_ALREADY_REGISTERED"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    SIGNED_UP = "SIGNED_UP"
    AUTH_INSUFFICIENT_ROLE_PERMISSIONS = "AUTH_INSUFFICIENT_ROLE_PERMISSIONS"

    # User management
    USER_CREATED = "USER_CREATED"
    USER_UPDATED = "USER_UPDATED"
    USER_DELETED = "USER_DELETED"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    USER_BAN_APPLIED = "USER_BAN_APPLIED"
    USER_BAN_LIFTED = "USER_BAN_LIFTED"
    CANNOT_MODERATE_YOURSELF = "CANNOT_MODERATE_YOURSELF"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    SESSION_REVOKED = "SESSION_REVOKED"
    IMPERSONATION_STARTED = "IMPERSONATION_STARTED"
    IMPERSONATION_STOPPED = "IMPERSONATION_STOPPED"
    NOT_IMPERSONATING = "NOT_IMPERSONATING"
    CANNOT_IMPERSONATE_ADMIN = "CANNOT_IMPERSONATE_ADMIN"

    # Organization management
    ORGANIZATION_CREATED = "ORGANIZATION_CREATED"
    ORGANIZATION_UPDATED = "ORGANIZATION_UPDATED"
    ORGANIZATION_DELETED = "ORGANIZATION_DELETED"
    ORGANIZATION_RESTORED = "ORGANIZATION_RESTORED"
    ORGANIZATION_NOT_FOUND = "ORGANIZATION_NOT_FOUND"
    ORGANIZATION_SLUG_TAKEN = "ORGANIZATION_SLUG_TAKEN"
    ORGANIZATION_RESTORE_EXPIRED = "ORGANIZATION_RESTORE_EXPIRED"
    ORGANIZATION_LEFT = "ORGANIZATION_LEFT"
    OWNER_CANNOT_LEAVE = "OWNER_CANNOT_LEAVE"
    OWNER_CANNOT_BE_REMOVED = "OWNER_CANNOT_BE_REMOVED"
    USER_NOT_MEMBER_OF_ORGANIZATION = "USER_NOT_MEMBER_OF_ORGANIZATION"
    USER_ALREADY_MEMBER = "USER_ALREADY_MEMBER"
    USER_REMOVED_FROM_ORGANIZATION = "USER_REMOVED_FROM_ORGANIZATION"
    ROLE_CHANGED = "ROLE_CHANGED"
    CANNOT_CHANGE_OWN_ROLE = "CANNOT_CHANGE_OWN_ROLE"
    CANNOT_GRANT_OWNER = "CANNOT_GRANT_OWNER"

    # Invitation management
    INVITE_CREATED = "INVITE_CREATED"
    INVITE_ACCEPTED = "INVITE_ACCEPTED"
    INVITE_DECLINED = "INVITE_DECLINED"
    INVITE_REVOKED = "INVITE_REVOKED"
    INVITE_NOT_FOUND = "INVITE_NOT_FOUND"
    INVITE_ALREADY_PENDING = "INVITE_ALREADY_PENDING"
    INVITATION_INVALID = "INVITATION_INVALID"
    INVITATION_EMAIL_MISMATCH = "INVITATION_EMAIL_MISMATCH"

    # Chat
    THREAD_NOT_FOUND = "THREAD_NOT_FOUND"
    THREAD_CREATED = "THREAD_CREATED"
    THREAD_UPDATED = "THREAD_UPDATED"
    THREAD_DELETED = "THREAD_DELETED"
    CHAT_UNAVAILABLE = "CHAT_UNAVAILABLE"

    # Interest list
    INTEREST_SIGNUP_CREATED = "INTEREST_SIGNUP_CREATED"
    INTEREST_ALREADY_SIGNED_UP = "INTEREST_ALREADY_SIGNED_UP"

    # Billing
    BILLING_NOT_CONFIGURED = "BILLING_NOT_CONFIGURED"
    BILLING_CUSTOMER_NOT_FOUND = "BILLING_CUSTOMER_NOT_FOUND"
    BILLING_PRODUCT_NOT_FOUND = "BILLING_PRODUCT_NOT_FOUND"
    WEBHOOK_INVALID = "WEBHOOK_INVALID"

    # Files
    STORAGE_NOT_CONFIGURED = "STORAGE_NOT_CONFIGURED"
    FILE_UPLOADED = "FILE_UPLOADED"

    # Feature flags & analytics vendor
    ANALYTICS_NOT_CONFIGURED = "ANALYTICS_NOT_CONFIGURED"
    FEATURE_FLAG_UPDATED = "FEATURE_FLAG_UPDATED"

    # Email
    EMAIL_SENT = "EMAIL_SENT"
    EMAIL_SKIPPED = "EMAIL_SKIPPED"

    # Maintenance
    CLEANUP_COMPLETED = "CLEANUP_COMPLETED"

    # Rate limiting
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"

    # Service Errors
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"

    # Generic errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    CONFLICT = "CONFLICT"
    BAD_REQUEST = "BAD_REQUEST"


# Default messages for each message code
DEFAULT_MESSAGES = {
    # Success messages
    MessageCode.SUCCESS: "Operation completed successfully",
    MessageCode.CREATED: "Resource created successfully",
    MessageCode.UPDATED: "Resource updated successfully",
    MessageCode.DELETED: "Resource deleted successfully",
    # Authentication & Authorization
    MessageCode.AUTH_REQUIRED: "Authentication required",
    MessageCode.FORBIDDEN: "Access denied",
    MessageCode.ADMIN_REQUIRED: "Admin access required",
    MessageCode.INVALID_CREDENTIALS: "Invalid email or password",
    MessageCode.INVALID_SESSION: "Session is invalid or has expired",
    MessageCode.USER_BANNED: "This account has been banned",
    MessageCode.EMAIL_ALREADY_REGISTERED: "An account with this email already exists",
    MessageCode.SIGNED_IN: "Signed in successfully",
    MessageCode.SIGNED_OUT: "Signed out successfully",
    MessageCode.SIGNED_UP: "Account created successfully",
    MessageCode.AUTH_INSUFFICIENT_ROLE_PERMISSIONS: "Insufficient role permissions",
    # User management
    MessageCode.USER_CREATED: "User created successfully",
    MessageCode.USER_UPDATED: "User updated successfully",
    MessageCode.USER_DELETED: "User deleted successfully",
    MessageCode.USER_NOT_FOUND: "User not found",
    MessageCode.USER_BAN_APPLIED: "User banned successfully",
    MessageCode.USER_BAN_LIFTED: "User unbanned successfully",
    MessageCode.CANNOT_MODERATE_YOURSELF: "You cannot perform this action on your own account",
    MessageCode.SESSION_NOT_FOUND: "Session not found",
    MessageCode.SESSION_REVOKED: "Session revoked successfully",
    MessageCode.IMPERSONATION_STARTED: "Now signed in as the selected user",
    MessageCode.IMPERSONATION_STOPPED: "Returned to your admin session",
    MessageCode.NOT_IMPERSONATING: "This session is not impersonating a user",
    MessageCode.CANNOT_IMPERSONATE_ADMIN: "Admins cannot be impersonated",
    # Organization management
    MessageCode.ORGANIZATION_CREATED: "Organization created successfully",
    MessageCode.ORGANIZATION_UPDATED: "Organization updated successfully",
    MessageCode.ORGANIZATION_DELETED: "Organization scheduled for deletion",
    MessageCode.ORGANIZATION_RESTORED: "Organization restored successfully",
    MessageCode.ORGANIZATION_NOT_FOUND: "Organization not found",
    MessageCode.ORGANIZATION_SLUG_TAKEN: "Organization slug is already taken",
    MessageCode.ORGANIZATION_RESTORE_EXPIRED: "Organization can no longer be restored",
    MessageCode.ORGANIZATION_LEFT: "You have left the organization",
    MessageCode.OWNER_CANNOT_LEAVE: "Organization owners cannot leave their organization",
    MessageCode.OWNER_CANNOT_BE_REMOVED: "Organization owner cannot be removed",
    MessageCode.USER_NOT_MEMBER_OF_ORGANIZATION: "User is not a member of this organization",
    MessageCode.USER_ALREADY_MEMBER: "User is already a member of the organization",
    MessageCode.USER_REMOVED_FROM_ORGANIZATION: "User removed from organization successfully",
    MessageCode.ROLE_CHANGED: "Role changed successfully",
    MessageCode.CANNOT_CHANGE_OWN_ROLE: "Cannot change your own role",
    MessageCode.CANNOT_GRANT_OWNER: "Ownership cannot be granted through a role change",
    # Invitation management
    MessageCode.INVITE_CREATED: "Invitation created successfully",
    MessageCode.INVITE_ACCEPTED: "Invitation accepted successfully",
    MessageCode.INVITE_DECLINED: "Invitation declined",
    MessageCode.INVITE_REVOKED: "Invitation revoked",
    MessageCode.INVITE_NOT_FOUND: "Invitation not found",
    MessageCode.INVITE_ALREADY_PENDING: "A pending invitation already exists for this email address",
    MessageCode.INVITATION_INVALID: "Invitation has expired or was already used",
    MessageCode.INVITATION_EMAIL_MISMATCH: "This invitation was sent to a different email address",
    # Chat
    MessageCode.THREAD_NOT_FOUND: "Thread not found",
    MessageCode.THREAD_CREATED: "Thread created successfully",
    MessageCode.THREAD_UPDATED: "Thread updated successfully",
    MessageCode.THREAD_DELETED: "Thread deleted successfully",
    MessageCode.CHAT_UNAVAILABLE: "Chat assistant is not configured",
    # Interest list
    MessageCode.INTEREST_SIGNUP_CREATED: "Thanks for your interest! We'll be in touch.",
    MessageCode.INTEREST_ALREADY_SIGNED_UP: "This email is already on the interest list",
    # Billing
    MessageCode.BILLING_NOT_CONFIGURED: "Billing is not configured",
    MessageCode.BILLING_CUSTOMER_NOT_FOUND: "No billing customer found for this account",
    MessageCode.BILLING_PRODUCT_NOT_FOUND: "Product not found",
    MessageCode.WEBHOOK_INVALID: "Invalid webhook payload or signature",
    # Files
    MessageCode.STORAGE_NOT_CONFIGURED: "Object storage is not configured",
    MessageCode.FILE_UPLOADED: "File uploaded successfully",
    # Feature flags & analytics vendor
    MessageCode.ANALYTICS_NOT_CONFIGURED: "Analytics provider is not configured",
    MessageCode.FEATURE_FLAG_UPDATED: "Feature flag updated successfully",
    # Email
    MessageCode.EMAIL_SENT: "Email sent successfully",
    MessageCode.EMAIL_SKIPPED: "Email delivery is not configured; email skipped",
    # Maintenance
    MessageCode.CLEANUP_COMPLETED: "Cleanup completed",
    # Rate limiting
    MessageCode.RATE_LIMIT_EXCEEDED: "Rate limit exceeded",
    # Validation errors
    MessageCode.VALIDATION_ERROR: "Validation failed",
    MessageCode.INVALID_INPUT: "Invalid input provided",
    MessageCode.FILE_TOO_LARGE: "File size too large",
    # Service Errors
    MessageCode.EXTERNAL_SERVICE_ERROR: "External service error",
    # Generic errors
    MessageCode.INTERNAL_ERROR: "Internal server error",
    MessageCode.RESOURCE_NOT_FOUND: "Resource not found",
    MessageCode.CONFLICT: "Resource already exists",
    MessageCode.BAD_REQUEST: "Bad request",
}

T = TypeVar("T")


class PaginationInfo(BaseModel):
    """Common pagination information."""

    total: int
    limit: int
    offset: int
    has_more: bool


class Paginated(BaseModel, Generic[T]):
    """Generic paginated response wrapper."""

    items: list[T]
    pagination: PaginationInfo

    @classmethod
    def build(
        cls, items: list[T], total: int, limit: int, offset: int
    ) -> "Paginated[T]":
        return cls(
            items=items,
            pagination=PaginationInfo(
                total=total,
                limit=limit,
                offset=offset,
                has_more=offset + len(items) < total,
            ),
        )


class APIResponse(BaseModel, Generic[T]):
    """Base API response model with consistent structure and proper typing."""

    message_code: MessageCode
    message: str
    data: T | None = None

    @classmethod
    def success(
        cls,
        message_code: MessageCode = MessageCode.SUCCESS,
        message: str | None = None,
        data: T | None = None,
    ) -> "APIResponse[T]":
        """Create a success response."""
        return cls(
            message_code=message_code,
            message=message or DEFAULT_MESSAGES.get(message_code, "Success"),
            data=data,
        )


def get_default_message(message_code: MessageCode) -> str:
    """Get default message for a message code."""
    return DEFAULT_MESSAGES.get(message_code, "Operation completed")
