"""User Account API Routes

Registration, sign-in, OTP verification and profile updates. Each route
validates its body against a named schema; accepted data goes to the
account store, which lives outside this service.
"""
from fastapi import APIRouter, Depends

from core.errors import ErrorCode, raise_error, validation_error
from core.logging import auth_logger
from core.uploads import SINGLE, ParsedForm, UploadedForm
from core.validation import validated_body
from engines.otp import OtpPolicy, OtpPurpose
from schemas import (
    EMAIL_UPDATE,
    EMAIL_UPDATE_OTP,
    EMAIL_VERIFY,
    FORGOT_PASSWORD,
    NAME_UPDATE,
    PASSWORD_CHANGE,
    REGISTRATION,
    RESET_PASSWORD,
    SIGN_IN,
)

from .responses import accepted

log = auth_logger()

router = APIRouter()

otp_policy = OtpPolicy.from_settings()

PROFILE_IMAGE_FIELD = "image"


# === Registration & sign-in ===

@router.post("/register")
async def register(body: dict = validated_body(REGISTRATION)):
    """Start registration: the OTP is mailed, the token goes back to the client."""
    record = otp_policy.issue(body["email"], OtpPurpose.REGISTRATION)
    log.info("registration_started")
    return accepted(body, message="OTP sent to your email", token=record.token)


@router.post("/verify-register-otp")
async def verify_register_otp(body: dict = validated_body(EMAIL_VERIFY)):
    log.info("registration_otp_submitted")
    return accepted(body)


@router.post("/login")
async def login(body: dict = validated_body(SIGN_IN)):
    log.info("sign_in_submitted")
    return accepted(body)


# === Password reset ===

@router.post("/forgot-password")
async def forgot_password(body: dict = validated_body(FORGOT_PASSWORD)):
    record = otp_policy.issue(body["email"], OtpPurpose.PASSWORD_RESET)
    log.info("password_reset_requested")
    return accepted(body, message="OTP sent to your email", token=record.token)


@router.post("/verify-otp")
async def verify_otp(body: dict = validated_body(EMAIL_VERIFY)):
    log.info("password_reset_otp_submitted")
    return accepted(body)


@router.post("/reset-password")
async def reset_password(body: dict = validated_body(RESET_PASSWORD)):
    log.info("password_reset_submitted")
    return accepted(body, message="Password reset successfully")


# === Profile ===

@router.post("/updateName")
async def update_name(body: dict = validated_body(NAME_UPDATE)):
    return accepted(body)


@router.post("/updateEmail")
async def update_email(body: dict = validated_body(EMAIL_UPDATE)):
    record = otp_policy.issue(body["email"], OtpPurpose.EMAIL_UPDATE)
    log.info("email_update_requested")
    return accepted(body, message="OTP sent to your email", token=record.token)


@router.post("/verify-update-email-otp")
async def verify_update_email_otp(body: dict = validated_body(EMAIL_UPDATE_OTP)):
    log.info("email_update_otp_submitted")
    return accepted(body)


@router.post("/updatePassword")
async def update_password(body: dict = validated_body(PASSWORD_CHANGE)):
    log.info("password_change_submitted")
    return accepted(body, message="Password updated successfully")


@router.post("/profileUpload")
async def upload_profile_image(form: ParsedForm = Depends(UploadedForm(SINGLE, PROFILE_IMAGE_FIELD))):
    """Single profile image, held in memory for the object-storage collaborator."""
    files = form.files_for(PROFILE_IMAGE_FIELD)
    if not files:
        raise_error(validation_error(
            "Image is required",
            code=ErrorCode.E2001_REQUIRED_FIELD_MISSING,
            field=PROFILE_IMAGE_FIELD,
            origin="profile_upload",
        ).unwrap_err())
    return accepted({}, files)
