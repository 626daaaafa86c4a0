"""Account and profile form schemas."""
import re

from core.validation import (
    EmailValidator,
    ExactLength,
    FieldSpec,
    FieldType,
    RegexPattern,
    Required,
    Schema,
    StringLength,
    StringToBool,
    fields_match,
    lower,
    trim,
)

PASSWORD_MIN_LENGTH = 8
SIGN_UP_PASSWORD_MIN_LENGTH = 6
SIGN_UP_SYMBOLS = r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>\/?]"


def password_rules(required_message: str) -> tuple:
    """Strength rules shared by password change and reset, checked in order."""
    return (
        Required(required_message),
        StringLength(min_length=PASSWORD_MIN_LENGTH).with_message(
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"
        ),
        RegexPattern(r"[A-Z]", search=True, description="uppercase").with_message(
            "Password must contain at least one uppercase letter"
        ),
        RegexPattern(r"[a-z]", search=True, description="lowercase").with_message(
            "Password must contain at least one lowercase letter"
        ),
        RegexPattern(r"[0-9]", search=True, description="digit").with_message(
            "Password must contain at least one number"
        ),
        RegexPattern(r"[^A-Za-z0-9]", search=True, description="symbol").with_message(
            "Password must contain at least one special character"
        ),
    )


def email_field(invalid_message: str, required_message: str = "Email is required", **kwargs) -> FieldSpec:
    return FieldSpec(
        "email",
        constraints=(Required(required_message), EmailValidator().with_message(invalid_message)),
        **kwargs,
    )


REGISTRATION = Schema(
    "registration",
    (email_field("Please provide a valid email address", transforms=(trim, lower)),),
    description="Sign-up email step",
)

SIGN_UP = Schema(
    "sign-up",
    (
        FieldSpec(
            "name",
            transforms=(trim,),
            constraints=(
                Required("Name is required"),
                StringLength(min_length=2).with_message("Name must be at least 2 characters"),
                StringLength(max_length=50).with_message("Name must not exceed 50 characters"),
            ),
        ),
        email_field("Please provide a valid email address", transforms=(trim, lower)),
        FieldSpec(
            "password",
            constraints=(
                Required("Password is required"),
                StringLength(min_length=SIGN_UP_PASSWORD_MIN_LENGTH).with_message(
                    f"Password must be at least {SIGN_UP_PASSWORD_MIN_LENGTH} characters long"
                ),
                RegexPattern(r"[A-Z]", search=True, description="uppercase").with_message(
                    "Password must contain at least one uppercase letter"
                ),
                RegexPattern(r"\d", search=True, description="digit").with_message(
                    "Password must contain at least one number"
                ),
                RegexPattern(SIGN_UP_SYMBOLS, search=True, description="symbol").with_message(
                    "Password must contain at least one special character"
                ),
            ),
        ),
        FieldSpec("confirm_password", constraints=(Required("Confirm password is required"),)),
    ),
    refinements=(fields_match("password", "confirm_password", "Passwords do not match"),),
    description="Full sign-up form: name, email and a password with confirmation",
)

SIGN_IN = Schema(
    "sign-in",
    (
        email_field("Please provide a valid email address", transforms=(trim, lower)),
        FieldSpec("password", constraints=(Required("Password is required"),)),
        FieldSpec("rememberMe", FieldType.BOOLEAN, coercion=StringToBool(), optional=True),
    ),
    description="Login form",
)

NAME_UPDATE = Schema(
    "name-update",
    (
        FieldSpec(
            "name",
            constraints=(
                Required("name is required"),
                StringLength(min_length=1, max_length=50).with_message("name is too long"),
            ),
        ),
    ),
    description="Profile display name",
)

EMAIL_UPDATE = Schema(
    "email-update",
    (email_field("Enter a valid Email"),),
    description="Request an email change",
)

EMAIL_VERIFY = Schema(
    "email-verify",
    (
        email_field("Valid email is required"),
        FieldSpec(
            "otp",
            constraints=(
                Required("Otp is required"),
                StringLength(max_length=6).with_message("Otp must not exceed 6 characters"),
            ),
        ),
        FieldSpec("token", constraints=(Required("token is required"),)),
    ),
    description="Verify an emailed OTP together with its one-time token",
)

EMAIL_UPDATE_OTP = Schema(
    "email-update-otp",
    (
        FieldSpec(
            "otp",
            constraints=(
                Required("OTP is required"),
                ExactLength(6).with_message("OTP must be exactly 6 digits"),
                RegexPattern(r"^\d+\Z", flags=re.ASCII, description="digits").with_message(
                    "OTP must contain only numbers"
                ),
            ),
        ),
    ),
    description="Confirm an email change",
)

PASSWORD_CHANGE = Schema(
    "password-change",
    (
        FieldSpec("oldPassword", constraints=(Required("Old password is required"),)),
        FieldSpec("newPassword", constraints=password_rules("New password is required")),
        FieldSpec("confirmPassword", constraints=(Required("Confirm password is required"),)),
    ),
    refinements=(fields_match("newPassword", "confirmPassword", "Passwords don't match"),),
    description="Change password while signed in",
)

FORGOT_PASSWORD = Schema(
    "forgot-password",
    (email_field("Valid email is required"),),
    description="Request a password reset OTP",
)

RESET_PASSWORD = Schema(
    "reset-password",
    (
        email_field("Valid email is required"),
        FieldSpec("token", constraints=(Required("token is required"),)),
        FieldSpec("newPassword", constraints=password_rules("New password is required")),
        FieldSpec("confirmPassword", constraints=(Required("Confirm password is required"),)),
    ),
    refinements=(fields_match("newPassword", "confirmPassword", "Passwords don't match"),),
    description="Set a new password with a reset token",
)

SCHEMAS = (
    REGISTRATION,
    SIGN_UP,
    SIGN_IN,
    NAME_UPDATE,
    EMAIL_UPDATE,
    EMAIL_VERIFY,
    EMAIL_UPDATE_OTP,
    PASSWORD_CHANGE,
    FORGOT_PASSWORD,
    RESET_PASSWORD,
)
