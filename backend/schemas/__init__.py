"""Form schemas for the store API.

Provides the registry of named schemas the rule engine validates against.
"""
from .registry import find_schema, get_schema, list_schemas, register, validate
from .products import PRODUCT_CREATE, PRODUCT_FORM, PRODUCT_UPDATE
from .users import (
    EMAIL_UPDATE,
    EMAIL_UPDATE_OTP,
    EMAIL_VERIFY,
    FORGOT_PASSWORD,
    NAME_UPDATE,
    PASSWORD_CHANGE,
    REGISTRATION,
    RESET_PASSWORD,
    SIGN_IN,
    SIGN_UP,
)

__all__ = [
    "find_schema",
    "get_schema",
    "list_schemas",
    "register",
    "validate",
    "PRODUCT_CREATE",
    "PRODUCT_FORM",
    "PRODUCT_UPDATE",
    "EMAIL_UPDATE",
    "EMAIL_UPDATE_OTP",
    "EMAIL_VERIFY",
    "FORGOT_PASSWORD",
    "NAME_UPDATE",
    "PASSWORD_CHANGE",
    "REGISTRATION",
    "RESET_PASSWORD",
    "SIGN_IN",
    "SIGN_UP",
]
