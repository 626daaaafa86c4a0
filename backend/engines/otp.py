"""One-Time Password Issuance Policy

Generates numeric OTPs and alphanumeric one-time tokens, and enforces the
request and failed-attempt limits for an email address. Storage of the
records belongs to the caller; this module only decides.
"""
import secrets
import string
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum

from core.config import get_settings
from core.errors import AppError, Ok, Result, limit_reached, quota_exceeded
from core.logging import auth_logger

log = auth_logger()

OTP_LENGTH = 6
TOKEN_LENGTH = 30
TOKEN_ALPHABET = string.ascii_letters + string.digits


def generate_otp(length: int = OTP_LENGTH) -> str:
    """Random numeric OTP, leading zeros allowed."""
    return "".join(secrets.choice(string.digits) for _ in range(length))


def generate_one_time_token(length: int = TOKEN_LENGTH) -> str:
    """Random token of upper/lower-case letters and digits."""
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))


class OtpPurpose(str, Enum):
    REGISTRATION = "registration"
    PASSWORD_RESET = "password-reset"
    EMAIL_UPDATE = "email-update"


@dataclass(frozen=True, slots=True)
class OtpRecord:
    """Issued OTP state for one email address."""
    email: str
    otp: str
    token: str
    purpose: OtpPurpose = OtpPurpose.REGISTRATION
    count: int = 1
    error_count: int = 0
    updated_at: datetime | None = None

    def requested_on(self, now: datetime) -> bool:
        """True if the last request was on the same (UTC) day as ``now``."""
        if self.updated_at is None:
            return False
        return self.updated_at.astimezone(timezone.utc).date() == now.astimezone(timezone.utc).date()


class OtpPolicy:
    """Request and failed-attempt limits for OTP issuance."""

    __slots__ = ("daily_limit", "max_failed_attempts")

    def __init__(self, daily_limit: int = 3, max_failed_attempts: int = 5):
        self.daily_limit = daily_limit
        self.max_failed_attempts = max_failed_attempts

    @classmethod
    def from_settings(cls) -> "OtpPolicy":
        config = get_settings()
        return cls(config.OTP_DAILY_LIMIT, config.OTP_MAX_FAILED_ATTEMPTS)

    def check(self, record: OtpRecord, now: datetime | None = None) -> Result[None, AppError]:
        """Whether another OTP may be issued for ``record``.

        The daily request limit only counts requests made today; the
        failed-attempt limit counts until the record is reset.
        """
        now = now or datetime.now(timezone.utc)
        if record.requested_on(now) and record.count >= self.daily_limit:
            log.warning("otp_daily_limit", purpose=record.purpose.value, count=record.count)
            return quota_exceeded(
                "otp_requests",
                self.daily_limit,
                record.count,
                message=f"OTP is allowed to request for {self.daily_limit} times, try again tomorrow",
                origin="otp",
            )
        if record.error_count >= self.max_failed_attempts:
            log.warning("otp_failed_attempt_limit", purpose=record.purpose.value, error_count=record.error_count)
            return limit_reached(
                "otp_failed_attempts",
                self.max_failed_attempts,
                message="Too many failed attempts, please try again later",
                origin="otp",
            )
        return Ok(None)

    def issue(self, email: str, purpose: OtpPurpose, now: datetime | None = None) -> OtpRecord:
        """First OTP for an address."""
        record = OtpRecord(
            email=email.strip().lower(),
            otp=generate_otp(),
            token=generate_one_time_token(),
            purpose=purpose,
            updated_at=now or datetime.now(timezone.utc),
        )
        log.info("otp_issued", purpose=purpose.value, count=record.count)
        return record

    def reissue(self, record: OtpRecord, now: datetime | None = None) -> Result[OtpRecord, AppError]:
        """Fresh OTP and token for an existing record, if the limits allow it.

        The request count restarts on a new day.
        """
        now = now or datetime.now(timezone.utc)
        if (checked := self.check(record, now)).is_err():
            return checked
        count = record.count + 1 if record.requested_on(now) else 1
        renewed = replace(record, otp=generate_otp(), token=generate_one_time_token(), count=count, updated_at=now)
        log.info("otp_issued", purpose=record.purpose.value, count=count)
        return Ok(renewed)

    def record_failure(self, record: OtpRecord, now: datetime | None = None) -> OtpRecord:
        failed = replace(record, error_count=record.error_count + 1, updated_at=now or datetime.now(timezone.utc))
        log.info("otp_verification_failed", purpose=record.purpose.value, error_count=failed.error_count)
        return failed

    def verify(self, record: OtpRecord, otp: str, token: str) -> bool:
        """Constant-time comparison of a submitted OTP and token."""
        return (secrets.compare_digest(record.otp.encode(), otp.encode())
                and secrets.compare_digest(record.token.encode(), token.encode()))


def check_otp_limit(record: OtpRecord, now: datetime | None = None) -> Result[None, AppError]:
    """Check ``record`` against the configured limits."""
    return OtpPolicy.from_settings().check(record, now)
