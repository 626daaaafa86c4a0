from engines.otp import (
    OtpPolicy,
    OtpPurpose,
    OtpRecord,
    check_otp_limit,
    generate_one_time_token,
    generate_otp,
)

__all__ = [
    "OtpPolicy",
    "OtpPurpose",
    "OtpRecord",
    "check_otp_limit",
    "generate_one_time_token",
    "generate_otp",
]
