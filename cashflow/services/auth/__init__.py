"""Authentication services package."""

from cashflow.services.auth.auth_service import (
    INCORRECT_PIN,
    PIN_LENGTH,
    AuthService,
    LoginResult,
    PinVerifier,
    PlainTextPinVerifier,
    is_valid_pin,
    normalize_user_id,
)

__all__ = [
    "AuthService",
    "INCORRECT_PIN",
    "LoginResult",
    "PIN_LENGTH",
    "PinVerifier",
    "PlainTextPinVerifier",
    "is_valid_pin",
    "normalize_user_id",
]
