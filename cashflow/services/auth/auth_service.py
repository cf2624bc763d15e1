"""
Authentication Gate

Login doubles as registration: an unknown user id is registered on the
spot with the PIN it was given. There are no sessions or tokens; the
returned profile's id is what scopes the remote tables.

DESIGN DECISION: PIN checking goes through a PinVerifier so a salted-hash
verifier can replace the plain-text comparison without touching callers.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from cashflow.models.records import Profile
from cashflow.services.storage.interface import ProfileStorageInterface, StorageError

INCORRECT_PIN = "Incorrect PIN"
PIN_LENGTH = 6


def normalize_user_id(user_id: str) -> str:
    return user_id.strip().lower()


def is_valid_pin(pin: str) -> bool:
    return len(pin) == PIN_LENGTH and pin.isdigit()


class PinVerifier(ABC):
    """Turns a PIN into what is stored, and checks a PIN against it."""

    @abstractmethod
    def encode(self, pin: str) -> str:
        pass

    @abstractmethod
    def verify(self, pin: str, stored: str) -> bool:
        pass


class PlainTextPinVerifier(PinVerifier):
    """Stores the PIN as-is and compares directly."""

    def encode(self, pin: str) -> str:
        return pin

    def verify(self, pin: str, stored: str) -> bool:
        return pin == stored


class LoginResult(BaseModel):
    """Exactly one of profile / error is set."""

    profile: Optional[Profile] = None
    error: Optional[str] = None
    created: bool = False

    @property
    def ok(self) -> bool:
        return self.profile is not None


class AuthService:
    def __init__(
        self,
        storage: ProfileStorageInterface,
        verifier: Optional[PinVerifier] = None,
    ):
        self._storage = storage
        self._verifier = verifier or PlainTextPinVerifier()

    @property
    def verifier(self) -> PinVerifier:
        return self._verifier

    async def login(self, user_id: str, pin: str) -> LoginResult:
        """
        Log in, registering the user id if it's new.

        Never raises for expected failures: a wrong PIN gives the
        INCORRECT_PIN error and storage failures give their raw message.
        """
        user_id_text = normalize_user_id(user_id)
        if not user_id_text:
            return LoginResult(error="User ID is required")
        if not is_valid_pin(pin):
            return LoginResult(error=f"PIN must be {PIN_LENGTH} digits")

        try:
            existing = await self._storage.get_by_user_id(user_id_text)
            if existing is not None:
                if self._verifier.verify(pin, existing.pin_hash):
                    return LoginResult(profile=existing)
                return LoginResult(error=INCORRECT_PIN)

            profile = await self._storage.create(Profile(
                user_id_text=user_id_text,
                pin_hash=self._verifier.encode(pin),
            ))
            return LoginResult(profile=profile, created=True)
        except StorageError as e:
            return LoginResult(error=str(e))

    async def update_pin(self, profile_id: UUID, pin: str) -> None:
        """
        Raises:
            ValueError: If the PIN isn't 6 digits
            StorageError: If the profile row can't be updated
        """
        if not is_valid_pin(pin):
            raise ValueError(f"PIN must be {PIN_LENGTH} digits")
        await self._storage.update_pin(profile_id, self._verifier.encode(pin))

    async def update_language(self, profile_id: UUID, language: str) -> None:
        await self._storage.update_language(profile_id, language)
