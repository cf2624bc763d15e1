"""Tests for the login / registration gate."""

import pytest
from uuid import uuid4

from cashflow.services.auth import (
    INCORRECT_PIN,
    AuthService,
    PinVerifier,
    PlainTextPinVerifier,
    is_valid_pin,
    normalize_user_id,
)
from cashflow.services.storage import InMemoryProfileStorage, NotFoundError, StorageError


class ReversedPinVerifier(PinVerifier):
    """Stores PINs reversed, to prove callers go through the verifier."""

    def encode(self, pin: str) -> str:
        return pin[::-1]

    def verify(self, pin: str, stored: str) -> bool:
        return pin[::-1] == stored


class BrokenProfileStorage(InMemoryProfileStorage):
    async def get_by_user_id(self, user_id_text):
        raise StorageError("Sheets unavailable")


class TestHelpers:
    """Tests for user id and PIN helpers."""

    def test_normalize_user_id(self):
        """Test that user ids are trimmed and lower-cased."""
        assert normalize_user_id("  Alice ") == "alice"

    @pytest.mark.parametrize("pin,valid", [
        ("123456", True),
        ("12345", False),
        ("1234567", False),
        ("12a456", False),
    ])
    def test_pin_validation(self, pin, valid):
        """Test that a PIN is exactly six digits."""
        assert is_valid_pin(pin) is valid

    def test_plain_text_verifier(self):
        """Test the default verifier stores the PIN unchanged."""
        verifier = PlainTextPinVerifier()
        assert verifier.encode("123456") == "123456"
        assert verifier.verify("123456", "123456")
        assert not verifier.verify("000000", "123456")


class TestLogin:
    """Tests for AuthService.login."""

    @pytest.mark.asyncio
    async def test_unknown_user_is_registered(self):
        """Test that the first login creates the profile."""
        storage = InMemoryProfileStorage()
        result = await AuthService(storage).login("Alice", "123456")
        assert result.ok
        assert result.created is True
        assert result.profile.user_id_text == "alice"
        assert len(storage.rows) == 1

    @pytest.mark.asyncio
    async def test_existing_user_logs_in(self):
        """Test that a second login with the right PIN returns the same profile."""
        auth = AuthService(InMemoryProfileStorage())
        first = await auth.login("alice", "123456")
        second = await auth.login(" ALICE", "123456")
        assert second.ok
        assert second.created is False
        assert second.profile.id == first.profile.id

    @pytest.mark.asyncio
    async def test_wrong_pin(self):
        """Test that a wrong PIN gives the fixed message."""
        auth = AuthService(InMemoryProfileStorage())
        await auth.login("alice", "123456")
        result = await auth.login("alice", "654321")
        assert not result.ok
        assert result.error == INCORRECT_PIN

    @pytest.mark.asyncio
    async def test_input_validation(self):
        """Test empty user ids and malformed PINs are rejected before storage."""
        auth = AuthService(BrokenProfileStorage())
        assert (await auth.login("   ", "123456")).error == "User ID is required"
        assert (await auth.login("alice", "12")).error == "PIN must be 6 digits"

    @pytest.mark.asyncio
    async def test_storage_error_message_is_returned(self):
        """Test that storage failures come back as the raw message."""
        result = await AuthService(BrokenProfileStorage()).login("alice", "123456")
        assert not result.ok
        assert result.error == "Sheets unavailable"

    @pytest.mark.asyncio
    async def test_custom_verifier(self):
        """Test that the stored PIN is whatever the verifier encodes."""
        storage = InMemoryProfileStorage()
        auth = AuthService(storage, verifier=ReversedPinVerifier())
        await auth.login("alice", "123456")
        assert storage.rows[0]["pin_hash"] == "654321"
        assert (await auth.login("alice", "123456")).ok


class TestProfileUpdates:
    """Tests for PIN and language updates."""

    @pytest.mark.asyncio
    async def test_update_pin(self):
        """Test that a new PIN is required on the next login."""
        auth = AuthService(InMemoryProfileStorage())
        profile = (await auth.login("alice", "123456")).profile
        await auth.update_pin(profile.id, "111111")
        assert (await auth.login("alice", "123456")).error == INCORRECT_PIN
        assert (await auth.login("alice", "111111")).ok

    @pytest.mark.asyncio
    async def test_update_pin_rejects_bad_pin(self):
        """Test that an invalid PIN never reaches storage."""
        with pytest.raises(ValueError):
            await AuthService(InMemoryProfileStorage()).update_pin(uuid4(), "abc")

    @pytest.mark.asyncio
    async def test_update_unknown_profile(self):
        """Test that storage errors propagate from updates."""
        with pytest.raises(NotFoundError):
            await AuthService(InMemoryProfileStorage()).update_language(uuid4(), "th")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
