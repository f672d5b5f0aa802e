"""
Unit tests for the login credential check and password hashing.
"""

import pytest

from caterdesk.auth import GateState, hash_password, sign_in, verify_password
from caterdesk.errors import GatewayError, InvalidCredentials
from tests.conftest import ADMIN_EMAIL, ADMIN_PASSWORD

pytestmark = pytest.mark.asyncio


class TestPasswordHashing:
    """Tests for hash_password / verify_password."""

    async def test_hash_is_not_plaintext(self):
        hashed = hash_password("biryani")

        assert hashed != "biryani"
        assert hashed.startswith("$argon2")

    async def test_verify(self):
        hashed = hash_password("biryani")

        assert verify_password("biryani", hashed)
        assert not verify_password("Biryani", hashed)

    @pytest.mark.parametrize("stored", ["", "biryani", "$argon2id$garbage"])
    async def test_verify_rejects_unusable_hash(self, stored):
        assert not verify_password("biryani", stored)


class TestSignIn:
    """Tests for sign_in."""

    async def test_success_sets_session(self, gateway, gate, session_store, seeded_admin):
        session = await sign_in(gateway, gate, ADMIN_EMAIL, ADMIN_PASSWORD)

        assert session.id == seeded_admin["id"]
        assert session.email == ADMIN_EMAIL
        assert session.username == "owner"
        assert gate.state == GateState.AUTHENTICATED
        assert gate.current_user == session
        assert session_store.load() == session

    async def test_email_is_trimmed(self, gateway, gate, seeded_admin):
        session = await sign_in(gateway, gate, f"  {ADMIN_EMAIL} ", ADMIN_PASSWORD)

        assert session.email == ADMIN_EMAIL

    async def test_email_case_is_ignored(self, gateway, gate, seeded_admin):
        session = await sign_in(gateway, gate, "Owner@JagdambaCaterers.IN", ADMIN_PASSWORD)

        assert session.id == seeded_admin["id"]

    @pytest.mark.parametrize("email,password", [
        (ADMIN_EMAIL, "wrong-password"),
        ("nobody@jagdambacaterers.in", ADMIN_PASSWORD),
        ("nobody@jagdambacaterers.in", "wrong-password"),
        ("", ADMIN_PASSWORD),
        (ADMIN_EMAIL, ""),
    ])
    async def test_failures_share_one_message(
        self, gateway, gate, session_store, seeded_admin, email, password
    ):
        with pytest.raises(InvalidCredentials) as exc_info:
            await sign_in(gateway, gate, email, password)

        assert exc_info.value.message == "Invalid credentials"
        assert exc_info.value.status_code == 401
        assert gate.state == GateState.UNAUTHENTICATED
        assert session_store.load() is None

    async def test_empty_input_makes_no_lookup(self, gateway, gate):
        with pytest.raises(InvalidCredentials):
            await sign_in(gateway, gate, "   ", "x")

        assert gateway.count() == 0

    async def test_lookup_failure_propagates(self, gateway, gate):
        gateway.fail[("select", "admin")] = GatewayError("select", "connection refused")

        with pytest.raises(GatewayError):
            await sign_in(gateway, gate, ADMIN_EMAIL, ADMIN_PASSWORD)

        assert gate.state == GateState.UNAUTHENTICATED
