"""
Credential check for the login flow.

Looks the admin up by email, verifies the password hash, then hands the new
session to the gate, which persists it and flips state in one step.
"""

from loguru import logger

from caterdesk.auth.gate import AuthGate
from caterdesk.auth.security import verify_password
from caterdesk.errors import InvalidCredentials
from caterdesk.storage.gateway import PersistenceGateway
from caterdesk.storage.schemas import ADMIN_TABLE, Session, admin_from_row, normalize_email


async def sign_in(
    gateway: PersistenceGateway,
    gate: AuthGate,
    email: str,
    password: str,
) -> Session:
    """
    Authenticate an admin.

    Returns:
        The established Session.

    Raises:
        InvalidCredentials: Unknown email or wrong password (same message).
        GatewayError: The admin lookup itself failed.
    """
    email = normalize_email(email)
    if not email or not password:
        raise InvalidCredentials()

    rows = await gateway.select(ADMIN_TABLE.table, filters={"email": email})
    if len(rows) != 1:
        logger.info("Login rejected")
        raise InvalidCredentials()

    admin = admin_from_row(rows[0])
    if not verify_password(password, admin.password_hash):
        logger.info("Login rejected")
        raise InvalidCredentials()

    session = admin.to_session()
    gate.set_current_user(session)
    logger.info(f"Admin {admin.email} signed in")
    return session
