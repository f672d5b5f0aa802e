"""
Authentication for CaterDesk.

- Session store (persisted session record)
- Auth gate (state machine + view routing)
- Credential check and password hashing
"""

from caterdesk.auth.session_store import SessionStore
from caterdesk.auth.gate import (
    AuthGate,
    GateState,
    RouteDecision,
    RouteKind,
)
from caterdesk.auth.credentials import sign_in
from caterdesk.auth.security import hash_password, verify_password

__all__ = [
    "SessionStore",
    "AuthGate",
    "GateState",
    "RouteDecision",
    "RouteKind",
    "sign_in",
    "hash_password",
    "verify_password",
]
