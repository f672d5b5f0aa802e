"""
Session Store

Persists the signed-in admin's session record in a small JSON file under a
single key. It survives restarts and is removed on logout. It has no expiry
and no signature: it is a convenience cache, not a security boundary.
"""

import json
from pathlib import Path
from typing import Optional, Union

from loguru import logger
from pydantic import ValidationError

from caterdesk.storage.schemas import Session


SESSION_KEY = "admin_session"


class SessionStore:
    """JSON-file-backed store for one ``Session``."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def save(self, session: Session) -> None:
        """Persist the session synchronously."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {SESSION_KEY: session.model_dump()}
        self.path.write_text(json.dumps(payload), encoding="utf-8")
        logger.debug(f"Session saved for {session.email}")

    def load(self) -> Optional[Session]:
        """Return the persisted session, or None if absent or unreadable."""
        if not self.path.exists():
            return None

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            record = data.get(SESSION_KEY) if isinstance(data, dict) else None
            if not record:
                return None
            return Session.model_validate(record)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return None

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
