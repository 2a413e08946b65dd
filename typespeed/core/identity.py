from __future__ import annotations

import json
import logging
import os
import uuid
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

USER_ENV = "TYPESPEED_USER"
_NAMESPACE = uuid.UUID("6f1c8a52-3b0e-4b8e-9d7a-2f4a1c9e5b13")


def user_id_for(username: str) -> str:
    """Stable id for a username, so results keep their owner across sign-ins."""
    return str(uuid.uuid5(_NAMESPACE, username.casefold()))


class Identity:
    """Local sign-in state. Persists to ``identity.json`` in the data dir.

    When ``TYPESPEED_USER`` is set, that name is signed in for the process
    without touching the file.
    """

    def __init__(self, file_path: Path) -> None:
        self._file_path = Path(file_path)
        self._username: Optional[str] = None
        env_user = os.environ.get(USER_ENV, "").strip()
        if env_user:
            self._username = env_user
        else:
            self._username = self._load()

    @property
    def username(self) -> Optional[str]:
        return self._username

    @property
    def user_id(self) -> Optional[str]:
        if self._username is None:
            return None
        return user_id_for(self._username)

    def is_signed_in(self) -> bool:
        return self._username is not None

    def sign_in(self, username: str) -> str:
        name = (username or "").strip()
        if not name:
            raise ValueError("Username must not be empty")
        self._username = name
        self._save()
        logger.info("Signed in as %s", name)
        return user_id_for(name)

    def sign_out(self) -> None:
        self._username = None
        self._save()
        logger.info("Signed out")

    def _load(self) -> Optional[str]:
        if not self._file_path.exists():
            return None
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load identity from %s: %s", self._file_path, e)
            return None
        if not isinstance(payload, dict):
            return None
        name = payload.get("username")
        if isinstance(name, str) and name.strip():
            return name.strip()
        return None

    def _save(self) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"username": self._username}
        try:
            self._file_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save identity to %s: %s", self._file_path, e)
