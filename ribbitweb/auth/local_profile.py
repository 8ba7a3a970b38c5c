"""Local (device-side) profile facts and the settings backup.

Keeps the generated display name and numeric user id, tracks username
changes, and writes a JSON snapshot of these settings whenever a Froggy
Phrase exists. The snapshot is the PhraseStore backup hook.
"""
from __future__ import annotations

import json
import logging
import secrets
import time
from typing import Any, Dict, Optional

from .storage import KeyValueStore

log = logging.getLogger("ribbit.profile")

USERNAME_KEY = "ribbit_username"
USER_ID_KEY = "ribbit_user_id"
USERNAME_CHANGED_KEY = "ribbit_username_changed"
PREVIOUS_USERNAME_KEY = "ribbit_previous_username"
SETTINGS_BACKUP_KEY = "ribbit_settings_backup"


def generate_username() -> str:
    return f"Frog_{1000 + secrets.randbelow(9000)}"


def generate_user_id() -> int:
    return secrets.randbelow(1_000_000)


class LocalProfile:
    def __init__(self, storage: KeyValueStore, phrase_store: Any = None) -> None:
        self._storage = storage
        # set after construction when PhraseStore takes this profile's backup as its hook
        self.phrase_store = phrase_store

    def get_username(self) -> str:
        username = self._storage.get(USERNAME_KEY)
        if not username:
            username = generate_username()
            self._storage.set(USERNAME_KEY, username)
        return username

    def get_user_id(self) -> int:
        raw = self._storage.get(USER_ID_KEY)
        if raw:
            try:
                return int(raw)
            except ValueError:
                log.warning("Stored user id %r is not an integer; regenerating", raw)
        user_id = generate_user_id()
        self._storage.set(USER_ID_KEY, str(user_id))
        return user_id

    def set_username(self, new_username: str) -> None:
        current = self.get_username()
        self._storage.set(PREVIOUS_USERNAME_KEY, current)
        self._storage.set(USERNAME_KEY, new_username)
        self._storage.set(USERNAME_CHANGED_KEY, "true")

        if self.phrase_store is not None and self.phrase_store.has_phrase():
            self.backup_settings()

    def has_changed_username(self) -> bool:
        return self._storage.get(USERNAME_CHANGED_KEY) == "true"

    def get_previous_username(self) -> Optional[str]:
        return self._storage.get(PREVIOUS_USERNAME_KEY)

    def backup_settings(self) -> None:
        settings = {
            "username": self.get_username(),
            "userId": self.get_user_id(),
            "usernameChanged": self.has_changed_username(),
            "previousUsername": self.get_previous_username(),
            "timestamp": int(time.time() * 1000),
        }
        self._storage.set(SETTINGS_BACKUP_KEY, json.dumps(settings))

    def load_backup(self) -> Optional[Dict[str, Any]]:
        raw = self._storage.get(SETTINGS_BACKUP_KEY)
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except ValueError:
            return None
        return data if isinstance(data, dict) else None
