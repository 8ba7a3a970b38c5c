"""Tests for ribbitweb.auth.local_profile."""

from __future__ import annotations

import json
import re

from ribbitweb.auth.local_profile import (
    SETTINGS_BACKUP_KEY,
    USER_ID_KEY,
    LocalProfile,
)
from ribbitweb.auth.phrase_store import PhraseStore

from conftest import SAMPLE_PHRASE


def test_generated_username_is_stable(persistent):
    profile = LocalProfile(persistent)
    name = profile.get_username()
    assert re.match(r"^Frog_\d{4}$", name)
    assert profile.get_username() == name


def test_user_id_is_stable(persistent):
    profile = LocalProfile(persistent)
    uid = profile.get_user_id()
    assert 0 <= uid < 1_000_000
    assert profile.get_user_id() == uid


def test_invalid_user_id_regenerated(persistent):
    persistent.set(USER_ID_KEY, "not-a-number")
    uid = LocalProfile(persistent).get_user_id()
    assert persistent.get(USER_ID_KEY) == str(uid)


def test_set_username_tracks_previous(persistent):
    profile = LocalProfile(persistent)
    original = profile.get_username()
    assert not profile.has_changed_username()
    assert profile.get_previous_username() is None

    profile.set_username("Toad_Master")
    assert profile.get_username() == "Toad_Master"
    assert profile.get_previous_username() == original
    assert profile.has_changed_username()


def test_set_username_without_phrase_skips_backup(persistent):
    profile = LocalProfile(persistent)
    profile.phrase_store = PhraseStore(persistent)
    profile.set_username("Toad_Master")
    assert persistent.get(SETTINGS_BACKUP_KEY) is None


def test_phrase_write_triggers_backup(persistent):
    profile = LocalProfile(persistent)
    store = PhraseStore(persistent, backup_hook=profile.backup_settings)
    profile.phrase_store = store

    store.set_once(SAMPLE_PHRASE)
    backup = profile.load_backup()
    assert backup is not None
    assert backup["username"] == profile.get_username()
    assert backup["userId"] == profile.get_user_id()
    assert backup["usernameChanged"] is False
    assert backup["previousUsername"] is None

    profile.set_username("Tadpole_42")
    backup = json.loads(persistent.get(SETTINGS_BACKUP_KEY))
    assert backup["username"] == "Tadpole_42"
    assert backup["usernameChanged"] is True


def test_load_backup_corrupt(persistent):
    persistent.set(SETTINGS_BACKUP_KEY, "{oops")
    assert LocalProfile(persistent).load_backup() is None
