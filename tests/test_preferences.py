"""Tests for preference stores and mirrors."""

from unittest.mock import patch

import pytest
from keyring.errors import KeyringError, PasswordSetError

from playground.errors import PreferencesError
from playground.preferences import (
    AVATAR_URL_KEY, GITHUB_TOKEN_KEY, KeyringStore, MemoryStore, PreferenceMirror
)
from playground.state import AppState
from playground.state import events as ev


@pytest.fixture
def state(known_versions, provisioner):
    return AppState(known_versions, provisioner)


def test_mirror_writes_changes(state):
    store = MemoryStore()
    mirror = PreferenceMirror(state, store)
    mirror.arm()

    state.github_token = "ghp_123"
    state.avatar_url = "https://avatars.example/u/1"

    assert store.values == {GITHUB_TOKEN_KEY: "ghp_123", AVATAR_URL_KEY: "https://avatars.example/u/1"}


def test_mirror_writes_empty_string_when_cleared(state):
    store = MemoryStore()
    PreferenceMirror(state, store).arm()

    state.github_token = "ghp_123"
    state.github_token = None

    assert store.values[GITHUB_TOKEN_KEY] == ""


@pytest.mark.asyncio
async def test_mirror_is_armed_once(state):
    store = MemoryStore()
    mirror = PreferenceMirror(state, store)
    mirror.arm()

    await state.switch_to("1.0.0")
    await state.switch_to("2.0.0")
    mirror.arm()

    assert state.events.listener_count(ev.GITHUB_TOKEN_CHANGED) == 1
    assert state.events.listener_count(ev.AVATAR_URL_CHANGED) == 1


def test_disarm_stops_writes(state):
    store = MemoryStore()
    mirror = PreferenceMirror(state, store)
    mirror.arm()
    mirror.disarm()

    state.github_token = "ghp_123"

    assert not mirror.armed
    assert store.values == {}


def test_restore_reads_stored_values(state):
    store = MemoryStore({GITHUB_TOKEN_KEY: "ghp_123", AVATAR_URL_KEY: ""})

    PreferenceMirror(state, store).restore()

    assert state.github_token == "ghp_123"
    assert state.avatar_url is None


def test_restore_tolerates_store_failure(state):
    class BrokenStore(MemoryStore):
        def get(self, key):
            raise PreferencesError("locked")

    PreferenceMirror(state, BrokenStore()).restore()

    assert state.github_token is None


def test_keyring_store_round_trip():
    with patch("playground.preferences.store.keyring") as mock_keyring:
        mock_keyring.get_password.return_value = "ghp_123"
        store = KeyringStore("test_service")

        store.set(GITHUB_TOKEN_KEY, "ghp_123")
        value = store.get(GITHUB_TOKEN_KEY)

    mock_keyring.set_password.assert_called_once_with("test_service", GITHUB_TOKEN_KEY, "ghp_123")
    mock_keyring.get_password.assert_called_once_with("test_service", GITHUB_TOKEN_KEY)
    assert value == "ghp_123"


def test_keyring_errors_become_preferences_errors():
    with patch("playground.preferences.store.keyring") as mock_keyring:
        mock_keyring.set_password.side_effect = PasswordSetError("no backend")
        mock_keyring.get_password.side_effect = KeyringError("no backend")
        store = KeyringStore()

        with pytest.raises(PreferencesError):
            store.set(GITHUB_TOKEN_KEY, "x")
        with pytest.raises(PreferencesError):
            store.get(GITHUB_TOKEN_KEY)
