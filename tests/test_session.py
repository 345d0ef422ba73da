"""Tests for session stores and the profile manager"""

import pytest

from authflow.core.exceptions import ConfigurationError
from authflow.core.session import USER_PROFILES, ProfileManager, RequestSessionStore
from authflow.core.user_profile import UserProfile

from tests.conftest import InMemorySessionStore, make_request


def _profile(id: str, client_name: str = "google") -> UserProfile:
    return UserProfile(id=id, client_name=client_name, attributes={"email": f"{id}@example.com"})


class TestProfileManager:
    def test_save_exclusive_replaces_all(self):
        store = InMemorySessionStore()
        manager = ProfileManager(store)

        manager.save(_profile("alice", "google"), exclusive=False)
        manager.save(_profile("bob", "github"), exclusive=True)

        assert [p.id for p in manager.get_all()] == ["bob"]

    def test_save_non_exclusive_keeps_other_clients(self):
        manager = ProfileManager(InMemorySessionStore())

        manager.save(_profile("alice", "google"), exclusive=False)
        manager.save(_profile("bob", "github"), exclusive=False)
        manager.save(_profile("carol", "google"), exclusive=False)

        assert [p.id for p in manager.get_all()] == ["carol", "bob"]
        assert manager.get().id == "carol"

    def test_profiles_stored_as_dicts(self):
        store = InMemorySessionStore()

        ProfileManager(store).save(_profile("alice"))

        assert store.data[USER_PROFILES] == {
            "google": {
                "id": "alice",
                "client_name": "google",
                "attributes": {"email": "alice@example.com"},
                "roles": [],
            }
        }

    def test_empty_session(self):
        manager = ProfileManager(InMemorySessionStore())

        assert manager.get() is None
        assert manager.get_all() == []
        assert not manager.is_authenticated()

    def test_remove(self):
        manager = ProfileManager(InMemorySessionStore())
        manager.save(_profile("alice"))
        assert manager.is_authenticated()

        manager.remove()

        assert manager.get() is None
        assert not manager.is_authenticated()


class TestRequestSessionStore:
    def test_reads_and_writes_request_session(self):
        session = {"existing": 1}
        store = RequestSessionStore(make_request(session=session))

        store.set("key", "value")
        store.remove("existing")
        store.remove("never-set")

        assert store.get("key") == "value"
        assert session == {"key": "value"}

    def test_requires_session_middleware(self):
        with pytest.raises(ConfigurationError):
            RequestSessionStore(make_request())


class TestUserProfile:
    def test_from_dict_defaults(self):
        profile = UserProfile.from_dict({"id": "42", "client_name": "cas"})

        assert profile == UserProfile(id="42", client_name="cas")
        assert profile.email == ""
