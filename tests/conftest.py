"""
Shared fixtures.

Every test gets its own in-memory embedded backend, so the platform behaviour
(row-level rules, signup trigger, cascades) is exercised without a network.
"""

from unittest.mock import Mock

import pytest

from recipebook.auth import SessionProvider
from recipebook.platform.local import LocalDatabase, LocalPlatform

PUBLIC_URL = "http://testserver/storage"


@pytest.fixture
def database():
    return LocalDatabase("sqlite://", public_url=PUBLIC_URL)


@pytest.fixture
def platform(database):
    return LocalPlatform(database)


@pytest.fixture
def sessions(platform):
    return SessionProvider(platform)


@pytest.fixture
def alice(sessions):
    """Signed-in user on the main platform."""
    return sessions.sign_up("alice@example.com", "secret123", username="alice")


@pytest.fixture
def bob_platform(database):
    """A second browser session on the same database, signed in as bob."""
    other = LocalPlatform(database)
    other.set_auth(other.sign_up("bob@example.com", "secret123"))
    return other


@pytest.fixture
def navigate():
    return Mock()


@pytest.fixture
def notify():
    return Mock()


@pytest.fixture
def recipe_record():
    """Factory for row values of a direct platform insert."""

    def build(user_id, name="Tomato Soup", **overrides):
        record = {
            "user_id": user_id,
            "name": name,
            "ingredients": ["2 tomatoes", "1 onion"],
            "instructions": ["Chop", "Simmer"],
            "cooking_time": 30,
            "category": "Soup",
        }
        record.update(overrides)
        return record

    return build
