"""Pytest configuration and fixtures for neo-capabilities tests."""

import pytest

from neo_capabilities.config import reset_settings
from neo_capabilities.features.policies import EvaluationRegistry, set_evaluation_registry
from neo_capabilities.features.resource_types import (
    InMemoryResourceTypeRegistry,
    set_resource_type_registry,
)
from neo_capabilities.features.users import (
    InMemoryUserStore,
    resolve_user,
    set_user_store,
)


# Test role names
ROLE1 = "player"
ROLE2 = "coach"

# Values known to differ from each other, for comparisons
DATA1 = "data1"
DATA2 = "data2"

DEFAULT_ROLES = {
    "administrator": ["read", "edit_posts", "edit_others_posts", "manage_categories", "manage_options"],
    "editor": ["read", "edit_posts", "edit_others_posts", "manage_categories"],
    "author": ["read", "edit_posts", "publish_posts"],
    "contributor": ["read", "edit_posts"],
    "subscriber": ["read"],
}


@pytest.fixture
def evaluation_registry():
    """Fresh process-wide evaluation registry."""
    registry = EvaluationRegistry()
    set_evaluation_registry(registry)
    yield registry
    set_evaluation_registry(None)


@pytest.fixture
def resource_types():
    """Fresh process-wide resource type registry with the built-in types."""
    registry = InMemoryResourceTypeRegistry()
    registry.register_content_type("post", "post")
    registry.register_content_type("page", ("page", "pages"))
    registry.register_taxonomy("category")
    set_resource_type_registry(registry)
    yield registry
    set_resource_type_registry(None)


@pytest.fixture
def user_store():
    """Fresh process-wide user store with the default roles and two test roles."""
    store = InMemoryUserStore()
    for name, caps in DEFAULT_ROLES.items():
        store.add_role(name, caps)
    store.add_role(ROLE1, [])
    store.add_role(ROLE2, [])
    set_user_store(store)
    yield store
    set_user_store(None)


@pytest.fixture(autouse=True)
def capability_environment(evaluation_registry, resource_types, user_store):
    """Isolate every test from policies and types registered by other tests."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def make_user(user_store):
    """Factory creating a stored user holding the given roles (none by default)."""
    def _make_user(*roles):
        return user_store.create_user(roles=roles)
    return _make_user


@pytest.fixture
def user_can(evaluation_registry, user_store):
    """Host-style permission check: role capabilities, then every policy."""
    def _user_can(user, capability, *args):
        resolved = resolve_user(user, user_store)
        if resolved is None:
            return False
        allcaps = user_store.get_capabilities(resolved)
        allcaps = evaluation_registry.apply(allcaps, [capability], list(args), resolved)
        return bool(allcaps.get(capability, False))
    return _user_can
