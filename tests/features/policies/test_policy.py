"""Tests for Policy construction, resolution and evaluation."""

import pytest

from neo_capabilities.config.constants import ALL_ROLES
from neo_capabilities.core.exceptions import PolicyConfigurationError
from neo_capabilities.features.policies import Policy


ROLE1 = "player"
ROLE2 = "coach"
DATA1 = "data1"
DATA2 = "data2"


def register_book_taxonomies(resource_types):
    """Register two taxonomies with custom term capabilities."""
    for name in (DATA1, DATA2):
        resource_types.register_taxonomy(
            name,
            {
                "manage_terms": f"manage_{name}",
                "edit_terms": f"edit_{name}",
                "delete_terms": f"delete_{name}",
                "assign_terms": f"assign_{name}",
            },
        )


class TestPrimitives:
    """Tests for distributing primitive capabilities."""

    def test_manipulating_primitives(self, make_user, user_can):
        """Grant a primitive, then deny it again with a later policy."""
        user = make_user(ROLE1)

        Policy.grant_to(ROLE1).primitives(DATA1)
        assert user_can(user, DATA1)

        Policy.deny_to(ROLE1).primitives(DATA1)
        assert not user_can(user, DATA1)

    def test_granting_primitive_to_all(self, make_user, user_can, user_store):
        """A user of every known role holds a primitive granted to all roles."""
        Policy.grant_to_all().primitives(DATA1)

        for role in user_store.role_names():
            user = make_user(role)
            assert user_can(user, DATA1), f"user with role {role} lacked {DATA1}"

    def test_denying_primitive_to_all(self, make_user, user_can, user_store):
        """A user of every known role lacks a primitive denied to all roles."""
        for role in user_store.role_names():
            user_store.add_role_capability(role, DATA1)

        Policy.deny_to_all().primitives(DATA1)

        for role in user_store.role_names():
            user = make_user(role)
            assert not user_can(user, DATA1), f"user with role {role} held {DATA1}"

    def test_all_roles_requires_at_least_one_role(self, make_user):
        """Policies for all roles skip users holding no role at all."""
        policy = Policy.grant_to_all().primitives(DATA1)

        assert policy.evaluate({}, make_user()) == {}
        assert policy.evaluate({}, make_user(ROLE2)) == {DATA1: True}

    def test_primitives_accumulate_without_duplicates(self):
        """Primitives grow across calls and never repeat."""
        policy = Policy.grant_to(ROLE1).primitives([DATA1, DATA2]).primitives(DATA1)

        assert policy.get_primitives() == [DATA1, DATA2]
        assert policy.get_map() == {DATA1: True, DATA2: True}

    def test_empty_primitives_is_noop(self):
        """Empty configuration arguments change nothing."""
        policy = Policy.deny_to(ROLE1).primitives([]).primitives(None)

        assert policy.get_primitives() == []
        assert policy.get_map() == {}

    def test_exceptions_do_not_apply_to_primitives(self):
        """except_for() and only() only affect resource type slots."""
        policy = Policy.grant_to(ROLE1).primitives("edit_posts").except_for("edit_posts").only("read")

        assert policy.get_map() == {"edit_posts": True}


class TestContentTypes:
    """Tests for distributing content type capabilities."""

    @pytest.mark.parametrize("content_types", [DATA1, [DATA1, DATA2]])
    def test_manipulating_content_type(self, content_types, resource_types, make_user, user_can):
        """Grant, deny, except and only for one or several content types."""
        resource_types.register_content_type(DATA1, DATA1)
        resource_types.register_content_type(DATA2, DATA2)
        names = [content_types] if isinstance(content_types, str) else content_types

        user = make_user(ROLE1)

        Policy.grant_to(ROLE1).caps_for(content_types)
        for name in names:
            assert user_can(user, resource_types.get_content_type(name).capability("edit_posts"))

        Policy.deny_to(ROLE1).caps_for(content_types)
        for name in names:
            assert not user_can(user, resource_types.get_content_type(name).capability("edit_posts"))

        Policy.grant_to(ROLE1).caps_for(content_types).except_for("edit_others_posts")
        for name in names:
            cap = resource_types.get_content_type(name).capabilities
            assert user_can(user, cap["edit_posts"])
            assert not user_can(user, cap["edit_others_posts"])

        Policy.grant_to(ROLE1).caps_for(content_types).only("edit_others_posts")
        for name in names:
            cap = resource_types.get_content_type(name).capabilities
            assert user_can(user, cap["edit_others_posts"])
            assert not user_can(user, cap["edit_posts"])

    def test_read_capability_not_distributed(self, resource_types, make_user):
        """A read slot left as "read" is not distributed."""
        user = make_user(ROLE1)
        resource_types.register_content_type(DATA1, DATA1, {"read": "read"})

        policy = Policy.grant_to(ROLE1).caps_for(DATA1)

        assert "read" not in policy.filter_user_capabilities({}, [], [], user)

    def test_custom_read_capability_distributed(self, resource_types, make_user):
        """A read slot mapped to a custom capability is distributed."""
        user = make_user(ROLE1)
        resource_types.register_content_type(DATA1, DATA1, {"read": DATA2})

        policy = Policy.grant_to(ROLE1).caps_for(DATA1)

        assert DATA2 in policy.filter_user_capabilities({}, [], [], user)

    def test_built_in_post_type(self, make_user, user_can):
        """Built-in types resolve without extra registration."""
        user = make_user("subscriber")
        assert not user_can(user, "publish_posts")

        Policy.grant_to("subscriber").caps_for_content_type("post").only("publish_posts")

        assert user_can(user, "publish_posts")
        assert not user_can(user, "delete_others_posts")


class TestTaxonomies:
    """Tests for distributing taxonomy capabilities."""

    @pytest.mark.parametrize("taxonomies", [DATA1, [DATA1, DATA2]])
    def test_manipulating_taxonomy(self, taxonomies, resource_types, make_user, user_can):
        """Grant, deny, except and only for one or several taxonomies."""
        register_book_taxonomies(resource_types)
        names = [taxonomies] if isinstance(taxonomies, str) else taxonomies

        user = make_user(ROLE1)

        Policy.grant_to(ROLE1).caps_for(taxonomies)
        for name in names:
            assert user_can(user, resource_types.get_taxonomy(name).capability("edit_terms"))

        Policy.deny_to(ROLE1).caps_for(taxonomies)
        for name in names:
            assert not user_can(user, resource_types.get_taxonomy(name).capability("edit_terms"))

        Policy.grant_to(ROLE1).caps_for(taxonomies).except_for("delete_terms")
        for name in names:
            cap = resource_types.get_taxonomy(name).capabilities
            assert user_can(user, cap["edit_terms"])
            assert not user_can(user, cap["delete_terms"])

        Policy.grant_to(ROLE1).caps_for(taxonomies).only("delete_terms")
        for name in names:
            cap = resource_types.get_taxonomy(name).capabilities
            assert user_can(user, cap["delete_terms"])
            assert not user_can(user, cap["edit_terms"])

    def test_manipulating_content_type_and_taxonomy(self, resource_types, make_user, user_can):
        """One policy can target a content type and a taxonomy together."""
        resource_types.register_content_type(DATA1, DATA1)
        resource_types.register_taxonomy(
            DATA2,
            {
                "manage_terms": f"manage_{DATA2}",
                "edit_terms": f"edit_{DATA2}",
                "delete_terms": f"delete_{DATA2}",
                "assign_terms": f"assign_{DATA2}",
            },
        )

        user = make_user(ROLE1)
        both = [DATA1, DATA2]
        pt_cap = resource_types.get_content_type(DATA1).capabilities
        tax_cap = resource_types.get_taxonomy(DATA2).capabilities

        Policy.grant_to(ROLE1).caps_for(both)
        assert user_can(user, pt_cap["edit_posts"])
        assert user_can(user, tax_cap["edit_terms"])

        Policy.deny_to(ROLE1).caps_for(both)
        assert not user_can(user, pt_cap["edit_posts"])
        assert not user_can(user, tax_cap["edit_terms"])

        Policy.grant_to(ROLE1).caps_for(both).except_for(["edit_others_posts", "delete_terms"])
        assert user_can(user, pt_cap["edit_posts"])
        assert not user_can(user, pt_cap["edit_others_posts"])
        assert user_can(user, tax_cap["edit_terms"])
        assert not user_can(user, tax_cap["delete_terms"])

        Policy.grant_to(ROLE1).only(["edit_others_posts", "delete_terms"]).caps_for(both)
        assert user_can(user, pt_cap["edit_others_posts"])
        assert not user_can(user, pt_cap["edit_posts"])
        assert user_can(user, tax_cap["delete_terms"])
        assert not user_can(user, tax_cap["edit_terms"])

    def test_name_shared_by_content_type_and_taxonomy(self, resource_types):
        """caps_for() resolves a shared name as both kinds."""
        resource_types.register_content_type(DATA1, "book")
        resource_types.register_taxonomy(DATA1, {"manage_terms": "manage_genres"})

        both = Policy.grant_to(ROLE1).caps_for(DATA1).get_map()
        only_taxonomy = Policy.grant_to(ROLE1).caps_for_taxonomy(DATA1).get_map()

        assert both["edit_books"] is True
        assert both["manage_genres"] is True
        assert "edit_books" not in only_taxonomy
        assert only_taxonomy["manage_genres"] is True


class TestResolution:
    """Tests for resolution edge cases."""

    def test_meta_caps_are_not_granted(self, resource_types, make_user):
        """Meta capabilities are never distributed, even when configured."""
        resource_types.register_content_type(DATA1, "book")
        resource_types.register_taxonomy(
            DATA2,
            {
                "manage_terms": "manage_genres",
                "edit_terms": "edit_genres",
                "delete_terms": "delete_genres",
                "assign_terms": "assign_genres",
                "edit_term": "edit_genre",
            },
        )
        user = make_user(ROLE1)

        policy = Policy.grant_to(ROLE1).caps_for([DATA1, DATA2])
        actual = policy.filter_user_capabilities({}, [], [], user)

        assert "edit_book" not in actual
        assert "edit_genre" not in actual
        assert actual["edit_books"] is True
        assert actual["edit_genres"] is True

    def test_exceptions_take_precedence_over_only(self, resource_types):
        """A slot named in both only() and except_for() gets the opposite polarity."""
        resource_types.register_content_type(DATA1, "book")

        result = (
            Policy.grant_to(ROLE1)
            .caps_for(DATA1)
            .only(["edit_others_posts", "delete_posts"])
            .except_for("delete_posts")
            .get_map()
        )

        assert result["edit_others_books"] is True
        assert result["delete_books"] is False
        assert result["publish_books"] is False

    def test_only_applies_per_slot(self, resource_types):
        """Slots sharing a capability: any unlisted slot flips it."""
        resource_types.register_content_type(DATA1, "book")

        # create_posts maps to edit_books too and is not listed
        result = Policy.grant_to(ROLE1).caps_for(DATA1).only("edit_posts").get_map()

        assert result["edit_books"] is False

    def test_only_and_except_replace_previous_values(self):
        """except_for() and only() keep the last value given."""
        policy = Policy.grant_to(ROLE1).except_for("edit_posts").except_for(["delete_posts"])
        policy.only("read").only([])

        assert policy.get_exceptions() == ["delete_posts"]
        assert policy.get_only() == []

    def test_granting_capabilities_before_registration(self, resource_types, make_user, user_can):
        """Types registered after the policy was built are picked up."""
        user = make_user(ROLE1)

        policy = Policy.grant_to(ROLE1).caps_for([DATA1, DATA2])
        assert policy.filter_user_capabilities({}, [], [], user) == {}

        resource_types.register_content_type(DATA1, "book")
        resource_types.register_taxonomy(DATA2, {"manage_terms": "manage_genres"})

        assert user_can(user.id, resource_types.get_content_type(DATA1).capability("edit_others_posts"))
        assert user_can(user.id, resource_types.get_taxonomy(DATA2).capability("manage_terms"))

    def test_capabilities_reset_after_content_type_unregistered(self, resource_types, make_user, user_can):
        """Unregistering a content type drops its capabilities from the map."""
        user = make_user(ROLE1)
        resource_types.register_content_type(DATA1, "book")
        edit_posts = resource_types.get_content_type(DATA1).capability("edit_posts")

        policy = Policy.grant_to(ROLE1).caps_for(DATA1)

        assert "edit_books" in policy.filter_user_capabilities({}, [], [], user)
        assert user_can(user, edit_posts)

        resource_types.unregister_content_type(DATA1)

        assert "edit_books" not in policy.filter_user_capabilities({}, [], [], user)

    def test_capabilities_reset_after_taxonomy_unregistered(self, resource_types, make_user, user_can):
        """Unregistering a taxonomy drops its capabilities from the map."""
        user = make_user(ROLE1)
        resource_types.register_content_type(DATA1)
        resource_types.register_taxonomy(DATA2, {"edit_terms": "edit_genres"})

        policy = Policy.grant_to(ROLE1).caps_for(DATA2)

        assert "edit_genres" in policy.filter_user_capabilities({}, [], [], user)
        assert user_can(user, "edit_genres")

        resource_types.unregister_taxonomy(DATA2)

        assert "edit_genres" not in policy.filter_user_capabilities({}, [], [], user)


class TestEvaluation:
    """Tests for evaluate() and the registered listener."""

    def test_unmatched_user_is_unchanged(self, make_user):
        """Users outside the targeted roles get the input map back."""
        allcaps = {DATA1: True}
        policy = Policy.deny_to(ROLE1).primitives(DATA1)

        assert policy.evaluate(allcaps, make_user(ROLE2)) is allcaps

    def test_evaluate_does_not_mutate_input(self, make_user):
        """The incoming capability map is left untouched."""
        allcaps = {DATA1: True}
        policy = Policy.deny_to(ROLE1).primitives(DATA1)

        result = policy.evaluate(allcaps, make_user(ROLE1))

        assert result == {DATA1: False}
        assert allcaps == {DATA1: True}

    def test_unknown_user_contributes_nothing(self):
        """Unresolvable user IDs fail closed."""
        policy = Policy.grant_to_all().primitives(DATA1)

        assert policy.evaluate({}, 999_999) == {}
        assert policy.evaluate({}, None) == {}

    def test_user_resolved_from_id(self, make_user):
        """Users may be passed by ID."""
        user = make_user(ROLE1)
        policy = Policy.grant_to([ROLE1, ROLE2]).primitives(DATA1)

        assert policy.evaluate({}, user.id) == {DATA1: True}

    def test_remove(self, make_user, user_can, evaluation_registry):
        """Removed policies stop contributing to checks."""
        user = make_user(ROLE1)
        policy = Policy.grant_to(ROLE1).primitives(DATA1)
        assert user_can(user, DATA1)

        assert policy.remove() is True
        assert not user_can(user, DATA1)
        assert len(evaluation_registry) == 0
        assert policy.remove() is False


class TestPriorities:
    """Tests for priority handling."""

    def test_default_priority(self, evaluation_registry):
        """New policies register at the baseline priority."""
        policy = Policy.grant_to(ROLE1)

        assert policy.priority == 10
        assert evaluation_registry.has_listener(policy.filter_user_capabilities, 10)

    def test_default_priority_from_settings(self, monkeypatch):
        """The baseline priority can be configured from the environment."""
        from neo_capabilities.config import reset_settings

        monkeypatch.setenv("NEO_CAPS_DEFAULT_PRIORITY", "42")
        reset_settings()

        assert Policy.grant_to(ROLE1).priority == 42

    def test_changing_priorities(self, make_user, user_can):
        """Ties go to the newest registration; later priorities win."""
        user = make_user(ROLE1)

        deny = Policy.deny_to(ROLE1).primitives(DATA1)
        grant = Policy.grant_to(ROLE1).primitives(DATA1)

        deny.at_priority(10)
        grant.at_priority(10)

        # Both policies share a priority, so the newer registration wins.
        assert user_can(user, DATA1)

        # The first one wins with the later priority.
        deny.at_priority(100)
        assert not user_can(user, DATA1)

    def test_at_priority_reindexes(self, evaluation_registry):
        """Moving a policy leaves exactly one registration behind."""
        policy = Policy.grant_to(ROLE1).at_priority(5).at_priority(20)

        assert policy.priority == 20
        assert evaluation_registry.listeners() == [(20, policy.filter_user_capabilities)]

    @pytest.mark.parametrize("priority", ["10", 1.5, None, True])
    def test_invalid_priority(self, priority):
        """Non-integer priorities are rejected."""
        with pytest.raises(PolicyConfigurationError):
            Policy.grant_to(ROLE1).at_priority(priority)


class TestConstruction:
    """Tests for factory validation."""

    @pytest.mark.parametrize("roles", [None, "", [ROLE1, ""], [ROLE1, 3]])
    def test_invalid_roles(self, roles, evaluation_registry):
        """Missing or non-string roles fail fast and never register."""
        with pytest.raises(PolicyConfigurationError):
            Policy.grant_to(roles)

        assert len(evaluation_registry) == 0

    @pytest.mark.parametrize("roles", [[], ()])
    def test_empty_roles_match_nobody(self, roles, make_user, user_can, evaluation_registry):
        """An empty role list registers a policy that changes no one's capabilities."""
        user = make_user(ROLE1)
        admin = make_user("administrator")

        policy = Policy.deny_to(roles).primitives(["read", DATA1])

        assert policy.target_roles == []
        assert len(evaluation_registry) == 1
        assert user_can(admin, "read")
        assert not user_can(user, DATA1)
        assert repr(policy) == "Policy(deny to nobody, priority=10)"

    def test_chaining_to_empty_roles(self, make_user, user_can):
        """A chained link without roles leaves the parent's effect in place."""
        user = make_user(ROLE1)

        Policy.deny_to_all().primitives(DATA1).then_grant_to([])

        assert not user_can(user, DATA1)
        assert not user_can(make_user("administrator"), DATA1)

    def test_grant_to_empty_roles(self, make_user, user_can):
        user = make_user(ROLE1)

        Policy.grant_to([]).primitives(DATA1)

        assert not user_can(user, DATA1)

    def test_configuration_is_locked(self):
        """Concurrent configuration calls on one policy lose no updates."""
        import threading

        policy = Policy.grant_to(ROLE1)
        names = [f"cap_{i}" for i in range(200)]

        threads = [
            threading.Thread(target=policy.primitives, args=(names[i::4],))
            for i in range(4)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(policy.get_primitives()) == sorted(names)

    def test_configuration_waits_for_lock(self):
        """Setters block while another thread holds the policy lock."""
        import threading

        policy = Policy.grant_to(ROLE1)
        done = threading.Event()

        def configure():
            policy.primitives(DATA1).caps_for("post").except_for("read").only("edit_posts")
            done.set()

        with policy._lock:
            worker = threading.Thread(target=configure)
            worker.start()
            assert not done.wait(0.1)
            assert policy.get_primitives() == []

        worker.join()
        assert done.is_set()
        assert policy.get_primitives() == [DATA1]
        assert policy.get_only() == ["edit_posts"]

    def test_target_roles(self):
        """Role arguments are normalized to a list."""
        assert Policy.grant_to(ROLE1).target_roles == [ROLE1]
        assert Policy.deny_to((ROLE1, ROLE2, ROLE1)).target_roles == [ROLE1, ROLE2]
        assert Policy.grant_to_all().target_roles is ALL_ROLES

    def test_polarity(self):
        """Factories set the polarity."""
        assert Policy.grant_to(ROLE1).allow is True
        assert Policy.grant_to_all().allow is True
        assert Policy.deny_to(ROLE1).allow is False
        assert Policy.deny_to_all().allow is False

    def test_injected_collaborators(self, evaluation_registry):
        """Policies can use their own registry instead of the process-wide one."""
        from neo_capabilities.features.policies import EvaluationRegistry
        from neo_capabilities.features.resource_types import InMemoryResourceTypeRegistry
        from neo_capabilities.features.users import InMemoryUserStore

        registry = EvaluationRegistry()
        types = InMemoryResourceTypeRegistry()
        types.register_content_type("book", "book")
        users = InMemoryUserStore()
        user = users.create_user(roles=[ROLE1])

        policy = Policy.grant_to(ROLE1, registry=registry, resource_types=types, users=users).caps_for("book")

        assert len(evaluation_registry) == 0
        assert registry.apply({}, [], [], user.id)["edit_books"] is True

    def test_users_roles_intersect(self, make_user):
        """The membership check is also exposed on the policy class."""
        user = make_user(ROLE1)

        assert Policy.users_roles_intersect(user, ROLE1)
        assert not Policy.users_roles_intersect(user, ROLE2)
