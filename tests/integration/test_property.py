"""Hypothesis property tests for preset access invariants."""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from preset_authz.access import AccessEvaluator, OptionFilter
from preset_authz.compiler import eval_predicate
from preset_authz.constraints import build_registry
from preset_authz.preset import ConstraintAccess, PresetRecord
from preset_authz.testing import MockActor
from tests._support import hide_everyone_from_non_admins, specific_roles

OPERATIONS = ["read", "update", "delete", "create"]
ROLES = ["admin", "user", "editor"]

_REGISTRY = build_registry({"read": [specific_roles]})

actor_ids = st.integers(min_value=1, max_value=5)

actors = st.builds(
    MockActor,
    id=actor_ids,
    roles=st.lists(st.sampled_from(ROLES), unique=True, max_size=3).map(tuple),
)

access_entries = st.one_of(
    st.just(ConstraintAccess("onlyMe")),
    st.just(ConstraintAccess("everyone")),
    st.lists(actor_ids, max_size=3).map(
        lambda users: ConstraintAccess("specificUsers", {"users": users})
    ),
    st.lists(st.sampled_from(ROLES), max_size=2).map(
        lambda roles: ConstraintAccess("specificRoles", {"roles": roles})
    ),
    st.just(ConstraintAccess("retired")),
)

records = st.builds(
    PresetRecord,
    id=st.integers(min_value=1, max_value=1000),
    name=st.sampled_from(["Open", "Closed"]),
    created_by=actor_ids,
    access=st.fixed_dictionaries(
        {"read": access_entries, "update": access_entries, "delete": access_entries}
    ),
)


class TestConsistency:
    """can_perform and list_filter agree on every record."""

    @given(actor=actors, record=records, operation=st.sampled_from(OPERATIONS))
    @settings(max_examples=200)
    def test_single_document_matches_list_filter(self, actor, record, operation):
        evaluator = AccessEvaluator(_REGISTRY)
        single = evaluator.can_perform(operation, actor, record)
        listed = eval_predicate(evaluator.list_filter(operation, actor), record)
        assert single == listed

    @given(actor=actors, record=records, operation=st.sampled_from(OPERATIONS))
    @settings(max_examples=100)
    def test_consistent_under_collection_filter(self, actor, record, operation):
        from preset_authz.predicate import eq

        evaluator = AccessEvaluator(
            _REGISTRY,
            collection_policy={
                "read": lambda a: eq("name", "Open"),
                "update": lambda a: "editor" in a.roles,
            },
        )
        single = evaluator.can_perform(operation, actor, record)
        listed = eval_predicate(evaluator.list_filter(operation, actor), record)
        assert single == listed


class TestCollectionDeny:
    """A definite collection-level False denies regardless of the stored constraint."""

    @given(actor=actors, record=records, operation=st.sampled_from(OPERATIONS))
    def test_collection_false_always_denies(self, actor, record, operation):
        evaluator = AccessEvaluator(
            _REGISTRY,
            collection_policy={op: (lambda a: False) for op in ("read", "update", "delete")},
        )
        assert evaluator.can_perform(operation, actor, record) is False
        assert eval_predicate(evaluator.list_filter(operation, actor), record) is False


class TestOptionFilterDeterminism:
    @given(actor=actors, operation=st.sampled_from(OPERATIONS))
    def test_repeat_calls_agree(self, actor, operation):
        option_filter = OptionFilter(hide_everyone_from_non_admins)
        candidates = _REGISTRY.list(operation)
        first = option_filter.available_options(operation, actor, candidates)
        second = option_filter.available_options(operation, actor, list(candidates))
        assert first == second
