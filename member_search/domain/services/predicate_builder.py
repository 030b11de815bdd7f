from typing import FrozenSet, Optional

from member_search.domain.models.predicate import Predicate, PredicateKind, SearchField
from member_search.domain.models.search import FilterCriteria, SortDirection


def has_text(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def name_eq(name: Optional[str]) -> Optional[Predicate]:
    return Predicate(field=SearchField.NAME, kind=PredicateKind.EQUALS, value=name) if has_text(name) else None


def group_name_eq(group_name: Optional[str]) -> Optional[Predicate]:
    if not has_text(group_name):
        return None
    return Predicate(field=SearchField.GROUP_NAME, kind=PredicateKind.EQUALS, value=group_name)


def value_goe(min_value: Optional[int]) -> Optional[Predicate]:
    if min_value is None:
        return None
    return Predicate(field=SearchField.VALUE, kind=PredicateKind.GREATER_OR_EQUAL, value=min_value)


def value_loe(max_value: Optional[int]) -> Optional[Predicate]:
    if max_value is None:
        return None
    return Predicate(field=SearchField.VALUE, kind=PredicateKind.LESS_OR_EQUAL, value=max_value)


def id_after(last_seen_id: Optional[int], direction: SortDirection = SortDirection.DESC) -> Optional[Predicate]:
    """Keyset cursor condition: rows strictly past ``last_seen_id`` in ``direction``."""
    if last_seen_id is None:
        return None
    kind = PredicateKind.LESS_THAN if direction == SortDirection.DESC else PredicateKind.GREATER_THAN
    return Predicate(field=SearchField.ID, kind=kind, value=last_seen_id)


def build_predicates(criteria: FilterCriteria) -> FrozenSet[Predicate]:
    """Return one predicate per condition present in ``criteria``.

    The predicates are meant to be ANDed together; an empty set matches every record.
    """
    candidates = (
        name_eq(criteria.name_filter),
        group_name_eq(criteria.group_filter),
        value_goe(criteria.min_value),
        value_loe(criteria.max_value),
    )
    return frozenset(p for p in candidates if p is not None)
