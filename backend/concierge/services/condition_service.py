# /concierge/services/condition_service.py

import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from concierge.models.task import Predicate, TaskCatalogEntry, normalize_value

# Task catalog condition matching. A catalog entry's conditions are a set of
# Predicates, ANDed together; each predicate lists the accepted values for one
# profile field (OR within the list). Everything here is pure.

_COMPARISON_RE = re.compile(r"^\s*(>=|<=|>|<)\s*(-?\d+(?:\.\d+)?)\s*$")
_NUMBER_RE = re.compile(r"^\s*-?\d+(?:\.\d+)?\s*$")


def _as_number(value: str) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _accepts(accepted: str, value: str) -> bool:
    comparison = _COMPARISON_RE.match(accepted)
    if comparison:
        number = _as_number(value)
        if number is None:
            return False
        op, bound = comparison.group(1), float(comparison.group(2))
        if op == ">=":
            return number >= bound
        if op == "<=":
            return number <= bound
        if op == ">":
            return number > bound
        return number < bound
    if _NUMBER_RE.match(accepted) and _NUMBER_RE.match(value):
        return float(accepted) == float(value)
    return accepted.strip().casefold() == value.casefold()


def _lookup(profile: Mapping[str, Any], key: str) -> tuple:
    """Returns (found, value); exact key first, then case-insensitive."""
    if key in profile:
        return True, profile[key]
    folded = key.casefold()
    for candidate, value in profile.items():
        if isinstance(candidate, str) and candidate.casefold() == folded:
            return True, value
    return False, None


def matches(predicate: Predicate, profile: Mapping[str, Any]) -> bool:
    found, raw = _lookup(profile, predicate.key)
    if not found or raw is None:
        return False

    values: Iterable[Any] = raw if isinstance(raw, (list, tuple, set)) else [raw]
    for item in values:
        value = normalize_value(item)
        if value is None:
            continue
        if any(_accepts(accepted, value) for accepted in predicate.allowed):
            return True
    return False


def match_all(predicates: Iterable[Predicate], profile: Mapping[str, Any]) -> bool:
    """True iff every predicate matches; vacuously true for no predicates."""
    return all(matches(predicate, profile) for predicate in predicates)


def entry_matches(entry: TaskCatalogEntry, profile: Mapping[str, Any]) -> bool:
    return match_all(entry.predicates(), profile)


def filter_catalog(entries: Iterable[TaskCatalogEntry], profile: Dict[str, Any]) -> List[TaskCatalogEntry]:
    return [entry for entry in entries if entry_matches(entry, profile)]
