"""Field-level diff between two record states.

Values are compared after normalization: strings are stripped and
``None`` counts as the empty string, so whitespace-only edits are not
changes. List values are compared by membership and reported as the
members added and deleted.
"""

from collections.abc import Iterable, Mapping
from typing import Any


def normalize(value: Any) -> Any:
    """Comparable form of a field value."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return value


def list_change(prior: list[Any], pending: list[Any]) -> dict[str, list[Any]]:
    """Members added and deleted between two lists (empty sides omitted)."""
    change: dict[str, list[Any]] = {}
    added = [item for item in pending if item not in prior]
    deleted = [item for item in prior if item not in pending]
    if added:
        change["added"] = added
    if deleted:
        change["deleted"] = deleted
    return change


def is_list_pair(old: Any, new: Any) -> bool:
    if not (isinstance(old, list) or isinstance(new, list)):
        return False
    return all(value is None or isinstance(value, list) for value in (old, new))


def diff(
    prior: Mapping[str, Any],
    pending: Mapping[str, Any],
    field_names: Iterable[str],
) -> dict[str, dict[str, Any]]:
    """Changes between two states across the given fields.

    Args:
        prior: Values as last persisted
        pending: Values about to be persisted
        field_names: Fields to compare, in reporting order

    Returns:
        Mapping of changed field -> {"from", "to"} (or {"added", "deleted"}
        for list fields); empty when nothing changed
    """
    changes: dict[str, dict[str, Any]] = {}

    for name in field_names:
        if name in changes:
            continue
        old = prior.get(name)
        new = pending.get(name)

        # a list replaced by a scalar (or back) is a plain from/to change
        if is_list_pair(old, new):
            members = list_change(list(old or []), list(new or []))
            if members:
                changes[name] = members
            continue

        if normalize(old) != normalize(new):
            changes[name] = {"from": old, "to": new}

    return changes
