"""Predicates deciding whether a patch field counts as "not provided"."""
from __future__ import annotations

from typing import Any, Callable, Dict

from partial_update.core.fields import FieldDescriptor

ShouldSkip = Callable[[FieldDescriptor, Any], bool]

_EMPTY_TYPES = (str, bytes, list, tuple, dict, set, frozenset)


def skip_absent(descriptor: FieldDescriptor, value: Any) -> bool:
    """Skip only optional fields holding None.

    A non-optional field is always provided, even when it holds ``0`` or ``""``.
    """
    return descriptor.is_optional and value is None


def skip_none(descriptor: FieldDescriptor, value: Any) -> bool:
    return value is None


def skip_empty(descriptor: FieldDescriptor, value: Any) -> bool:
    """Treat None and empty strings/containers as not provided."""
    if value is None:
        return True
    return isinstance(value, _EMPTY_TYPES) and len(value) == 0


SKIP_POLICIES: Dict[str, ShouldSkip] = {
    "absent": skip_absent,
    "none": skip_none,
    "empty": skip_empty,
}
