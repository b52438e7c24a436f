"""Decides whether a patch field can be copied into a target field, and copies it."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import ValidationError

from partial_update.core.compat import is_assignable
from partial_update.core.fields import FieldDescriptor, FieldValue

DIRECT = "direct"
UNWRAP = "unwrap"
WRAPPER = "wrapper"


@dataclass(frozen=True)
class Assignment:
    """The rule that matched and the value it writes into the target."""

    rule: str
    value: Any


def resolve(patch_field: FieldValue, target_field: FieldDescriptor) -> Optional[Assignment]:
    """Return the first matching assignment rule, or None when not assignable."""
    source = patch_field.descriptor
    if is_assignable(source.declared_type, target_field.declared_type):
        return Assignment(rule=DIRECT, value=patch_field.value)
    if source.is_optional and not target_field.is_optional:
        if patch_field.value is None:
            return None
        if is_assignable(source.wrapped_type, target_field.declared_type):
            return Assignment(rule=UNWRAP, value=patch_field.value)
        return None
    if source.is_optional and target_field.is_optional:
        if is_assignable(source.wrapped_type, target_field.wrapped_type):
            return Assignment(rule=WRAPPER, value=patch_field.value)
    return None


def assign(target: Any, patch_field: FieldValue, target_field: FieldDescriptor) -> Optional[Assignment]:
    """Resolve and write the value into ``target``.

    Models that validate on assignment may still reject the value; that is
    reported as not assignable and leaves the field untouched.
    """
    assignment = resolve(patch_field, target_field)
    if assignment is None:
        return None
    try:
        setattr(target, target_field.name, assignment.value)
    except ValidationError:
        return None
    return assignment
