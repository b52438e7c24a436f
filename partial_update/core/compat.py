"""Structural type compatibility between patch and target annotations.

Only identical or subclass-assignable types are compatible. Nothing is
converted: ``int`` never fits ``float``, ``bool`` never fits ``int`` and
strings are never parsed into numbers or dates.
"""
from __future__ import annotations

import typing
from typing import Any

from partial_update.core.fields import is_union

_NUMERIC = (int, float, complex)


def _normalise(annotation: Any) -> Any:
    origin = typing.get_origin(annotation)
    if origin is not None and not typing.get_args(annotation) and not is_union(annotation):
        return origin
    return annotation


def same_type(left: Any, right: Any) -> bool:
    left, right = _normalise(left), _normalise(right)
    if left == right:
        return True
    if is_union(left) and is_union(right):
        left_args, right_args = typing.get_args(left), typing.get_args(right)
        return len(left_args) == len(right_args) and all(
            any(same_type(a, b) for b in right_args) for a in left_args
        )
    left_origin, right_origin = typing.get_origin(left), typing.get_origin(right)
    if left_origin is None or left_origin is not right_origin:
        return False
    left_args, right_args = typing.get_args(left), typing.get_args(right)
    return len(left_args) == len(right_args) and all(
        same_type(a, b) for a, b in zip(left_args, right_args)
    )


def _widens(source: type, target: type) -> bool:
    if source is target:
        return False
    return source is bool and issubclass(target, _NUMERIC)


def is_assignable(source: Any, target: Any) -> bool:
    """Whether a value declared as ``source`` may be stored in a ``target`` slot."""
    source, target = _normalise(source), _normalise(target)
    if source is Any or target is Any:
        return True
    if same_type(source, target):
        return True
    if is_union(target):
        members = typing.get_args(target)
        if is_union(source):
            return all(any(same_type(s, t) for t in members) for s in typing.get_args(source))
        return any(is_assignable(source, member) for member in members)
    if is_union(source):
        return False
    if typing.get_origin(source) is not None or typing.get_origin(target) is not None:
        return False
    if isinstance(source, type) and isinstance(target, type):
        return not _widens(source, target) and issubclass(source, target)
    return False
