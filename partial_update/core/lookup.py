"""Strategies resolving a patch field name to a field of the target."""
from __future__ import annotations

import functools
from typing import Any, Callable, Dict, Mapping, Optional

from partial_update.core.fields import CACHE_SIZE, FieldDescriptor, describe

FindField = Callable[[Any, str], Optional[FieldDescriptor]]


@functools.lru_cache(maxsize=CACHE_SIZE)
def _exact_index(cls: type) -> Dict[str, FieldDescriptor]:
    return {descriptor.name: descriptor for descriptor in describe(cls)}


@functools.lru_cache(maxsize=CACHE_SIZE)
def _casefold_index(cls: type) -> Dict[str, FieldDescriptor]:
    index: Dict[str, FieldDescriptor] = {}
    for descriptor in describe(cls):
        # first declared field wins when names collide after casefolding
        index.setdefault(descriptor.name.casefold(), descriptor)
    return index


def find_case_insensitive(target: Any, name: str) -> Optional[FieldDescriptor]:
    """Default lookup: ``name`` matches ``Name`` and ``NAME``."""
    return _casefold_index(type(target)).get(name.casefold())


def find_exact(target: Any, name: str) -> Optional[FieldDescriptor]:
    return _exact_index(type(target)).get(name)


def aliased(aliases: Mapping[str, str], fallback: FindField = find_case_insensitive) -> FindField:
    """Wrap a lookup so renamed patch fields resolve to their target names."""
    renames = dict(aliases)

    def find(target: Any, name: str) -> Optional[FieldDescriptor]:
        return fallback(target, renames.get(name, name))

    return find
