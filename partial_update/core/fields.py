"""Field descriptors for dataclass and pydantic records."""
from __future__ import annotations

import dataclasses
import functools
import sys
import types
import typing
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Tuple

from pydantic import BaseModel

from partial_update.core.errors import NotAStructError

NoneType = type(None)

# bounded so record classes created at runtime can be freed
CACHE_SIZE = 256


@dataclass(frozen=True)
class FieldDescriptor:
    """A named, typed slot declared on a record class."""

    name: str
    declared_type: Any
    is_optional: bool
    wrapped_type: Any
    owner: type


@dataclass(frozen=True)
class FieldValue:
    """A descriptor paired with the value read from (or written to) a record."""

    descriptor: FieldDescriptor
    value: Any
    resolution: Optional[str] = None

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def is_absent(self) -> bool:
        return self.descriptor.is_optional and self.value is None


def is_union(annotation: Any) -> bool:
    origin = typing.get_origin(annotation)
    return origin is typing.Union or origin is types.UnionType


def split_optional(annotation: Any) -> Tuple[bool, Any]:
    """Return whether the annotation admits None, and the type it wraps."""
    if annotation is None or annotation is NoneType:
        return True, NoneType
    if not is_union(annotation):
        return False, annotation
    members = typing.get_args(annotation)
    if NoneType not in members:
        return False, annotation
    rest = tuple(member for member in members if member is not NoneType)
    if len(rest) == 1:
        return True, rest[0]
    return True, typing.Union[rest]


def is_record_type(cls: Any) -> bool:
    if not isinstance(cls, type):
        return False
    return dataclasses.is_dataclass(cls) or issubclass(cls, BaseModel)


def is_record(obj: Any) -> bool:
    """True for dataclass or pydantic model *instances*; classes do not count."""
    return not isinstance(obj, type) and is_record_type(type(obj))


def is_frozen(obj: Any) -> bool:
    cls = type(obj)
    if dataclasses.is_dataclass(cls):
        return bool(cls.__dataclass_params__.frozen)
    if issubclass(cls, BaseModel):
        return bool(cls.model_config.get("frozen", False))
    return False


def _unresolved(annotation: Any) -> Optional[str]:
    if isinstance(annotation, str):
        return annotation
    if isinstance(annotation, typing.ForwardRef):
        return annotation.__forward_arg__
    return None


def _resolve_field(cls: type, name: str, annotation: Any) -> Any:
    source = _unresolved(annotation)
    if source is None:
        return annotation
    owner = next((base for base in cls.__mro__ if name in base.__dict__.get("__annotations__", {})), cls)
    module = sys.modules.get(owner.__module__)
    holder = types.SimpleNamespace(__annotations__={name: source})
    try:
        return typing.get_type_hints(
            holder,
            globalns=dict(vars(module)) if module is not None else {},
            localns=dict(vars(owner)),
        )[name]
    except (NameError, TypeError) as exc:
        raise NotAStructError(cls, f"field {name!r} has an unresolvable annotation {source!r}: {exc}") from exc


def _raw_annotations(cls: type) -> Iterator[Tuple[str, Any]]:
    if issubclass(cls, BaseModel):
        for name, info in cls.model_fields.items():
            yield name, info.annotation
        return
    try:
        hints = typing.get_type_hints(cls)
    except (NameError, TypeError):
        # a non-field annotation (e.g. a ClassVar) may be unresolvable; fields are resolved one by one
        hints = {}
    for field in dataclasses.fields(cls):
        if field.name in hints:
            yield field.name, hints[field.name]
        else:
            yield field.name, _resolve_field(cls, field.name, field.type)


@functools.lru_cache(maxsize=CACHE_SIZE)
def describe(cls: type) -> Tuple[FieldDescriptor, ...]:
    """Return the field table of a record class in declaration order."""
    if not is_record_type(cls):
        raise TypeError(f"{cls!r} is not a dataclass or pydantic model")
    descriptors = []
    for name, annotation in _raw_annotations(cls):
        optional, wrapped = split_optional(annotation)
        descriptors.append(
            FieldDescriptor(
                name=name,
                declared_type=annotation,
                is_optional=optional,
                wrapped_type=wrapped,
                owner=cls,
            )
        )
    return tuple(descriptors)


def field_values(record: Any) -> Iterator[FieldValue]:
    for descriptor in describe(type(record)):
        yield FieldValue(descriptor=descriptor, value=getattr(record, descriptor.name))
