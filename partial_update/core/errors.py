"""Exception hierarchy raised by the updater."""
from __future__ import annotations

from typing import Iterable, Tuple


class PartialUpdateError(Exception):
    """Base class for all merge failures."""


class NilTargetError(PartialUpdateError, ValueError):
    """The target record is missing or no longer alive."""

    def __init__(self, message: str = "the given target is None") -> None:
        super().__init__(message)


class NilPatchError(PartialUpdateError, ValueError):
    """The patch record is missing."""

    def __init__(self, message: str = "the given patch is None") -> None:
        super().__init__(message)


class NotAStructError(PartialUpdateError, TypeError):
    """The supplied object is not a record that can be merged."""

    def __init__(self, obj: object, reason: str = "is not a record instance") -> None:
        self.obj = obj
        name = obj.__name__ if isinstance(obj, type) else type(obj).__name__
        super().__init__(f"{name} {reason}")


class UpdateFieldsFailureError(PartialUpdateError):
    """Raised after a merge pass when some fields could not be applied.

    The pass is not rolled back: every field that could be assigned has
    already been written to the target.
    """

    def __init__(self, not_found: Iterable[str], not_assignable: Iterable[str]) -> None:
        self.not_found: Tuple[str, ...] = tuple(not_found)
        self.not_assignable: Tuple[str, ...] = tuple(not_assignable)
        parts = []
        if self.not_found:
            parts.append(f"not found: {', '.join(self.not_found)}")
        if self.not_assignable:
            parts.append(f"not assignable: {', '.join(self.not_assignable)}")
        super().__init__(f"update fields failure ({'; '.join(parts)})")
