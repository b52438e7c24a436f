"""Partial update engine: copy provided fields of a patch record into a target."""
from __future__ import annotations

import weakref
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, Optional

import structlog

from partial_update.core.errors import (
    NilPatchError,
    NilTargetError,
    NotAStructError,
    UpdateFieldsFailureError,
)
from partial_update.core.fields import (
    FieldValue,
    describe,
    field_values,
    is_frozen,
    is_record,
    is_record_type,
)
from partial_update.core.lookup import FindField, find_case_insensitive
from partial_update.core.report import UpdateReport
from partial_update.core.resolver import assign
from partial_update.core.skip import ShouldSkip, skip_absent

if TYPE_CHECKING:
    from partial_update.config.settings import UpdaterSettings

LOGGER = structlog.get_logger(__name__)


def _check_target(target: Any) -> None:
    if target is None:
        raise NilTargetError()
    if isinstance(target, type):
        reason = "is a record class, not an instance" if is_record_type(target) else "is not a record instance"
        raise NotAStructError(target, reason)
    if not is_record(target):
        raise NotAStructError(target)
    if is_frozen(target):
        raise NotAStructError(target, "is frozen and cannot be updated in place")
    describe(type(target))


def _reference(target: Any) -> Callable[[], Any]:
    try:
        return weakref.ref(target)
    except TypeError:
        # slotted records without __weakref__ are held strongly
        return lambda: target


class Updater:
    """Merges patch records into one bound target record.

    Every call to :meth:`update` walks the patch fields in declaration order
    and files each one into exactly one bucket: updated, skipped, not found or
    not assignable. The buckets are keyed by the patch field name and are
    replaced wholesale on each call.

    The pass is not transactional. Fields that could be assigned are written
    to the target even when :class:`UpdateFieldsFailureError` is raised for
    the others; use :func:`partial_update.core.snapshot.rollback_on_failure`
    for all-or-nothing behaviour.
    """

    def __init__(
        self,
        target: Any,
        *,
        should_skip: Optional[ShouldSkip] = None,
        find: Optional[FindField] = None,
    ) -> None:
        _check_target(target)
        self._target_ref = _reference(target)
        self.should_skip: ShouldSkip = should_skip or skip_absent
        self.find: FindField = find or find_case_insensitive
        self._updated: Dict[str, FieldValue] = {}
        self._skipped: Dict[str, FieldValue] = {}
        self._not_found: Dict[str, FieldValue] = {}
        self._not_assignable: Dict[str, FieldValue] = {}
        LOGGER.debug("updater_created", target=type(target).__name__)

    @classmethod
    def from_settings(cls, target: Any, settings: "UpdaterSettings") -> "Updater":
        return cls(target, should_skip=settings.skip_predicate(), find=settings.lookup())

    @property
    def target(self) -> Any:
        target = self._target_ref()
        if target is None:
            raise NilTargetError("the bound target is no longer alive")
        return target

    @property
    def updated_fields(self) -> Mapping[str, FieldValue]:
        return MappingProxyType(self._updated)

    @property
    def skipped_fields(self) -> Mapping[str, FieldValue]:
        return MappingProxyType(self._skipped)

    @property
    def not_found_fields(self) -> Mapping[str, FieldValue]:
        return MappingProxyType(self._not_found)

    @property
    def not_assignable_fields(self) -> Mapping[str, FieldValue]:
        return MappingProxyType(self._not_assignable)

    def update(self, patch: Any) -> None:
        """Apply ``patch`` to the target.

        Raises :class:`NilPatchError` or :class:`NotAStructError` before
        touching the target, and :class:`UpdateFieldsFailureError` after the
        full pass when any field was not found or not assignable.
        """
        if patch is None:
            raise NilPatchError()
        if not is_record(patch):
            raise NotAStructError(patch)
        describe(type(patch))
        target = self.target

        updated: Dict[str, FieldValue] = {}
        skipped: Dict[str, FieldValue] = {}
        not_found: Dict[str, FieldValue] = {}
        not_assignable: Dict[str, FieldValue] = {}

        for field in field_values(patch):
            if self.should_skip(field.descriptor, field.value):
                skipped[field.name] = field
                continue
            target_field = self.find(target, field.name)
            if target_field is None:
                not_found[field.name] = field
                continue
            assignment = assign(target, field, target_field)
            if assignment is None:
                not_assignable[field.name] = field
                continue
            updated[field.name] = FieldValue(field.descriptor, assignment.value, assignment.rule)

        self._updated = updated
        self._skipped = skipped
        self._not_found = not_found
        self._not_assignable = not_assignable

        LOGGER.debug(
            "update_completed",
            target=type(target).__name__,
            patch=type(patch).__name__,
            updated=len(updated),
            skipped=len(skipped),
            not_found=len(not_found),
            not_assignable=len(not_assignable),
        )
        if not_found or not_assignable:
            LOGGER.warning(
                "update_failed",
                target=type(target).__name__,
                not_found=sorted(not_found),
                not_assignable=sorted(not_assignable),
            )
            raise UpdateFieldsFailureError(not_found, not_assignable)

    def report(self) -> UpdateReport:
        """Summarise the most recent :meth:`update` call."""
        return UpdateReport.from_buckets(
            updated=self._updated,
            skipped=self._skipped,
            not_found=self._not_found,
            not_assignable=self._not_assignable,
        )
