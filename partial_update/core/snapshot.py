"""Opt-in all-or-nothing updates."""
from __future__ import annotations

import contextlib
from typing import Any, Dict, Iterator

import structlog

from partial_update.core.fields import describe
from partial_update.core.updater import Updater

LOGGER = structlog.get_logger(__name__)


def take_snapshot(record: Any) -> Dict[str, Any]:
    """Shallow copy of every field value on ``record``."""
    return {descriptor.name: getattr(record, descriptor.name) for descriptor in describe(type(record))}


def restore_snapshot(record: Any, snapshot: Dict[str, Any]) -> None:
    for name, value in snapshot.items():
        setattr(record, name, value)


@contextlib.contextmanager
def rollback_on_failure(updater: Updater) -> Iterator[Updater]:
    """Restore the target's fields if the block raises, then re-raise."""
    target = updater.target
    saved = take_snapshot(target)
    try:
        yield updater
    except Exception:
        restore_snapshot(target, saved)
        LOGGER.warning("rollback_applied", target=type(target).__name__, fields=len(saved))
        raise
