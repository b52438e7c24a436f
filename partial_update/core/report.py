"""Serializable summary of one merge pass."""
from __future__ import annotations

from typing import List, Mapping

import orjson
from pydantic import BaseModel, Field


class UpdateReport(BaseModel):
    """Field names per classification bucket."""

    updated: List[str] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)
    not_found: List[str] = Field(default_factory=list)
    not_assignable: List[str] = Field(default_factory=list)
    ok: bool = True

    @classmethod
    def from_buckets(
        cls,
        *,
        updated: Mapping[str, object],
        skipped: Mapping[str, object],
        not_found: Mapping[str, object],
        not_assignable: Mapping[str, object],
    ) -> "UpdateReport":
        return cls(
            updated=list(updated),
            skipped=list(skipped),
            not_found=list(not_found),
            not_assignable=list(not_assignable),
            ok=not not_found and not not_assignable,
        )

    def to_json(self) -> str:
        return orjson.dumps(self.model_dump(), option=orjson.OPT_INDENT_2).decode()
