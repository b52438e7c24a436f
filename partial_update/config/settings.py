"""Updater configuration loaded from TOML and the environment."""
from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Dict, Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from partial_update.core.lookup import FindField, aliased, find_case_insensitive, find_exact
from partial_update.core.skip import SKIP_POLICIES, ShouldSkip

ENV_PREFIX = "PARTIAL_UPDATE_"
DEFAULT_SETTINGS_PATH = Path("config/partial_update.toml")


class UpdaterSettings(BaseModel):
    """Validated strategy selection for an updater."""

    case_sensitive: bool = False
    skip_policy: Literal["absent", "none", "empty"] = "absent"
    aliases: Dict[str, str] = Field(default_factory=dict, description="patch name -> target name")

    def skip_predicate(self) -> ShouldSkip:
        return SKIP_POLICIES[self.skip_policy]

    def lookup(self) -> FindField:
        base = find_exact if self.case_sensitive else find_case_insensitive
        if self.aliases:
            return aliased(self.aliases, base)
        return base


def _env_overrides() -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    for key in ("case_sensitive", "skip_policy"):
        value = os.environ.get(f"{ENV_PREFIX}{key.upper()}")
        if value not in (None, ""):
            overrides[key] = value.strip()
    return overrides


def load_settings(path: Optional[Path] = None) -> UpdaterSettings:
    """Read the ``[updater]`` table of a TOML file, then apply env overrides."""
    load_dotenv()
    path = path or DEFAULT_SETTINGS_PATH
    data: Dict[str, object] = {}
    if path.exists():
        with path.open("rb") as handle:
            data.update(tomllib.load(handle).get("updater", {}))
    data.update(_env_overrides())
    try:
        return UpdaterSettings(**data)
    except ValidationError as exc:
        raise ValueError(f"Invalid updater settings in {path}: {exc}") from exc
