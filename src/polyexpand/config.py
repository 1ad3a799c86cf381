from __future__ import annotations

import tomllib as toml
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from polyexpand.utility import UserInputError
from polyexpand.workspace import ensure_workspace_seeded, profiles_dir

PROFILE_META = "_PROFILE_"


@dataclass
class Settings:
    """
    One loaded profile. `data` holds every section except [_PROFILE_];
    name and description come from [_PROFILE_], falling back to the file stem.
    """
    data: dict[str, Any]
    name: str
    description: str
    _source: Path | None = None

    def as_dict(self) -> dict[str, Any]:
        return self.data


def _profile_path(name: str) -> Path:
    return profiles_dir() / f"{name}.toml"


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return toml.load(f)
    except toml.TOMLDecodeError as e:
        loc = ""
        if getattr(e, "lineno", None) is not None:
            loc = f" (at line {e.lineno}, column {e.colno})"
        # No traceback chaining
        raise UserInputError(f"reading {path.name}: {getattr(e, 'msg', e)}{loc}.") from None


def _split_profile_data(raw: dict[str, Any], fallback_name: str) -> tuple[dict[str, Any], str, str]:
    meta = raw.get(PROFILE_META) or {}
    data = {k: v for k, v in raw.items() if k != PROFILE_META}
    name = str(meta.get("name") or fallback_name)
    description = " ".join(str(meta.get("description") or "").split()) or "(no description)"
    return data, name, description


def list_all_profiles() -> list[str]:
    """Profile names (file stems) in the workspace."""
    ensure_workspace_seeded()
    return sorted(p.stem for p in profiles_dir().glob("*.toml"))


def has_profile(name: str) -> bool:
    return _profile_path(name).exists()


def load_settings(name: str | None) -> Settings:
    name = name or "default"
    path = _profile_path(name)
    if not path.exists():
        raise FileNotFoundError(f"Profile '{name}' not found at {path}")

    data, resolved_name, description = _split_profile_data(_load_toml(path), path.stem)
    return Settings(data=data, name=resolved_name, description=description, _source=path)
