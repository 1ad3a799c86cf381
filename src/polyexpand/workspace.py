from __future__ import annotations

import os
import shutil
from importlib.resources import as_file
from importlib.resources import files as pkg_files
from pathlib import Path


def workspace_dir() -> Path:
    """$POLYEXPAND_HOME, else ~/Documents/Polyexpand."""
    env = os.environ.get("POLYEXPAND_HOME")
    if env:
        return Path(env).expanduser().resolve()
    return (Path.home() / "Documents" / "Polyexpand").resolve()


def profiles_dir() -> Path:
    return workspace_dir() / "profiles"


def seed_workspace(*, overwrite: bool = False) -> tuple[Path, dict[str, int]]:
    """
    Copy the packaged *.toml profiles into <workspace>/profiles.

    overwrite=False → copy-if-missing
    overwrite=True  → force replace

    Returns: (workspace_path, {"profiles": files_copied})
    """
    target = profiles_dir()
    target.mkdir(parents=True, exist_ok=True)
    count = 0
    with as_file(pkg_files("polyexpand") / "profiles") as packaged:
        for src in sorted(Path(packaged).glob("*.toml")):
            dst = target / src.name
            if overwrite or not dst.exists():
                shutil.copy2(src, dst)
                count += 1
    return workspace_dir(), {"profiles": count}


def ensure_workspace_seeded() -> tuple[Path, bool, dict[str, int]]:
    root, copied = seed_workspace(overwrite=False)
    return root, any(copied.values()), copied
