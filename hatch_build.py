"""Hatchling build hook that embeds the git commit into the package."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any

from hatchling.builders.hooks.plugin.interface import BuildHookInterface

BUILD_INFO = "piecework/_build_info.py"


class CustomBuildHook(BuildHookInterface):
    """Write piecework/_build_info.py so installed copies can report their commit."""

    def initialize(self, version: str, build_data: dict[str, Any]) -> None:
        root = Path(self.root)
        commit = _git(root, "rev-parse", "HEAD")
        date = _git(root, "show", "-s", "--format=%cI", "HEAD")
        (root / BUILD_INFO).write_text(
            "# Auto-generated at build time.\n"
            f"COMMIT = {commit!r}\n"
            f"DATE = {date!r}\n",
            encoding="utf-8",
        )
        # Untracked by git, so it has to be named explicitly
        build_data.setdefault("artifacts", []).append(BUILD_INFO)


def _git(cwd: Path, *args: str) -> str | None:
    try:
        out = subprocess.check_output(["git", *args], cwd=str(cwd), stderr=subprocess.DEVNULL)
    except (subprocess.CalledProcessError, OSError):
        # Building from an sdist or without git installed
        return None
    return out.decode().strip() or None
