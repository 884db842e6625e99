from __future__ import annotations

import importlib.metadata
import json
import subprocess
from pathlib import Path
from typing import NamedTuple, Optional

DISTRIBUTION = "piecework"


class BuildInfo(NamedTuple):
    commit: Optional[str]
    date: Optional[str]
    dirty: bool


def _run_git(args: list[str], cwd: Path) -> Optional[str]:
    try:
        out = subprocess.check_output(["git", *args], cwd=str(cwd), stderr=subprocess.DEVNULL)
    except (subprocess.CalledProcessError, OSError):
        return None
    return out.decode().strip() or None


def _from_git_repo() -> Optional[BuildInfo]:
    here = Path(__file__).resolve().parent
    root = _run_git(["rev-parse", "--show-toplevel"], cwd=here)
    if not root or not Path(root).exists():
        return None
    commit = _run_git(["rev-parse", "HEAD"], cwd=Path(root))
    date = _run_git(["show", "-s", "--format=%cI", "HEAD"], cwd=Path(root))
    status = _run_git(["status", "--porcelain"], cwd=Path(root))
    return BuildInfo(commit=commit, date=date, dirty=bool(status))


def _from_embedded_file() -> Optional[BuildInfo]:
    # Generated at build time by the hatch build hook
    try:
        from . import _build_info  # type: ignore
    except ImportError:
        return None
    commit = getattr(_build_info, "COMMIT", None)
    date = getattr(_build_info, "DATE", None)
    return BuildInfo(commit=commit, date=date, dirty=False)


def _from_direct_url() -> Optional[BuildInfo]:
    # PEP 610 direct_url.json carries the VCS commit when installed from VCS
    try:
        dist = importlib.metadata.distribution(DISTRIBUTION)
    except importlib.metadata.PackageNotFoundError:
        return None
    text = dist.read_text("direct_url.json")
    if not text:
        return None
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None
    commit = (data.get("vcs_info") or {}).get("commit_id")
    if commit:
        return BuildInfo(commit=commit, date=None, dirty=False)
    return None


def get_build_info() -> BuildInfo:
    # Priority: live git repo -> embedded file -> direct_url.json -> unknowns
    for getter in (_from_git_repo, _from_embedded_file, _from_direct_url):
        info = getter()
        if info and (info.commit or info.date):
            return info
    return BuildInfo(commit=None, date=None, dirty=False)


def get_package_version() -> str:
    try:
        return importlib.metadata.version(DISTRIBUTION)
    except importlib.metadata.PackageNotFoundError:
        return "0+unknown"


def get_version_string() -> str:
    info = get_build_info()
    dirty_suffix = "-dirty" if info.dirty else ""
    # Short (7-character) git hashes when available
    commit = info.commit[:7] if info.commit else "unknown"
    date = info.date or "unknown"
    return f"{get_package_version()} ({commit}{dirty_suffix} {date})"
