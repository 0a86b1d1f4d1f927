"""
Project metadata helpers.

The service reports its own name and version (JSON logs, /internal/info).
Both come from the installed distribution when available and from the
nearest pyproject.toml otherwise, e.g. when running from a source checkout.
"""
import tomllib
from pathlib import Path
from importlib import metadata as importlib_metadata
from typing import Any


def find_pyproject(start: Path, max_up: int = 5) -> Path | None:
    p = start
    for _ in range(max_up):
        candidate = p / "pyproject.toml"
        if candidate.exists():
            return candidate
        if p.parent == p:
            break
        p = p.parent
    return None


def get_pyproject_value(key: str, start: Path | None = None, default: Any = None) -> Any:
    """
    Return the value for a dot-separated `key` (e.g. "project.version") from the
    nearest pyproject.toml, or `default` when the file or key is missing.
    """
    pyproject = find_pyproject(start or Path(__file__).resolve().parent)
    if pyproject is None:
        return default

    try:
        with pyproject.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return default

    cur = data
    for part in key.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


def get_project_name(default: str | None = None) -> str | None:
    return get_pyproject_value("project.name", default=default)


def get_project_version(default: str = "unknown") -> str:
    """
    Installed distribution version first, pyproject.toml second, `default` last.
    """
    name = get_project_name(default="idm")
    try:
        return importlib_metadata.version(name)
    except importlib_metadata.PackageNotFoundError:
        return get_pyproject_value("project.version", default=default)
