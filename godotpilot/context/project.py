"""Filesystem view of a Godot project. Works without the editor running."""

from pathlib import Path
from typing import Dict, List, Union

from godotpilot.constants import SCAN_SKIP_DIRS
from godotpilot.exceptions import ProjectPathError

RES_PREFIX = "res://"


def res_to_absolute(project_root: Union[str, Path], res_path: str) -> Path:
    """Convert a res:// path (or a project-relative path) to an absolute path."""
    root = Path(project_root)
    if res_path.startswith(RES_PREFIX):
        return root / res_path[len(RES_PREFIX):]
    path = Path(res_path)
    return path if path.is_absolute() else root / path


def to_res_path(project_root: Union[str, Path], path: Path) -> str:
    return RES_PREFIX + path.relative_to(project_root).as_posix()


def resolve_project_path(project_root: Union[str, Path], path_like: str) -> Path:
    """
    Resolve a res:// or relative path, refusing anything outside the project.

    Raises:
        ProjectPathError: If the path is the root itself or escapes it
    """
    root = Path(project_root).resolve()
    clean = str(path_like or "")
    if clean.startswith(RES_PREFIX):
        clean = clean[len(RES_PREFIX):]
    clean = clean.lstrip("/")
    resolved = (root / clean).resolve()
    if resolved == root or root not in resolved.parents:
        raise ProjectPathError(str(path_like))
    return resolved


def scan_project_files(project_root: Union[str, Path], extensions: List[str]) -> List[str]:
    """
    Recursively list project files with the given extensions.

    Hidden directories (including .godot) and addons/ are skipped.

    Returns:
        Sorted res:// paths
    """
    root = Path(project_root)
    wanted = {ext.lstrip(".").lower() for ext in extensions}
    results = []

    def walk(directory: Path):
        try:
            entries = sorted(directory.iterdir())
        except OSError:
            return
        for entry in entries:
            if entry.is_dir():
                if entry.name.startswith(".") or entry.name in SCAN_SKIP_DIRS:
                    continue
                walk(entry)
            elif entry.suffix[1:].lower() in wanted:
                results.append(to_res_path(root, entry))

    walk(root)
    return results


def read_project_settings(project_root: Union[str, Path]) -> Dict[str, str]:
    """
    Parse project.godot into a flat mapping of "section/key" to raw values.

    Surrounding quotes are stripped; everything else is left as written.
    Returns an empty dict when the file is missing.
    """
    path = Path(project_root) / "project.godot"
    try:
        content = path.read_text(encoding="utf-8")
    except OSError:
        return {}

    settings = {}
    section = ""
    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith(";"):
            continue
        if stripped.startswith("[") and stripped.endswith("]"):
            section = stripped[1:-1]
            continue
        key, sep, value = stripped.partition("=")
        key = key.strip()
        if not sep or not key or not (key[0].isalnum() or key[0] == "_"):
            continue
        value = value.strip()
        if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
            value = value[1:-1]
        settings[f"{section}/{key}" if section else key] = value
    return settings
