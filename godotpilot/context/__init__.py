"""Project context readers for godotpilot."""

from godotpilot.context.project import (
    read_project_settings,
    res_to_absolute,
    resolve_project_path,
    scan_project_files,
    to_res_path,
)
from godotpilot.context.scene import parse_scene, parse_tscn


def collect_project_files(project_root: str, extensions: list) -> dict:
    """
    Scan the project and group files by kind.

    Args:
        project_root: Root directory of the Godot project
        extensions: File extensions to include

    Returns:
        Dictionary of scripts, scenes, resources and assets (res:// paths)
    """
    files = scan_project_files(project_root, extensions)
    return {
        "scripts": [f for f in files if f.endswith(".gd")],
        "scenes": [f for f in files if f.endswith(".tscn")],
        "resources": [f for f in files if f.endswith(".tres")],
        "assets": [f for f in files if f.endswith((".svg", ".png", ".jpg"))],
    }


__all__ = [
    "collect_project_files",
    "parse_scene",
    "parse_tscn",
    "read_project_settings",
    "res_to_absolute",
    "resolve_project_path",
    "scan_project_files",
    "to_res_path",
]
