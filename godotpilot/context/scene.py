"""Parser for Godot 4 text scene (.tscn) files."""

import re
from pathlib import Path
from typing import Any, Dict, Union

from godotpilot.context.project import res_to_absolute

SECTION_PATTERN = re.compile(r"^\[(\w+)(.*?)\]$")
PROPERTY_PATTERN = re.compile(r"^(\w+)\s*=\s*(.+)$")
INLINE_PATTERN = re.compile(r'(\w+)\s*=\s*("(?:[^"\\]|\\.)*"|\S+)')


def _unquote(value: str) -> str:
    if not value:
        return ""
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


def _parse_inline(text: str) -> Dict[str, str]:
    return {match.group(1): match.group(2) for match in INLINE_PATTERN.finditer(text)}


def _flush_section(result: Dict[str, Any], section: str, data: Dict[str, str]):
    if section == "gd_scene":
        result["format"] = int(data.get("format", "3"))
        result["load_steps"] = int(data.get("load_steps", "0"))
    elif section == "ext_resource":
        result["ext_resources"].append({
            "type": _unquote(data.get("type", "")),
            "path": _unquote(data.get("path", "")),
            "id": _unquote(data.get("id", "")),
        })
    elif section == "sub_resource":
        result["sub_resources"].append({
            **data,
            "type": _unquote(data.get("type", "")),
            "id": _unquote(data.get("id", "")),
        })
    elif section == "node":
        result["nodes"].append({
            **data,
            "name": _unquote(data.get("name", "")),
            "type": _unquote(data.get("type", "")),
            "parent": _unquote(data.get("parent", "")),
        })


def parse_tscn(content: str) -> Dict[str, Any]:
    """
    Parse raw .tscn text.

    Section headers become entries in ext_resources, sub_resources or nodes;
    key = value lines are attached to the section they follow as raw strings.
    """
    result = {
        "format": None,
        "load_steps": 0,
        "ext_resources": [],
        "sub_resources": [],
        "nodes": [],
    }
    section = None
    data = {}

    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith(";"):
            continue

        header = SECTION_PATTERN.match(stripped)
        if header:
            if section:
                _flush_section(result, section, data)
            section = header.group(1)
            data = _parse_inline(header.group(2))
            continue

        prop = PROPERTY_PATTERN.match(stripped)
        if prop:
            data[prop.group(1)] = prop.group(2)

    if section:
        _flush_section(result, section, data)
    return result


def parse_scene(project_root: Union[str, Path], scene_path: str) -> Dict[str, Any]:
    """Read and parse a scene given as res:// or filesystem path."""
    path = res_to_absolute(project_root, scene_path)
    return parse_tscn(path.read_text(encoding="utf-8"))
