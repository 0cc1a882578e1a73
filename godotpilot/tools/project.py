"""Filesystem-backed tools. All of these work with the editor closed."""

from typing import Any, Dict

from godotpilot.constants import DEFAULT_SCAN_EXTENSIONS, PROJECT_STATE_EXTENSIONS
from godotpilot.context import (
    collect_project_files,
    parse_scene,
    read_project_settings,
    scan_project_files,
)
from godotpilot.session import ToolSession
from godotpilot.tools.schemas import (
    NoArgs,
    ParseSceneArgs,
    ReadProjectSettingArgs,
    ScanProjectFilesArgs,
)


def get_project_state(session: ToolSession, args: NoArgs) -> Dict[str, Any]:
    session.dock_log("[MCP] Getting project state...")
    root = session.project_root
    connected = session.bridge.is_connected()
    files = collect_project_files(root, PROJECT_STATE_EXTENSIONS)
    settings = read_project_settings(root)

    result = {
        "editor_connected": connected,
        "project_path": str(root),
        "project_name": settings.get("application/config/name", "Unknown"),
        "main_scene": settings.get("application/run/main_scene", ""),
        "files": files,
    }
    if connected:
        status = session.best_effort("editor status", session.bridge.get_status)
        if status.ok:
            result["editor_status"] = status.payload

    total = sum(len(group) for group in files.values())
    session.dock_log(
        f"[MCP] Project: {result['project_name']} - {total} files, "
        f"editor {'connected' if connected else 'offline'}"
    )
    return result


def scan_files(session: ToolSession, args: ScanProjectFilesArgs) -> Dict[str, Any]:
    session.dock_log("[MCP] Scanning project files...")
    files = scan_project_files(session.project_root, args.extensions or DEFAULT_SCAN_EXTENSIONS)
    session.dock_log(f"[MCP] Found {len(files)} project files")
    return {
        "project_path": str(session.project_root),
        "total": len(files),
        "files": files,
    }


def read_setting(session: ToolSession, args: ReadProjectSettingArgs) -> Dict[str, Any]:
    session.dock_log(f"[MCP] Reading setting: {args.key}")
    settings = read_project_settings(session.project_root)
    if args.key not in settings:
        return {"key": args.key, "found": False, "value": None}
    return {"key": args.key, "found": True, "value": settings[args.key]}


def parse_scene_file(session: ToolSession, args: ParseSceneArgs) -> Dict[str, Any]:
    session.dock_log(f"[MCP] Parsing scene: {args.scene_path}")
    result = parse_scene(session.project_root, args.scene_path)
    session.dock_log(f"[MCP] Scene parsed: {args.scene_path} ({len(result['nodes'])} nodes)")
    return result
