"""Tools that drive the live editor. Each needs the bridge; failures surface."""

from typing import Any, Dict

from godotpilot.bridge import parse_error_report
from godotpilot.constants import ERROR_SUMMARY_LIMIT
from godotpilot.exceptions import BridgeError, BridgeResponseError
from godotpilot.session import ToolSession
from godotpilot.tools.schemas import (
    AddNodeArgs,
    ClassInfoArgs,
    DeleteNodeArgs,
    GetErrorsArgs,
    NoArgs,
    RunSceneArgs,
    SceneTreeArgs,
    ScreenshotArgs,
    UpdateNodeArgs,
)


def errors_directive(count: int) -> str:
    return (
        f"STOP: {count} script errors detected. Call godot_get_errors() to see "
        "details and fix every error before writing more files or completing a phase."
    )


def run_scene(session: ToolSession, args: RunSceneArgs) -> Dict[str, Any]:
    session.dock_log(f"[MCP] Running {args.scene_path or 'main scene'}...")
    return session.bridge.run_scene(args.scene_path)


def stop_scene(session: ToolSession, args: NoArgs) -> Dict[str, Any]:
    session.dock_log("[MCP] Stopping scene...")
    return session.bridge.stop_scene()


def _log_error_counts(session: ToolSession, label: str, payload: Dict[str, Any]):
    try:
        report = parse_error_report(payload)
    except BridgeResponseError as e:
        session.dock_log(f"[MCP] {label}: unreadable error report ({e.reason})")
        return
    session.dock_log(f"[MCP] {label}: {report.error_count} errors, {report.warning_count} warnings")


def get_errors(session: ToolSession, args: GetErrorsArgs) -> Dict[str, Any]:
    bridge = session.bridge
    if not args.detailed:
        session.dock_log("[MCP] Running fast error check...")
        result = bridge.get_errors()
        _log_error_counts(session, "Fast check", result)
        return result

    session.dock_log("[MCP] Running detailed error check (headless validation)...")
    try:
        result = bridge.get_detailed_errors()
    except BridgeError as e:
        session.dock_log(f"[MCP] Detailed check failed ({e}), falling back to fast check...")
        result = bridge.get_errors()
        _log_error_counts(session, "Fast check", result)
        return result
    _log_error_counts(session, "Detailed check", result)
    return result


def reload_filesystem(session: ToolSession, args: NoArgs) -> Dict[str, Any]:
    session.dock_log("[MCP] Reloading filesystem...")
    result = dict(session.bridge.reload_filesystem())

    errors = session.best_effort("post-reload error check", session.bridge.get_error_report)
    if not errors.ok:
        return result

    report = errors.payload
    result["_error_count"] = report.error_count
    result["_error_files"] = report.error_files(ERROR_SUMMARY_LIMIT)
    result["_action_required"] = None
    if report.error_count > 0:
        result["_action_required"] = errors_directive(report.error_count)
        session.dock_log(
            f"[MCP] {report.error_count} errors detected after reload. "
            "Fix them before writing more files."
        )
    else:
        session.dock_log("[MCP] Reload complete - 0 errors.")
    return result


def _count_nodes(node: Any) -> int:
    if not isinstance(node, dict) or node.get("error"):
        return 0
    return 1 + sum(_count_nodes(child) for child in node.get("children") or [])


def get_scene_tree(session: ToolSession, args: SceneTreeArgs) -> Dict[str, Any]:
    session.dock_log("[MCP] Getting scene tree...")
    result = session.bridge.get_scene_tree(args.max_depth)
    session.dock_log(f"[MCP] Scene tree: {_count_nodes(result)} nodes")
    return result


def get_class_info(session: ToolSession, args: ClassInfoArgs) -> Dict[str, Any]:
    session.dock_log(f"[MCP] Looking up class: {args.class_name}")
    result = session.bridge.get_class_info(args.class_name, args.include_inherited)
    if result.get("error"):
        session.dock_log(f"[MCP] Class not found: {args.class_name}")
    else:
        session.dock_log(
            f"[MCP] {args.class_name}: {len(result.get('properties') or [])} props, "
            f"{len(result.get('methods') or [])} methods, "
            f"{len(result.get('signals') or [])} signals"
        )
    return result


NODE_ACTIONS = {"add": "added", "update": "updated", "delete": "deleted"}


def _log_node_outcome(session: ToolSession, action: str, target: str, result: Dict[str, Any]):
    if result.get("success"):
        session.dock_log(f"[MCP] Node {NODE_ACTIONS[action]}: {target}")
    else:
        session.dock_log(f"[MCP] Failed to {action} node: {result.get('error') or 'unknown error'}")


def add_node(session: ToolSession, args: AddNodeArgs) -> Dict[str, Any]:
    session.dock_log(f"[MCP] Adding node: {args.node_name} ({args.node_type}) under {args.parent_path}")
    result = session.bridge.add_node(args.parent_path, args.node_name, args.node_type, args.properties)
    _log_node_outcome(session, "add", result.get("path") or args.node_name, result)
    return result


def update_node(session: ToolSession, args: UpdateNodeArgs) -> Dict[str, Any]:
    session.dock_log(f"[MCP] Updating node {args.node_path}: {', '.join(args.properties)}")
    result = session.bridge.update_node(args.node_path, args.properties)
    _log_node_outcome(session, "update", args.node_path, result)
    return result


def delete_node(session: ToolSession, args: DeleteNodeArgs) -> Dict[str, Any]:
    session.dock_log(f"[MCP] Deleting node: {args.node_path}")
    result = session.bridge.delete_node(args.node_path)
    _log_node_outcome(session, "delete", args.node_path, result)
    return result


def get_editor_screenshot(session: ToolSession, args: ScreenshotArgs) -> Dict[str, Any]:
    session.dock_log(f"[MCP] Capturing {args.viewport} viewport screenshot...")
    result = session.bridge.get_editor_screenshot(args.viewport)
    if result.get("image"):
        session.dock_log(f"[MCP] Screenshot captured: {result.get('width')}x{result.get('height')}")
    else:
        session.dock_log(f"[MCP] Screenshot failed: {result.get('error') or 'unknown error'}")
    return result


def get_open_scripts(session: ToolSession, args: NoArgs) -> Dict[str, Any]:
    session.dock_log("[MCP] Getting open scripts...")
    result = session.bridge.get_open_scripts()
    session.dock_log(f"[MCP] {len(result.get('scripts') or [])} scripts open in editor")
    return result
