"""Curated editor add-ons: catalog lookup, install and verification."""

import json
import shutil
import subprocess
import time
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from godotpilot.constants import ADDON_CLONE_TIMEOUT, TMP_DIR
from godotpilot.context import read_project_settings, resolve_project_path
from godotpilot.logger import get_logger
from godotpilot.session import ToolSession
from godotpilot.tools.schemas import AddonArgs, InstallAddonArgs, ListAddonsArgs

logger = get_logger()

CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "addon_catalog.json"
GIT_CLONE_SUBDIR = "git_clone_subdir"


@lru_cache(maxsize=1)
def load_catalog() -> Dict[str, Any]:
    """
    Load the bundled add-on catalog.

    Raises:
        ValueError: If the catalog has no add-on list
    """
    catalog = json.loads(CATALOG_PATH.read_text(encoding="utf-8"))
    if not isinstance(catalog, dict) or not isinstance(catalog.get("addons"), list):
        raise ValueError("Invalid add-on catalog format")
    return catalog


def find_addon(addon_id: str) -> Optional[Dict[str, Any]]:
    for addon in load_catalog()["addons"]:
        if addon.get("id") == addon_id:
            return addon
    return None


def _unknown_addon(session: ToolSession, addon_id: str) -> Dict[str, Any]:
    session.dock_log(f"[MCP] Unknown addon_id: {addon_id}")
    return {
        "ok": False,
        "addon_id": addon_id,
        "reason": f"Unknown addon_id '{addon_id}'. Call godot_list_addons first.",
    }


def verify_installation(project_root: Path, addon: Dict[str, Any]) -> Dict[str, Any]:
    """
    Check an add-on's required files and whether its plugin is enabled.

    Returns:
        Verification report; passed only depends on the required files
    """
    required = (addon.get("verification") or {}).get("required_files") or []
    present: List[str] = []
    missing: List[str] = []
    for rel_path in required:
        res_path = f"res://{rel_path}"
        if resolve_project_path(project_root, rel_path).exists():
            present.append(res_path)
        else:
            missing.append(res_path)

    enabled = read_project_settings(project_root).get("editor_plugins/enabled", "")
    plugin_cfg = f"res://{addon['target_dir']}/plugin.cfg"
    passed = not missing

    remediation = []
    if not passed:
        remediation = [
            f"Re-run godot_install_addon('{addon['id']}') or install manually from {addon['source_url']}.",
            f"Ensure required files exist under res://{addon['target_dir']}.",
        ]
    return {
        "passed": passed,
        "required_files": [f"res://{p}" for p in required],
        "present_files": present,
        "missing_files": missing,
        "plugin_listed_in_project_settings": plugin_cfg in enabled,
        "remediation": remediation,
    }


def list_addons(session: ToolSession, args: ListAddonsArgs) -> Dict[str, Any]:
    addons = load_catalog()["addons"]
    if args.category:
        addons = [addon for addon in addons if addon.get("category") == args.category]
    scope = f" in '{args.category}'" if args.category else ""
    session.dock_log(f"[MCP] Listing curated add-ons{scope}: {len(addons)}")
    return {"ok": True, "category": args.category or None, "total": len(addons), "addons": addons}


def verify_addon(session: ToolSession, args: AddonArgs) -> Dict[str, Any]:
    addon = find_addon(args.addon_id)
    if addon is None:
        return _unknown_addon(session, args.addon_id)

    verification = verify_installation(session.project_root, addon)
    session.dock_log(
        f"[MCP] Verification '{addon['id']}': {'passed' if verification['passed'] else 'failed'}"
    )
    return {"ok": verification["passed"], "addon_id": addon["id"], "verification": verification}


def _clone_into_project(project_root: Path, addon: Dict[str, Any], force: bool) -> None:
    """
    Shallow-clone the add-on repository and copy its subdirectory into place.

    Raises:
        OSError, subprocess.SubprocessError: If the clone or copy fails
    """
    target = resolve_project_path(project_root, addon["target_dir"])
    tmp_root = project_root / TMP_DIR / f"addon_{addon['id']}_{int(time.time() * 1000)}"
    checkout = tmp_root / "checkout"
    tmp_root.mkdir(parents=True, exist_ok=True)
    try:
        subprocess.run(
            ["git", "clone", "--depth", "1", addon["source_url"], str(checkout)],
            cwd=str(project_root),
            check=True,
            capture_output=True,
            text=True,
            timeout=ADDON_CLONE_TIMEOUT,
        )
        source = checkout / addon["source_subdir"]
        if not source.exists():
            raise FileNotFoundError(
                f"Catalog source_subdir missing after clone: {addon['source_subdir']}"
            )
        if force and target.exists():
            shutil.rmtree(target)
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copytree(source, target, dirs_exist_ok=True)
    finally:
        shutil.rmtree(tmp_root, ignore_errors=True)


def install_addon(session: ToolSession, args: InstallAddonArgs) -> Dict[str, Any]:
    addon = find_addon(args.addon_id)
    if addon is None:
        return _unknown_addon(session, args.addon_id)

    method = addon.get("install_method")
    if method != GIT_CLONE_SUBDIR:
        session.dock_log(f"[MCP] Unsupported install method '{method}' for addon '{addon['id']}'")
        return {"ok": False, "addon_id": addon["id"], "reason": f"Unsupported install method '{method}'."}

    root = session.project_root
    existing = verify_installation(root, addon)
    if existing["passed"] and not args.force:
        session.dock_log(f"[MCP] Add-on '{addon['id']}' already installed and verified")
        return {"ok": True, "addon_id": addon["id"], "already_installed": True, "verification": existing}

    session.dock_log(f"[MCP] Installing add-on '{addon['id']}' from {addon['source_url']}...")
    try:
        _clone_into_project(root, addon, args.force)
    except (OSError, subprocess.SubprocessError) as e:
        logger.warning(f"Add-on install failed for {addon['id']}: {e}")
        session.dock_log(f"[MCP] Add-on install failed for '{addon['id']}': {e}")
        return {
            "ok": False,
            "addon_id": addon["id"],
            "install_attempted": True,
            "reason": f"Install failed: {e}",
            "remediation": [
                f"Verify network access and git availability, then retry godot_install_addon('{addon['id']}').",
                f"Manual fallback: clone '{addon['source_url']}' and copy "
                f"'{addon['source_subdir']}' to 'res://{addon['target_dir']}'.",
            ],
        }

    verification = verify_installation(root, addon)
    if not verification["passed"]:
        session.dock_log(f"[MCP] Add-on install completed but verification failed for '{addon['id']}'")
        return {
            "ok": False,
            "addon_id": addon["id"],
            "install_attempted": True,
            "verification": verification,
            "reason": "Install completed but required files are still missing.",
            "remediation": verification["remediation"],
        }

    session.dock_log(f"[MCP] Add-on '{addon['id']}' installed and verified")
    return {"ok": True, "addon_id": addon["id"], "install_attempted": True, "verification": verification}
