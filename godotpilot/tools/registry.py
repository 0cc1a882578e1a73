"""The closed set of tools the server exposes."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Type

from godotpilot.stall_guard import ToolEffect
from godotpilot.tools import addons, assets, build, editor, project, quality
from godotpilot.tools.schemas import (
    AddNodeArgs,
    AddonArgs,
    ClassInfoArgs,
    DeleteNodeArgs,
    EvaluateQualityGatesArgs,
    GenerateAssetArgs,
    GetErrorsArgs,
    InstallAddonArgs,
    LatestQualityReportArgs,
    ListAddonsArgs,
    LogArgs,
    NoArgs,
    ParseSceneArgs,
    ReadProjectSettingArgs,
    RunSceneArgs,
    SaveBuildStateArgs,
    ScanProjectFilesArgs,
    SceneTreeArgs,
    ScorePocQualityArgs,
    ScreenshotArgs,
    ToolArgs,
    UpdateNodeArgs,
    UpdatePhaseArgs,
)


class ToolName(str, Enum):
    GET_PROJECT_STATE = "godot_get_project_state"
    SCAN_PROJECT_FILES = "godot_scan_project_files"
    READ_PROJECT_SETTING = "godot_read_project_setting"
    PARSE_SCENE = "godot_parse_scene"
    GENERATE_ASSET = "godot_generate_asset"
    LIST_ADDONS = "godot_list_addons"
    INSTALL_ADDON = "godot_install_addon"
    VERIFY_ADDON = "godot_verify_addon"
    SCORE_POC_QUALITY = "godot_score_poc_quality"
    GET_LATEST_QUALITY_REPORT = "godot_get_latest_quality_report"
    EVALUATE_QUALITY_GATES = "godot_evaluate_quality_gates"
    SAVE_BUILD_STATE = "godot_save_build_state"
    GET_BUILD_STATE = "godot_get_build_state"
    LOG = "godot_log"
    UPDATE_PHASE = "godot_update_phase"
    RUN_SCENE = "godot_run_scene"
    STOP_SCENE = "godot_stop_scene"
    GET_ERRORS = "godot_get_errors"
    RELOAD_FILESYSTEM = "godot_reload_filesystem"
    GET_SCENE_TREE = "godot_get_scene_tree"
    GET_CLASS_INFO = "godot_get_class_info"
    ADD_NODE = "godot_add_node"
    UPDATE_NODE = "godot_update_node"
    DELETE_NODE = "godot_delete_node"
    GET_EDITOR_SCREENSHOT = "godot_get_editor_screenshot"
    GET_OPEN_SCRIPTS = "godot_get_open_scripts"


@dataclass(frozen=True)
class ToolSpec:
    """
    One registered tool.

    Attributes:
        check_errors: Attach the live error count to successful results
        remind: Attach the dock reminder to successful results
    """

    name: ToolName
    description: str
    args_model: Type[ToolArgs]
    handler: Callable[..., Dict[str, Any]]
    effect: ToolEffect
    check_errors: bool = True
    remind: bool = True

    def input_schema(self) -> Dict[str, Any]:
        schema = self.args_model.model_json_schema()
        schema.pop("title", None)
        schema.setdefault("properties", {})
        return schema


def _spec(name, description, args_model, handler, effect, **flags) -> ToolSpec:
    return ToolSpec(name, description, args_model, handler, effect, **flags)


_SPECS = [
    # Project filesystem
    _spec(
        ToolName.GET_PROJECT_STATE,
        "Get the project overview: editor connection, project name, main scene and "
        "files grouped into scripts, scenes, resources and assets.",
        NoArgs, project.get_project_state, ToolEffect.NEUTRAL, check_errors=False,
    ),
    _spec(
        ToolName.SCAN_PROJECT_FILES,
        "Recursively list project files by extension. Skips hidden directories and addons/.",
        ScanProjectFilesArgs, project.scan_files, ToolEffect.NEUTRAL,
    ),
    _spec(
        ToolName.READ_PROJECT_SETTING,
        "Read one value from project.godot, e.g. application/run/main_scene.",
        ReadProjectSettingArgs, project.read_setting, ToolEffect.NEUTRAL,
    ),
    _spec(
        ToolName.PARSE_SCENE,
        "Parse a .tscn file into its resources and node hierarchy without opening the editor.",
        ParseSceneArgs, project.parse_scene_file, ToolEffect.NEUTRAL,
    ),
    _spec(
        ToolName.GENERATE_ASSET,
        "Generate a placeholder SVG sprite for a game object type and save it in the project.",
        GenerateAssetArgs, assets.generate_asset, ToolEffect.PROGRESS,
    ),
    # Add-ons
    _spec(
        ToolName.LIST_ADDONS,
        "List curated, tested editor add-ons, optionally filtered by category.",
        ListAddonsArgs, addons.list_addons, ToolEffect.NEUTRAL,
    ),
    _spec(
        ToolName.INSTALL_ADDON,
        "Install a curated add-on by catalog ID and verify its required files.",
        InstallAddonArgs, addons.install_addon, ToolEffect.PROGRESS,
    ),
    _spec(
        ToolName.VERIFY_ADDON,
        "Verify that a curated add-on is installed and report what is missing.",
        AddonArgs, addons.verify_addon, ToolEffect.PROGRESS,
    ),
    # Quality
    _spec(
        ToolName.SCORE_POC_QUALITY,
        "Score the final proof of concept against the weighted quality rubric and save a report. "
        "Returns go, needs_iteration or no_go.",
        ScorePocQualityArgs, quality.score_poc_quality, ToolEffect.PROGRESS,
    ),
    _spec(
        ToolName.GET_LATEST_QUALITY_REPORT,
        "Read the most recent saved quality reports, optionally for one phase.",
        LatestQualityReportArgs, quality.get_latest_quality_report, ToolEffect.NEUTRAL,
    ),
    _spec(
        ToolName.EVALUATE_QUALITY_GATES,
        "Evaluate the objective quality gates for a phase from project files: visual polish "
        "proxies for phase 5 and later, game flow and readiness for phase 6. Saves a report "
        "to .claude/quality_reports. Run before completing a late phase.",
        EvaluateQualityGatesArgs, quality.evaluate_quality_gates, ToolEffect.NEUTRAL,
    ),
    # Build bookkeeping
    _spec(
        ToolName.SAVE_BUILD_STATE,
        "Save the build checkpoint to .claude/build_state.json so an interrupted build can resume.",
        SaveBuildStateArgs, build.save_build_state, ToolEffect.PROGRESS,
    ),
    _spec(
        ToolName.GET_BUILD_STATE,
        "Load the build checkpoint. Returns found=false when there is none.",
        NoArgs, build.get_build_state, ToolEffect.NEUTRAL, check_errors=False,
    ),
    _spec(
        ToolName.LOG,
        "Show a progress message in the editor dock so the user can follow the build.",
        LogArgs, build.log_message, ToolEffect.PASSIVE, check_errors=False, remind=False,
    ),
    _spec(
        ToolName.UPDATE_PHASE,
        "Report a build phase transition. Completion is rejected while script errors exist, "
        "and from phase 5 on while computed quality gates fail.",
        UpdatePhaseArgs, build.update_phase, ToolEffect.NEUTRAL, remind=False,
    ),
    # Live editor
    _spec(
        ToolName.RUN_SCENE,
        "Run the main scene or a specific scene in the editor.",
        RunSceneArgs, editor.run_scene, ToolEffect.PROGRESS,
    ),
    _spec(
        ToolName.STOP_SCENE,
        "Stop the running scene.",
        NoArgs, editor.stop_scene, ToolEffect.PROGRESS,
    ),
    _spec(
        ToolName.GET_ERRORS,
        "Get script errors and warnings. Detailed mode runs headless validation for file and "
        "line information and falls back to the fast check.",
        GetErrorsArgs, editor.get_errors, ToolEffect.NEUTRAL, check_errors=False,
    ),
    _spec(
        ToolName.RELOAD_FILESYSTEM,
        "Rescan the project filesystem after writing files. Reports errors found after the rescan.",
        NoArgs, editor.reload_filesystem, ToolEffect.NEUTRAL, check_errors=False,
    ),
    _spec(
        ToolName.GET_SCENE_TREE,
        "Get the node tree of the scene open in the editor.",
        SceneTreeArgs, editor.get_scene_tree, ToolEffect.NEUTRAL,
    ),
    _spec(
        ToolName.GET_CLASS_INFO,
        "Get properties, methods and signals of a Godot class.",
        ClassInfoArgs, editor.get_class_info, ToolEffect.NEUTRAL,
    ),
    _spec(
        ToolName.ADD_NODE,
        "Add a node to the open scene.",
        AddNodeArgs, editor.add_node, ToolEffect.PROGRESS,
    ),
    _spec(
        ToolName.UPDATE_NODE,
        "Set properties on a node in the open scene.",
        UpdateNodeArgs, editor.update_node, ToolEffect.PROGRESS,
    ),
    _spec(
        ToolName.DELETE_NODE,
        "Delete a node from the open scene.",
        DeleteNodeArgs, editor.delete_node, ToolEffect.PROGRESS,
    ),
    _spec(
        ToolName.GET_EDITOR_SCREENSHOT,
        "Capture the 2D or 3D editor viewport as a base64 PNG.",
        ScreenshotArgs, editor.get_editor_screenshot, ToolEffect.NEUTRAL,
    ),
    _spec(
        ToolName.GET_OPEN_SCRIPTS,
        "List scripts open in the script editor.",
        NoArgs, editor.get_open_scripts, ToolEffect.NEUTRAL,
    ),
]

TOOL_SPECS: Dict[str, ToolSpec] = {spec.name.value: spec for spec in _SPECS}

PROGRESS_TOOLS = frozenset(
    name for name, spec in TOOL_SPECS.items() if spec.effect is ToolEffect.PROGRESS
)

_unregistered = set(ToolName) - {spec.name for spec in _SPECS}
if _unregistered:
    raise RuntimeError(f"Tools without a registry entry: {sorted(m.value for m in _unregistered)}")
