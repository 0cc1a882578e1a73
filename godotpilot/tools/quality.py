"""PoC quality rubric scoring, objective quality gates and saved quality reports."""

import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from godotpilot.constants import (
    AUDIO_EXTENSIONS,
    DEPTH_LAYER_MARKERS,
    FEEDBACK_CATEGORIES,
    FINAL_PHASE,
    FLOW_CATEGORIES,
    IMAGE_EXTENSIONS,
    MAX_QUALITY_REPORTS,
    PHASE_NAMES,
    POC_DEFAULT_MAX_ITERATIONS,
    POC_HARD_GATE_HINTS,
    POC_MAX_NEXT_ACTIONS,
    POC_PASS_SCORE,
    POC_SCORE_WEIGHTS,
    POC_VERY_GOOD_SCORE,
    POC_VISUAL_CHECK_HINTS,
    POLISH_FX_MARKERS,
    QUALITY_GATE_MIN_PHASE,
    QUALITY_REPORTS_DIR,
    QUALITY_SIGNAL_EXTENSIONS,
    UI_STYLE_MARKERS,
)
from godotpilot.checkpoint import atomic_write_text
from godotpilot.context import read_project_settings, res_to_absolute, scan_project_files
from godotpilot.logger import get_logger
from godotpilot.session import ToolSession
from godotpilot.tools.schemas import EvaluateQualityGatesArgs, LatestQualityReportArgs, ScorePocQualityArgs

logger = get_logger()

REPORT_SCHEMA_VERSION = "poc-quality-report-v1"

FUNC_PATTERN = re.compile(r"^\s*func\s+")
PASS_PATTERN = re.compile(r"^pass(\s+#.*)?$")


def normalize_checklist(source: Dict[str, Any], required: List[str]) -> Dict[str, bool]:
    """Keep only the required keys; anything missing counts as failed."""
    return {key: bool(source.get(key)) for key in required}


def checklist_failures(checklist: Dict[str, bool]) -> List[str]:
    return [name for name, passed in checklist.items() if not passed]


def normalize_scores(source: Dict[str, Any]) -> Tuple[Optional[Dict[str, float]], Optional[str]]:
    """
    Validate rubric scores.

    Returns:
        (scores, None) on success or (None, reason) when a category is
        missing, non-numeric or outside 1..5
    """
    scores = {}
    for key in POC_SCORE_WEIGHTS:
        raw = source.get(key)
        if isinstance(raw, bool):
            return None, f"Missing numeric score for '{key}'"
        try:
            value = float(raw)
        except (TypeError, ValueError):
            return None, f"Missing numeric score for '{key}'"
        if not 1 <= value <= 5:
            return None, f"Score '{key}' must be between 1 and 5"
        scores[key] = value
    return scores, None


def weighted_score(scores: Dict[str, float]) -> float:
    total = sum(scores[key] / 5 * weight for key, weight in POC_SCORE_WEIGHTS.items())
    return round(total, 1)


def next_actions(
    hard_failures: List[str],
    visual_failures: List[str],
    scores: Dict[str, float],
    escalation_required: bool,
) -> List[str]:
    actions = []
    for failure in hard_failures:
        actions.append(POC_HARD_GATE_HINTS.get(failure, f"Fix hard gate: {failure}"))
    for failure in visual_failures:
        actions.append(POC_VISUAL_CHECK_HINTS.get(failure, f"Fix visual gate: {failure}"))

    weakest = sorted(scores.items(), key=lambda item: item[1])[:2]
    for category, _ in weakest:
        actions.append(f"Improve rubric category: {category}")

    if escalation_required:
        actions.append("Max quality iterations reached. Escalate for user direction before further loops.")

    return list(dict.fromkeys(actions))[:POC_MAX_NEXT_ACTIONS]


def persist_report(
    project_root: Path,
    report: Dict[str, Any],
    trigger: str,
    meta: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Save a report under .claude/quality_reports.

    Returns:
        res:// path of the saved report, or "" if it could not be written
    """
    now = datetime.now(timezone.utc)
    slug = now.strftime("%Y-%m-%dT%H-%M-%S-%fZ")
    phase = report.get("phase_number")
    phase_label = phase if isinstance(phase, int) else "x"
    name = f"{slug}-phase{phase_label}-{trigger}.json"
    payload = {
        "version": "1.0",
        "generated_at": now.isoformat(),
        "trigger": trigger,
        "meta": meta or {},
        "report": report,
    }
    try:
        atomic_write_text(Path(project_root) / QUALITY_REPORTS_DIR / name, json.dumps(payload, indent=2))
    except OSError as e:
        logger.warning(f"Could not save quality report {name}: {e}")
        return ""
    return f"res://{QUALITY_REPORTS_DIR}/{name}"


def score_poc_quality(session: ToolSession, args: ScorePocQualityArgs) -> Dict[str, Any]:
    iteration = max(1, args.iteration_count)
    max_iterations = max(1, args.max_iterations or POC_DEFAULT_MAX_ITERATIONS)
    benchmark_id = args.benchmark_id or "poc_prompt_unknown"
    now = datetime.now(timezone.utc)
    run_id = args.run_id or f"{benchmark_id}-{int(now.timestamp() * 1000)}"
    moments = [m for m in args.signature_moments if m.strip()]

    hard_gates = normalize_checklist(args.hard_gates, list(POC_HARD_GATE_HINTS))
    visual_checks = normalize_checklist(args.anti_tutorial_visual_checks, list(POC_VISUAL_CHECK_HINTS))

    scores, reason = normalize_scores(args.scores)
    if scores is None:
        session.dock_log(f"[MCP] PoC scoring rejected: {reason}")
        return {"ok": False, "rejected": True, "reason": reason}

    total = weighted_score(scores)
    hard_failures = checklist_failures(hard_gates)
    visual_failures = checklist_failures(visual_checks)
    values = list(scores.values())
    category_min_pass = all(value >= 3 for value in values)
    two_at_least_four = sum(1 for value in values if value >= 4) >= 2

    gates_passed = (
        not hard_failures
        and not visual_failures
        and total >= POC_PASS_SCORE
        and category_min_pass
        and two_at_least_four
        and scores["visual_polish_cohesion"] >= 4
    )
    very_good = (
        gates_passed
        and total >= POC_VERY_GOOD_SCORE
        and scores["controls_game_feel"] >= 4
        and scores["progression_variety"] >= 4
        and len(moments) >= 2
    )
    escalation_required = not gates_passed and iteration >= max_iterations
    if gates_passed:
        verdict = "go"
    elif escalation_required:
        verdict = "no_go"
    else:
        verdict = "needs_iteration"

    report = {
        "ok": gates_passed,
        "phase_number": 6,
        "phase_name": "Final QA (PoC Rubric)",
        "schema_version": REPORT_SCHEMA_VERSION,
        "benchmark_id": benchmark_id,
        "run_id": run_id,
        "timestamp_utc": now.isoformat(),
        "max_iterations": max_iterations,
        "iteration_count": iteration,
        "hard_gates": hard_gates,
        "anti_tutorial_visual_checks": visual_checks,
        "hard_gate_failures": hard_failures,
        "anti_tutorial_failures": visual_failures,
        "scores": scores,
        "weighted_total_score": total,
        "category_min_pass": category_min_pass,
        "two_categories_at_least_four": two_at_least_four,
        "signature_moments": moments,
        "very_good_status": very_good,
        "verdict": verdict,
        "escalation_required": escalation_required,
        "gates_passed": gates_passed,
        "next_actions": next_actions(hard_failures, visual_failures, scores, escalation_required),
        "notes": args.notes,
    }

    report_path = persist_report(session.project_root, report, "poc_rubric_score", {
        "benchmark_id": benchmark_id,
        "run_id": run_id,
        "iteration_count": iteration,
        "max_iterations": max_iterations,
    })
    if report_path:
        report["quality_report_path"] = report_path
        session.dock_log(f"[MCP] PoC quality report saved: {report_path}")

    session.dock_log(
        f"[MCP] PoC quality verdict={verdict} score={total} iteration={iteration}/{max_iterations}"
    )
    return report


def _report_phase(name: str) -> Optional[int]:
    marker = name.rpartition("-phase")[2].split("-", 1)[0]
    return int(marker) if marker.isdigit() else None


def get_latest_quality_report(session: ToolSession, args: LatestQualityReportArgs) -> Dict[str, Any]:
    limit = max(1, min(MAX_QUALITY_REPORTS, args.limit))
    phase = args.phase_number
    session.dock_log(
        "[MCP] Reading quality reports" + ("" if phase is None else f" for Phase {phase}") + "..."
    )

    reports_dir = session.project_root / QUALITY_REPORTS_DIR
    try:
        names = sorted((p.name for p in reports_dir.glob("*.json") if p.is_file()), reverse=True)
    except OSError:
        names = []
    if phase is not None:
        names = [name for name in names if _report_phase(name) == phase]

    if not names:
        session.dock_log("[MCP] No matching quality reports found")
        return {"found": False, "total": 0, "reports": [], "phase_number": phase}

    reports = []
    for name in names[:limit]:
        res_path = f"res://{QUALITY_REPORTS_DIR}/{name}"
        try:
            data = json.loads((reports_dir / name).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            reports.append({"path": res_path, "error": f"Failed to read report: {e}"})
        else:
            reports.append({"path": res_path, "data": data})

    session.dock_log(f"[MCP] Loaded {len(reports)} quality report{'' if len(reports) == 1 else 's'}")
    return {
        "found": True,
        "total": len(names),
        "returned": len(reports),
        "phase_number": phase,
        "reports": reports,
    }


def count_pass_stubs(content: str) -> int:
    """Count functions whose first statement is a bare `pass`."""
    lines = content.split("\n")
    count = 0
    for i, line in enumerate(lines):
        if not FUNC_PATTERN.match(line):
            continue
        for following in lines[i + 1:]:
            stripped = following.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if PASS_PATTERN.match(stripped):
                count += 1
            break
    return count


def keyword_hits(text: str, keywords: List[str]) -> List[str]:
    return [keyword for keyword in keywords if keyword.lower() in text]


def category_hits(text: str, categories: Dict[str, List[str]]) -> List[str]:
    return [
        category for category, patterns in categories.items()
        if any(pattern.lower() in text for pattern in patterns)
    ]


def _read_texts(project_root: Path, res_paths: List[str]) -> List[str]:
    contents = []
    for res_path in res_paths:
        try:
            contents.append(res_to_absolute(project_root, res_path).read_text(encoding="utf-8", errors="replace"))
        except OSError as e:
            logger.debug(f"Skipping unreadable file {res_path}: {e}")
    return contents


def resolve_main_scene(project_root: Path, main_scene: str, scenes: List[str]) -> str:
    """
    Resolve the configured main scene to an existing res:// path.

    uid:// references are matched against the uid declared in each scene
    header. Returns "" when nothing matches.
    """
    if not main_scene:
        return ""
    if main_scene.startswith("uid://"):
        marker = f'uid="{main_scene}"'
        for scene, content in zip(scenes, _read_texts(project_root, scenes)):
            if marker in content:
                return scene
        return ""
    return main_scene if res_to_absolute(project_root, main_scene).is_file() else ""


def collect_quality_signals(project_root: Path) -> Dict[str, Any]:
    """Statically scan the project for visual polish and game flow markers."""
    root = Path(project_root)
    files = scan_project_files(root, QUALITY_SIGNAL_EXTENSIONS)
    settings = read_project_settings(root)

    scripts = [f for f in files if f.endswith(".gd")]
    scenes = [f for f in files if f.endswith(".tscn")]
    images = [f for f in files if f.lower().endswith(IMAGE_EXTENSIONS)]
    audio = [f for f in files if f.lower().endswith(AUDIO_EXTENSIONS)]

    script_contents = _read_texts(root, scripts)
    scene_contents = _read_texts(root, scenes)
    text = "\n".join(script_contents + scene_contents).lower()

    main_scene = settings.get("application/run/main_scene", "")
    resolved = resolve_main_scene(root, main_scene, scenes)
    feedback = category_hits(text, FEEDBACK_CATEGORIES)
    flow = category_hits(text, FLOW_CATEGORIES)

    return {
        "script_count": len(scripts),
        "scene_count": len(scenes),
        "image_asset_count": len(images),
        "audio_asset_count": len(audio),
        "main_scene": main_scene,
        "resolved_main_scene_path": resolved,
        "main_scene_exists": bool(resolved),
        "ui_style_hits": keyword_hits(text, UI_STYLE_MARKERS),
        "polish_fx_hits": keyword_hits(text, POLISH_FX_MARKERS),
        "depth_layer_hits": keyword_hits(text, DEPTH_LAYER_MARKERS),
        "feedback_categories": feedback,
        "feedback_category_count": len(feedback),
        "flow_categories": flow,
        "flow_category_count": len(flow),
        "pass_stub_count": sum(count_pass_stubs(content) for content in script_contents),
    }


def evaluate_phase_quality_gates(
    project_root: Path,
    phase_number: int,
    phase_name: str = "",
    reported_gates: Optional[Dict[str, bool]] = None,
) -> Dict[str, Any]:
    """
    Compute the objective quality gates for a phase.

    Phase 5 and later check visual polish proxies; phase 6 adds game flow
    and readiness checks. Earlier phases have no computed gates and always
    pass.

    Returns:
        Evaluation with computed, merged and failed gates, per-gate details
        and the raw quality metrics
    """
    signals = collect_quality_signals(project_root)
    details = {}

    def add_gate(name, passed, expected, actual, hint):
        details[name] = {"passed": bool(passed), "expected": expected, "actual": actual, "hint": hint}

    def hits(key):
        return {"count": len(signals[key]), "hits": signals[key]}

    if phase_number >= QUALITY_GATE_MIN_PHASE:
        add_gate(
            "auto_visual_assets_coverage",
            signals["image_asset_count"] >= 6,
            ">= 6 image assets used for gameplay/UI",
            signals["image_asset_count"],
            "Generate or import more coherent assets (godot_generate_asset for each object type).",
        )
        add_gate(
            "auto_ui_styling_signals",
            len(signals["ui_style_hits"]) >= 2,
            ">= 2 UI styling markers",
            hits("ui_style_hits"),
            "Style menus/HUD with theme overrides, StyleBoxFlat, or custom theme APIs.",
        )
        add_gate(
            "auto_polish_fx_signals",
            len(signals["polish_fx_hits"]) >= 3,
            ">= 3 polish/FX markers",
            hits("polish_fx_hits"),
            "Add screen shake, particles, shaders, tweens, trails, or hit/death FX.",
        )
        add_gate(
            "auto_visual_depth_layering",
            len(signals["depth_layer_hits"]) >= 2,
            ">= 2 depth/layering markers",
            hits("depth_layer_hits"),
            "Add layered background/foreground composition (e.g. parallax, vignette, gradient layers).",
        )
        add_gate(
            "auto_feedback_event_coverage",
            signals["feedback_category_count"] >= 3,
            ">= 3 feedback event categories",
            {"count": signals["feedback_category_count"], "categories": signals["feedback_categories"]},
            "Ensure hit/damage, death, pickup/score, and ability events have explicit feedback hooks.",
        )

    if phase_number >= FINAL_PHASE:
        add_gate(
            "auto_main_scene_configured",
            signals["main_scene_exists"],
            "project.godot has a valid existing main scene",
            {
                "main_scene": signals["main_scene"],
                "resolved_main_scene_path": signals["resolved_main_scene_path"],
                "exists": signals["main_scene_exists"],
            },
            "Set application/run/main_scene to a valid .tscn path.",
        )
        add_gate(
            "auto_flow_state_signals",
            signals["flow_category_count"] >= 3,
            ">= 3 flow state categories (menu, game_over, retry/restart, pause)",
            {"count": signals["flow_category_count"], "categories": signals["flow_categories"]},
            "Wire complete menu -> play -> game over -> retry/menu flow with explicit handlers.",
        )
        add_gate(
            "auto_scene_coverage",
            signals["scene_count"] >= 2,
            ">= 2 scenes (gameplay + menu/flow scene)",
            signals["scene_count"],
            "Add dedicated flow scenes (menu/gameplay/game-over) instead of a single monolithic scene.",
        )
        add_gate(
            "auto_no_stub_pass_methods",
            signals["pass_stub_count"] == 0,
            "0 function stubs that immediately use 'pass'",
            signals["pass_stub_count"],
            "Replace pass stubs with real implementation or explicit temporary behavior.",
        )

    computed = {name: detail["passed"] for name, detail in details.items()}
    failed = [name for name, detail in details.items() if not detail["passed"]]
    metrics = {
        key: value for key, value in signals.items()
        if key not in ("ui_style_hits", "polish_fx_hits", "depth_layer_hits",
                       "feedback_categories", "flow_categories")
    }
    for key in ("ui_style_hits", "polish_fx_hits", "depth_layer_hits"):
        metrics[key] = len(signals[key])

    return {
        "ok": not failed,
        "phase_number": phase_number,
        "phase_name": phase_name or PHASE_NAMES.get(phase_number, f"Phase {phase_number}"),
        "gates_passed": not failed,
        "failed_quality_gates": failed,
        "computed_quality_gates": computed,
        "merged_quality_gates": {**(reported_gates or {}), **computed},
        "gate_details": details,
        "quality_metrics": metrics,
    }


def evaluate_quality_gates(session: ToolSession, args: EvaluateQualityGatesArgs) -> Dict[str, Any]:
    suffix = f" ({args.phase_name})" if args.phase_name else ""
    session.dock_log(f"[MCP] Evaluating objective quality gates for Phase {args.phase_number}{suffix}...")

    evaluation = evaluate_phase_quality_gates(
        session.project_root, args.phase_number, args.phase_name, args.quality_gates
    )
    report_path = persist_report(session.project_root, evaluation, "manual_evaluation", {
        "phase_name": evaluation["phase_name"],
    })
    if report_path:
        evaluation["quality_report_path"] = report_path
        session.dock_log(f"[MCP] Quality report saved: {report_path}")

    failed = evaluation["failed_quality_gates"]
    if failed:
        session.dock_log(
            f"[MCP] Quality gates failed: {len(failed)} gate(s). "
            "Use failed_quality_gates and gate_details to fix before completion."
        )
    else:
        session.dock_log(f"[MCP] Quality gates passed for Phase {args.phase_number}.")
    return evaluation
