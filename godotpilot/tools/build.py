"""Build bookkeeping tools: dock log, checkpoints and phase transitions."""

from typing import Any, Dict

from pydantic import ValidationError

from godotpilot.bridge import ErrorReport
from godotpilot.constants import FINAL_PHASE, PHASE_ERROR_SUMMARY_LIMIT, QUALITY_GATE_MIN_PHASE
from godotpilot.exceptions import CheckpointCorruptError
from godotpilot.logger import get_logger
from godotpilot.session import ToolSession
from godotpilot.state import BuildState, PhaseStatus
from godotpilot.tools.quality import evaluate_phase_quality_gates, persist_report
from godotpilot.tools.schemas import LogArgs, NoArgs, SaveBuildStateArgs, UpdatePhaseArgs

logger = get_logger()


def log_message(session: ToolSession, args: LogArgs) -> Dict[str, Any]:
    session.dock_log(args.message)
    return {"ok": True, "message": args.message}


def save_build_state(session: ToolSession, args: SaveBuildStateArgs) -> Dict[str, Any]:
    session.dock_log("[MCP] Saving build checkpoint...")
    path = session.store.save(args.state)
    session.dock_log("[MCP] Build checkpoint saved")
    return {"ok": True, "path": str(path)}


def get_build_state(session: ToolSession, args: NoArgs) -> Dict[str, Any]:
    session.dock_log("[MCP] Checking for build checkpoint...")
    try:
        state = session.store.get()
    except CheckpointCorruptError as e:
        session.dock_log(f"[MCP] Checkpoint file corrupted: {e.reason}")
        return {"found": False, "state": None, "error": str(e)}

    if state is None:
        session.dock_log("[MCP] No build checkpoint found")
        return {"found": False, "state": None}

    result = {"found": True, "state": state}
    try:
        summary = BuildState.model_validate(state).summary()
    except ValidationError as e:
        logger.debug(f"Checkpoint does not match the build state schema: {e}")
    else:
        result["resume"] = summary
        session.dock_log(
            f"[MCP] Found checkpoint: {summary['game_name'] or 'unknown'} - "
            f"Phase {summary['current_phase'] if summary['current_phase'] is not None else '?'}"
        )
    return result


def _push_in_progress(session: ToolSession, args: UpdatePhaseArgs, quality_gates: Dict[str, bool]):
    # Keep the dock showing the phase as still being worked on.
    session.best_effort(
        "phase push",
        session.bridge.update_phase,
        args.phase_number,
        args.phase_name,
        PhaseStatus.IN_PROGRESS.value,
        quality_gates,
    )


def _rejection(args: UpdatePhaseArgs, reason: str, **extra) -> Dict[str, Any]:
    result = {
        "ok": False,
        "rejected": True,
        "phase_number": args.phase_number,
        "phase_name": args.phase_name,
        "requested_status": PhaseStatus.COMPLETED.value,
        "actual_status": PhaseStatus.IN_PROGRESS.value,
        "reason": reason,
    }
    result.update(extra)
    return result


def _reject_for_errors(session: ToolSession, args: UpdatePhaseArgs, report: ErrorReport) -> Dict[str, Any]:
    count = report.error_count
    session.dock_log(
        f"[MCP] PHASE COMPLETION REJECTED - {count} errors exist. "
        f"Fix ALL errors before completing Phase {args.phase_number}."
    )
    _push_in_progress(session, args, args.quality_gates)
    return _rejection(
        args,
        f"PHASE COMPLETION BLOCKED: {count} compilation errors found. "
        "Call godot_get_errors() to see the full error details, fix every error, "
        f'then call godot_update_phase({args.phase_number}, "{args.phase_name}", "completed") again. '
        'The phase remains "in_progress" until there are zero errors.',
        error_count=count,
        error_files=report.error_files(PHASE_ERROR_SUMMARY_LIMIT),
    )


def _reject_for_quality(
    session: ToolSession,
    args: UpdatePhaseArgs,
    evaluation: Dict[str, Any],
    report_path: str,
) -> Dict[str, Any]:
    failed = evaluation["failed_quality_gates"]
    session.dock_log(f"[MCP] PHASE COMPLETION REJECTED - {len(failed)} quality gates failed.")
    _push_in_progress(session, args, evaluation["merged_quality_gates"])
    return _rejection(
        args,
        f"PHASE COMPLETION BLOCKED: {len(failed)} objective quality gates failed. "
        f"Call godot_evaluate_quality_gates({args.phase_number}) to inspect gate_details, "
        "fix the failed items, then retry completion.",
        failed_quality_gates=failed,
        gate_details=evaluation["gate_details"],
        quality_metrics=evaluation["quality_metrics"],
        quality_report_path=report_path,
    )


def update_phase(session: ToolSession, args: UpdatePhaseArgs) -> Dict[str, Any]:
    """
    Report a phase transition.

    Completion is refused while the editor reports script errors; when the
    editor is unreachable the error check is skipped. Completing phase 5 or
    later also requires the objective quality gates to pass. Starting a
    phase writes the build lock; completing the final phase removes the
    lock and checkpoint.
    """
    status = args.status
    quality_gates = dict(args.quality_gates)
    report_path = ""
    build_finished = False

    if status is PhaseStatus.COMPLETED:
        session.dock_log(
            f"[MCP] Phase {args.phase_number}: {args.phase_name} - validating before completion..."
        )
        errors = session.best_effort("phase error check", session.bridge.get_error_report)
        if errors.ok:
            report = errors.payload
            if report.error_count > 0:
                return _reject_for_errors(session, args, report)

        if args.phase_number >= QUALITY_GATE_MIN_PHASE:
            evaluation = evaluate_phase_quality_gates(
                session.project_root, args.phase_number, args.phase_name, quality_gates
            )
            report_path = persist_report(session.project_root, evaluation, "phase_completion_check", {
                "phase_name": evaluation["phase_name"],
                "requested_status": status.value,
            })
            if report_path:
                session.dock_log(f"[MCP] Quality report saved: {report_path}")
            quality_gates = evaluation["merged_quality_gates"]
            if not evaluation["gates_passed"]:
                return _reject_for_quality(session, args, evaluation, report_path)

        session.dock_log(f"[MCP] Phase {args.phase_number} validation passed. Marking completed.")
        build_finished = args.phase_number >= FINAL_PHASE

    session.dock_log(f"[MCP] Phase {args.phase_number}: {args.phase_name} - {status.value}")
    session.best_effort(
        "phase push",
        session.bridge.update_phase,
        args.phase_number,
        args.phase_name,
        status.value,
        quality_gates,
    )

    if status is PhaseStatus.IN_PROGRESS:
        session.lock.acquire(f"Phase {args.phase_number}: {args.phase_name}")
    elif build_finished:
        session.lock.release()
        session.store.clear()
        session.dock_log("[MCP] Build complete - checkpoint and build lock cleared")

    return {
        "ok": True,
        "phase_number": args.phase_number,
        "phase_name": args.phase_name,
        "status": status.value,
        "quality_gates": quality_gates,
        "quality_report_path": report_path,
        "build_in_progress": session.lock.is_active(),
    }
