"""Stop hook that keeps the agent host running while a build is in progress.

The host invokes the hook with a JSON object on stdin:

    {"stop_hook_active": bool, "cwd": str}

Printing {"decision": "block", "reason": ...} keeps the agent working; no
output lets it stop.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from godotpilot.checkpoint import BuildLock
from godotpilot.constants import BUILD_LOCK_FILE
from godotpilot.logger import get_logger

logger = get_logger()


@dataclass(frozen=True)
class StopDecision:
    block: bool
    reason: Optional[str] = None

    def to_payload(self) -> Optional[Dict[str, Any]]:
        if not self.block:
            return None
        return {"decision": "block", "reason": self.reason}


def evaluate_stop(stop_hook_active: bool, cwd: Union[str, Path]) -> StopDecision:
    """
    Decide whether the agent may stop.

    Args:
        stop_hook_active: True when the host is retrying after an earlier block
        cwd: Project directory the agent is working in

    Returns:
        StopDecision allowing or blocking termination
    """
    # A retry is always allowed, otherwise the host loops forever.
    if stop_hook_active:
        return StopDecision(block=False)

    lock = BuildLock(cwd)
    phase = lock.label()
    if phase is None:
        return StopDecision(block=False)

    return StopDecision(
        block=True,
        reason=(
            f"Game build in progress ({phase}). Complete all build phases before "
            f"stopping. If the user wants to cancel, remove {BUILD_LOCK_FILE} first."
        ),
    )


def run_stop_hook(raw_input: str) -> Optional[Dict[str, Any]]:
    """Parse hook input and return the payload to print, if any."""
    try:
        data = json.loads(raw_input) if raw_input.strip() else {}
    except json.JSONDecodeError as e:
        logger.warning(f"Stop hook received invalid JSON, allowing stop: {e}")
        return None
    if not isinstance(data, dict):
        data = {}

    decision = evaluate_stop(
        stop_hook_active=data.get("stop_hook_active") is True,
        cwd=data.get("cwd") or ".",
    )
    return decision.to_payload()
