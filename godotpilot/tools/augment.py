"""Directives attached to successful tool results."""

from typing import Any, Dict

from godotpilot.bridge import BridgeClient
from godotpilot.constants import DOCK_REMINDER
from godotpilot.logger import get_logger
from godotpilot.stall_guard import StallGuard
from godotpilot.tools.editor import errors_directive
from godotpilot.tools.registry import ToolSpec

logger = get_logger()


class ResponseAugmenter:
    """
    Adds the live error count, the stall directive and the dock reminder.

    Augmentation never changes whether a call succeeded. It always works on
    a copy of the handler's result.
    """

    def __init__(self, bridge: BridgeClient, guard: StallGuard):
        self.bridge = bridge
        self.guard = guard

    def augment(self, spec: ToolSpec, result: Dict[str, Any]) -> Dict[str, Any]:
        augmented = dict(result)

        if spec.check_errors:
            errors = self.bridge.attempt(self.bridge.get_error_report)
            if errors.ok:
                count = errors.payload.error_count
                augmented["_error_count"] = count
                if count > 0:
                    augmented["_action_required"] = errors_directive(count)
            else:
                logger.debug(f"Error count unavailable for {spec.name.value}: {errors.error}")

        status = self.guard.status()
        if status.triggered:
            augmented["_stall_guard"] = status.to_payload()

        if spec.remind:
            augmented["_dock_reminder"] = DOCK_REMINDER

        return augmented
