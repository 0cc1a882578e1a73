"""Stall detection for unsupervised agent sessions.

Each dispatched tool has a fixed effect. Progress-making calls reset the
streak, the passive dock log is ignored, every other call extends it. Once
the streak reaches the active limit the guard emits a directive; it never
blocks a call.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from godotpilot.constants import (
    STALL_HARD_MARGIN,
    STALL_INITIAL_LIMIT,
    STALL_STEADY_LIMIT,
)
from godotpilot.state import SessionGuardState


class ToolEffect(str, Enum):
    PROGRESS = "progress"
    PASSIVE = "passive"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class StallStatus:
    streak: int
    limit: int
    last_progress_tool: Optional[str]
    last_progress_call: Optional[int]

    @property
    def triggered(self) -> bool:
        return self.streak >= self.limit

    @property
    def escalated(self) -> bool:
        return self.streak >= self.limit + STALL_HARD_MARGIN

    @property
    def directive(self) -> Optional[str]:
        if self.escalated:
            return (
                f"STOP PLANNING. {self.streak} consecutive calls without progress "
                f"(limit {self.limit}). Your next call MUST change something "
                "(write a file, mutate the scene, run the game, save a checkpoint "
                "or record a score), or call godot_log('BLOCKED: <reason>') naming "
                "the exact blocker and stop."
            )
        if self.triggered:
            return (
                f"Stall guard: {self.streak} consecutive calls without progress "
                f"(limit {self.limit}). Make your next action a progress-making "
                "call, or report that you are blocked and why via godot_log()."
            )
        return None

    def to_payload(self) -> Dict[str, Any]:
        return {
            "triggered": self.triggered,
            "escalated": self.escalated,
            "streak": self.streak,
            "limit": self.limit,
            "last_progress_tool": self.last_progress_tool,
            "last_progress_call": self.last_progress_call,
            "directive": self.directive,
        }


class StallGuard:
    """Classifies dispatched calls and tracks the non-progress streak."""

    def __init__(
        self,
        state: SessionGuardState,
        initial_limit: int = STALL_INITIAL_LIMIT,
        steady_limit: int = STALL_STEADY_LIMIT,
    ):
        self.state = state
        self.initial_limit = initial_limit
        self.steady_limit = steady_limit

    @property
    def limit(self) -> int:
        if self.state.saw_mutating_progress:
            return self.steady_limit
        return self.initial_limit

    def record(self, tool_name: str, effect: ToolEffect) -> None:
        """Update the counters after a successful call."""
        state = self.state
        state.total_calls += 1

        if effect is ToolEffect.PROGRESS:
            state.non_mutating_streak = 0
            state.saw_mutating_progress = True
            state.last_mutating_tool = tool_name
            state.last_mutating_call_index = state.total_calls
        elif effect is ToolEffect.NEUTRAL:
            state.non_mutating_streak += 1

    def status(self) -> StallStatus:
        return StallStatus(
            streak=self.state.non_mutating_streak,
            limit=self.limit,
            last_progress_tool=self.state.last_mutating_tool,
            last_progress_call=self.state.last_mutating_call_index,
        )
