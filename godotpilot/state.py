"""Session and build state records."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass
class SessionGuardState:
    """Per-session counters read and written by the stall guard."""

    total_calls: int = 0
    non_mutating_streak: int = 0
    saw_mutating_progress: bool = False
    last_mutating_tool: Optional[str] = None
    last_mutating_call_index: Optional[int] = None


class PhaseStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class PhaseState(BaseModel):
    """One build phase as reported by the agent."""

    model_config = ConfigDict(extra="allow")

    number: int
    name: str = ""
    status: PhaseStatus = PhaseStatus.PENDING
    gates: Dict[str, bool] = Field(default_factory=dict)


class ErrorHistoryEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    message: str = ""
    file: Optional[str] = None
    resolved: bool = False


class BuildState(BaseModel):
    """
    Shape of the build checkpoint.

    The checkpoint store persists the agent's dict verbatim; this model is
    only used to read a summary out of it, so every field is optional and
    unknown keys are kept.
    """

    model_config = ConfigDict(extra="allow")

    version: Optional[str] = None
    build_id: Optional[str] = None
    timestamp: Optional[str] = None
    game_name: Optional[str] = None
    genre: Optional[str] = None
    current_phase: Optional[PhaseState] = None
    completed_phases: List[PhaseState] = Field(default_factory=list)
    files_written: List[str] = Field(default_factory=list)
    error_history: List[ErrorHistoryEntry] = Field(default_factory=list)
    test_runs: List[Dict[str, Any]] = Field(default_factory=list)
    prd_path: Optional[str] = None
    next_steps: List[str] = Field(default_factory=list)

    def unresolved_errors(self) -> List[ErrorHistoryEntry]:
        return [entry for entry in self.error_history if not entry.resolved]

    def summary(self) -> Dict[str, Any]:
        """Compact resume hint for the agent."""
        current = self.current_phase
        return {
            "game_name": self.game_name,
            "current_phase": current.number if current else None,
            "current_phase_name": current.name if current else None,
            "completed_phase_numbers": [phase.number for phase in self.completed_phases],
            "files_written": len(self.files_written),
            "unresolved_errors": len(self.unresolved_errors()),
            "next_steps": self.next_steps,
        }
