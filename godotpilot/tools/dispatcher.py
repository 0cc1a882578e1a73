"""Routes one tool call to its handler and wraps the outcome."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from godotpilot.exceptions import (
    InvalidArgumentsError,
    ToolError,
    ToolExecutionError,
    UnknownToolError,
)
from godotpilot.logger import get_logger
from godotpilot.session import ToolSession
from godotpilot.stall_guard import StallGuard
from godotpilot.tools.augment import ResponseAugmenter
from godotpilot.tools.registry import TOOL_SPECS, ToolSpec
from godotpilot.tools.schemas import ToolArgs

logger = get_logger()


@dataclass(frozen=True)
class ToolCall:
    name: str
    arguments: Mapping[str, Any] = field(default_factory=dict)


@dataclass
class ToolResponse:
    """What goes back to the agent: text content plus an error flag."""

    content: List[Dict[str, str]]
    is_error: bool = False

    @classmethod
    def success(cls, result: Dict[str, Any]) -> "ToolResponse":
        return cls(content=[{"type": "text", "text": json.dumps(result, indent=2, default=str)}])

    @classmethod
    def failure(cls, message: str) -> "ToolResponse":
        return cls(content=[{"type": "text", "text": message}], is_error=True)

    @property
    def text(self) -> str:
        return "\n".join(item["text"] for item in self.content)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"content": self.content}
        if self.is_error:
            payload["isError"] = True
        return payload


class ToolDispatcher:
    """
    Validates, executes and augments tool calls for one session.

    Calls are handled one at a time. The stall guard is only updated after
    a handler succeeds.
    """

    def __init__(self, session: ToolSession, specs: Optional[Dict[str, ToolSpec]] = None):
        self.session = session
        self.specs = specs if specs is not None else TOOL_SPECS
        self.guard = StallGuard(
            session.guard_state,
            initial_limit=session.settings.stall_initial_limit,
            steady_limit=session.settings.stall_steady_limit,
        )
        self.augmenter = ResponseAugmenter(session.bridge, self.guard)

    def resolve(self, name: str) -> ToolSpec:
        spec = self.specs.get(name)
        if spec is None:
            raise UnknownToolError(name)
        return spec

    def validate(self, spec: ToolSpec, arguments: Optional[Mapping[str, Any]]) -> ToolArgs:
        try:
            return spec.args_model.model_validate(dict(arguments or {}))
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc']) or 'arguments'}: {err['msg']}"
                for err in e.errors()
            )
            raise InvalidArgumentsError(spec.name.value, problems)

    def execute(self, call: ToolCall) -> Dict[str, Any]:
        """
        Run one call.

        Returns:
            The augmented result

        Raises:
            UnknownToolError: If the tool is not registered
            InvalidArgumentsError: If the arguments fail validation
            ToolExecutionError: If the handler raises
        """
        spec = self.resolve(call.name)
        args = self.validate(spec, call.arguments)

        logger.debug(f"Dispatching {call.name}")
        try:
            result = spec.handler(self.session, args)
        except Exception as e:
            logger.exception(f"Tool {call.name} failed")
            raise ToolExecutionError(call.name, str(e)) from e

        self.guard.record(call.name, spec.effect)
        return self.augmenter.augment(spec, result)

    def handle(self, call: ToolCall) -> ToolResponse:
        try:
            return ToolResponse.success(self.execute(call))
        except ToolError as e:
            logger.warning(str(e))
            return ToolResponse.failure(f"Error: {e}")
