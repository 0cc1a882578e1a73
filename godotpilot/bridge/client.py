"""HTTP client for the Godot editor plugin's bridge.

Every call carries a hard timeout. Connection failures and timeouts raise
BridgeUnavailableError; error statuses and non-JSON bodies raise
BridgeResponseError.
"""

from typing import Any, Callable, Dict, Optional

import requests
from pydantic import ValidationError

from godotpilot.bridge.models import BridgeResult, ErrorReport
from godotpilot.constants import (
    BRIDGE_DEFAULT_HOST,
    BRIDGE_DEFAULT_PORT,
    BRIDGE_TIMEOUT,
    BRIDGE_DETAILED_TIMEOUT,
)
from godotpilot.exceptions import (
    BridgeError,
    BridgeResponseError,
    BridgeTimeoutError,
    BridgeUnavailableError,
)
from godotpilot.logger import get_logger

logger = get_logger()


class BridgeClient:
    """One method per remote capability of the editor bridge."""

    def __init__(
        self,
        host: str = BRIDGE_DEFAULT_HOST,
        port: int = BRIDGE_DEFAULT_PORT,
        timeout: float = BRIDGE_TIMEOUT,
        detailed_timeout: float = BRIDGE_DETAILED_TIMEOUT,
    ):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.detailed_timeout = detailed_timeout

    @classmethod
    def from_settings(cls, settings) -> "BridgeClient":
        return cls(
            host=settings.bridge_host,
            port=settings.bridge_port,
            timeout=settings.bridge_timeout,
            detailed_timeout=settings.bridge_detailed_timeout,
        )

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def _request(
        self,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Issue one bridge request and return the decoded JSON payload.

        Args:
            method: HTTP verb
            path: Bridge path, e.g. /status
            body: Optional JSON body
            params: Optional query parameters
            timeout: Override of the per-call timeout in seconds

        Returns:
            Parsed JSON object

        Raises:
            BridgeUnavailableError: Editor unreachable or timed out
            BridgeResponseError: Error status or non-JSON payload
        """
        timeout = timeout or self.timeout
        logger.debug(f"bridge {method} {path}")
        try:
            response = requests.request(
                method,
                self.base_url + path,
                json=body,
                params=params,
                timeout=timeout,
            )
        except requests.exceptions.Timeout:
            raise BridgeTimeoutError(self.host, self.port, timeout)
        except requests.exceptions.RequestException as e:
            raise BridgeUnavailableError(self.host, self.port, str(e))

        try:
            payload = response.json()
        except ValueError:
            raise BridgeResponseError(method, path, "returned non-JSON response")

        if not response.ok:
            detail = None
            if isinstance(payload, dict):
                detail = payload.get("error") or payload.get("message")
            raise BridgeResponseError(
                method, path, detail or f"HTTP {response.status_code} {response.reason}"
            )
        if not isinstance(payload, dict):
            raise BridgeResponseError(method, path, "expected a JSON object")
        return payload

    def attempt(self, call: Callable[..., Any], *args, **kwargs) -> BridgeResult:
        """Run a bridge call, capturing BridgeError instead of raising it."""
        try:
            return BridgeResult(payload=call(*args, **kwargs))
        except BridgeError as e:
            return BridgeResult(error=e)

    def is_connected(self) -> bool:
        return self.attempt(self.get_status).ok

    def get_status(self) -> Dict[str, Any]:
        return self._request("GET", "/status")

    def get_errors(self) -> Dict[str, Any]:
        return self._request("GET", "/errors")

    def get_error_report(self) -> ErrorReport:
        """
        Fetch /errors and parse it.

        Raises:
            BridgeResponseError: Payload does not have the error report shape
        """
        return parse_error_report(self.get_errors(), "/errors")

    def get_detailed_errors(self) -> Dict[str, Any]:
        # Headless validation on the editor side; bounded separately so a slow
        # check never reads as a dead editor.
        return self._request("GET", "/detailed_errors", timeout=self.detailed_timeout)

    def run_scene(self, scene_path: str = "") -> Dict[str, Any]:
        return self._request("POST", "/run", {"scene_path": scene_path})

    def stop_scene(self) -> Dict[str, Any]:
        return self._request("POST", "/stop")

    def reload_filesystem(self) -> Dict[str, Any]:
        return self._request("POST", "/reload")

    def send_log(self, message: str) -> Dict[str, Any]:
        return self._request("POST", "/log", {"message": message})

    def update_phase(
        self,
        phase_number: int,
        phase_name: str,
        status: str,
        quality_gates: Optional[Dict[str, bool]] = None,
    ) -> Dict[str, Any]:
        return self._request("POST", "/phase", {
            "phase_number": phase_number,
            "phase_name": phase_name,
            "status": status,
            "quality_gates": quality_gates or {},
        })

    def get_scene_tree(self, max_depth: int) -> Dict[str, Any]:
        return self._request("GET", "/scene_tree", params={"max_depth": max_depth})

    def get_class_info(self, class_name: str, include_inherited: bool = False) -> Dict[str, Any]:
        return self._request("GET", "/class_info", params={
            "class_name": class_name,
            "inherited": "true" if include_inherited else "false",
        })

    def add_node(
        self,
        parent_path: str,
        node_name: str,
        node_type: str,
        properties: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        return self._request("POST", "/add_node", {
            "parent_path": parent_path,
            "node_name": node_name,
            "node_type": node_type,
            "properties": properties or {},
        })

    def update_node(self, node_path: str, properties: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._request("POST", "/update_node", {
            "node_path": node_path,
            "properties": properties or {},
        })

    def delete_node(self, node_path: str) -> Dict[str, Any]:
        return self._request("POST", "/delete_node", {"node_path": node_path})

    def get_editor_screenshot(self, viewport: str = "2d") -> Dict[str, Any]:
        return self._request("GET", "/screenshot", params={"viewport": viewport})

    def get_open_scripts(self) -> Dict[str, Any]:
        return self._request("GET", "/open_scripts")


def parse_error_report(payload: Dict[str, Any], path: str = "/errors") -> ErrorReport:
    """Parse an error payload, reporting a malformed one as a bridge response error."""
    try:
        return ErrorReport.from_payload(payload)
    except (TypeError, AttributeError, ValidationError) as e:
        raise BridgeResponseError("GET", path, f"malformed error report: {e}")
