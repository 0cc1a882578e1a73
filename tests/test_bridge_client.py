"""Unit tests for the editor bridge HTTP client."""

from unittest.mock import Mock, patch

import pytest
import requests

from godotpilot.bridge import BridgeClient, ErrorReport
from godotpilot.exceptions import (
    BridgeResponseError,
    BridgeTimeoutError,
    BridgeUnavailableError,
)


def make_response(payload=None, status=200, json_error=False):
    response = Mock()
    response.status_code = status
    response.ok = status < 400
    response.reason = "OK" if status < 400 else "Internal Server Error"
    if json_error:
        response.json.side_effect = ValueError("No JSON")
    else:
        response.json.return_value = payload
    return response


class TestBridgeRequests:
    """Test request construction."""

    @patch('godotpilot.bridge.client.requests.request')
    def test_status_request(self, mock_request):
        """Test GET /status against the default address."""
        mock_request.return_value = make_response({"connected": True})
        result = BridgeClient().get_status()
        assert result == {"connected": True}
        mock_request.assert_called_once_with(
            "GET", "http://127.0.0.1:6100/status", json=None, params=None, timeout=5
        )

    @patch('godotpilot.bridge.client.requests.request')
    def test_detailed_errors_timeout(self, mock_request):
        """Test detailed error checks use their own timeout."""
        mock_request.return_value = make_response({"errors": []})
        BridgeClient(detailed_timeout=8).get_detailed_errors()
        assert mock_request.call_args.kwargs["timeout"] == 8

    @patch('godotpilot.bridge.client.requests.request')
    def test_run_scene_body(self, mock_request):
        """Test POST /run sends the scene path."""
        mock_request.return_value = make_response({"ok": True})
        BridgeClient(port=7000).run_scene("res://scenes/level.tscn")
        args, kwargs = mock_request.call_args
        assert args == ("POST", "http://127.0.0.1:7000/run")
        assert kwargs["json"] == {"scene_path": "res://scenes/level.tscn"}

    @patch('godotpilot.bridge.client.requests.request')
    def test_class_info_params(self, mock_request):
        """Test class info query parameters."""
        mock_request.return_value = make_response({"class_name": "Node2D"})
        BridgeClient().get_class_info("Node2D", include_inherited=True)
        assert mock_request.call_args.kwargs["params"] == {"class_name": "Node2D", "inherited": "true"}

    @patch('godotpilot.bridge.client.requests.request')
    def test_phase_body(self, mock_request):
        """Test POST /phase body."""
        mock_request.return_value = make_response({"ok": True})
        BridgeClient().update_phase(2, "Core Mechanics", "in_progress")
        assert mock_request.call_args.kwargs["json"] == {
            "phase_number": 2,
            "phase_name": "Core Mechanics",
            "status": "in_progress",
            "quality_gates": {},
        }


class TestBridgeFailures:
    """Test error mapping."""

    @patch('godotpilot.bridge.client.requests.request')
    def test_timeout(self, mock_request):
        """Test timeouts raise BridgeTimeoutError."""
        mock_request.side_effect = requests.exceptions.Timeout()
        with pytest.raises(BridgeTimeoutError):
            BridgeClient().get_errors()

    @patch('godotpilot.bridge.client.requests.request')
    def test_connection_refused(self, mock_request):
        """Test connection failures raise BridgeUnavailableError."""
        mock_request.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(BridgeUnavailableError) as exc:
            BridgeClient().get_errors()
        assert "127.0.0.1:6100" in str(exc.value)

    @patch('godotpilot.bridge.client.requests.request')
    def test_non_json(self, mock_request):
        """Test non-JSON bodies raise BridgeResponseError."""
        mock_request.return_value = make_response(json_error=True)
        with pytest.raises(BridgeResponseError):
            BridgeClient().get_status()

    @patch('godotpilot.bridge.client.requests.request')
    def test_error_status_uses_payload_message(self, mock_request):
        """Test error statuses surface the bridge's error text."""
        mock_request.return_value = make_response({"error": "Node not found"}, status=404)
        with pytest.raises(BridgeResponseError) as exc:
            BridgeClient().delete_node("Player")
        assert "Node not found" in str(exc.value)

    @patch('godotpilot.bridge.client.requests.request')
    def test_attempt_captures_bridge_errors(self, mock_request):
        """Test attempt returns a failed result instead of raising."""
        mock_request.side_effect = requests.exceptions.Timeout()
        client = BridgeClient()
        result = client.attempt(client.get_errors)
        assert result.ok is False
        assert isinstance(result.error, BridgeTimeoutError)

    @patch('godotpilot.bridge.client.requests.request')
    def test_is_connected(self, mock_request):
        """Test is_connected reflects reachability."""
        mock_request.return_value = make_response({"connected": True})
        assert BridgeClient().is_connected() is True
        mock_request.side_effect = requests.exceptions.ConnectionError()
        assert BridgeClient().is_connected() is False


class TestErrorReport:
    """Test error payload parsing."""

    def test_counts_and_files(self):
        """Test counts and file labels."""
        report = ErrorReport.from_payload({
            "errors": [
                {"message": "Unexpected token", "file": "res://player.gd", "line": 3},
                {"message": "Identifier not declared"},
            ],
            "warnings": [{"message": "unused"}],
        })
        assert report.error_count == 2
        assert report.warning_count == 1
        assert report.error_files(5) == ["res://player.gd", "Identifier not declared"]

    def test_empty_payload(self):
        """Test missing lists count as zero."""
        assert ErrorReport.from_payload({}).error_count == 0
        assert ErrorReport.from_payload(None).error_count == 0

    def test_string_entries(self):
        """Test plain string entries are accepted."""
        report = ErrorReport.from_payload({"errors": ["res://enemy.gd:12 - Parse Error"]})
        assert report.error_files(1) == ["res://enemy.gd:12 - Parse Error"]

    @pytest.mark.parametrize("payload", [
        {"errors": 3},
        {"errors": [{"message": "Parse error", "line": [4]}]},
        {"errors": [], "warnings": 7},
    ])
    @patch('godotpilot.bridge.client.requests.request')
    def test_malformed_report_is_response_error(self, mock_request, payload):
        """Test an error payload of the wrong shape raises BridgeResponseError."""
        mock_request.return_value = make_response(payload)
        with pytest.raises(BridgeResponseError) as exc:
            BridgeClient().get_error_report()
        assert exc.value.path == "/errors"

    @patch('godotpilot.bridge.client.requests.request')
    def test_get_error_report(self, mock_request):
        """Test a well-formed payload is parsed."""
        mock_request.return_value = make_response({"errors": [{"message": "Unexpected token"}]})
        assert BridgeClient().get_error_report().error_count == 1
