"""Tests for MCP server tools."""

from __future__ import annotations

import hashlib
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock, patch

import pytest

NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=UTC)


def _epoch(days_ago: float) -> str:
    return str(int((NOW - timedelta(days=days_ago)).timestamp()))


@pytest.fixture
def recent_csv(tmp_path):
    """CSV export with one recent attributable row and one stale row."""
    now = datetime.now(UTC)
    recent = int((now - timedelta(days=2)).timestamp())
    stale = int((now - timedelta(days=30)).timestamp())
    path = tmp_path / "purchases.csv"
    path.write_text(
        "Order_ID,Value,Event_Time,Email,UTM_Source\n"
        f"A1,25.50,{recent},a@b.com,x\n"
        f"A2,10.00,{stale},c@d.com,x\n"
    )
    return path


# =============================================================================
# _sanitize_error Tests
# =============================================================================


def test_sanitize_error_access_token():
    """Test _sanitize_error removes access tokens from error messages."""
    from pixelreplay_mcp.server import _sanitize_error

    result = _sanitize_error("Request failed: https://graph.facebook.com/v20.0/1/events?access_token=EAAB123&x=1")
    assert "EAAB123" not in result
    assert "access_token=***" in result


def test_sanitize_error_password():
    """Test _sanitize_error removes password from error message."""
    from pixelreplay_mcp.server import _sanitize_error

    result = _sanitize_error("Connection failed: password=secret123 at host")
    assert "secret123" not in result
    assert "password=***" in result


def test_sanitize_error_api_hyphen_key():
    """Test _sanitize_error normalizes api-key and removes its value."""
    from pixelreplay_mcp.server import _sanitize_error

    result = _sanitize_error('Error: {"api-key": "supersecret"}')
    assert "supersecret" not in result
    assert "api_key=***" in result


def test_sanitize_error_case_insensitive():
    """Test _sanitize_error works case-insensitively."""
    from pixelreplay_mcp.server import _sanitize_error

    result = _sanitize_error("PASSWORD=hunter2")
    assert "hunter2" not in result


def test_sanitize_error_preserves_other_text():
    """Test _sanitize_error preserves non-sensitive error information."""
    from pixelreplay_mcp.server import _sanitize_error

    message = "Facebook API Error: Invalid parameter (Code: 100)"
    assert _sanitize_error(message) == message


# =============================================================================
# list_row_sources Tests
# =============================================================================


def test_list_row_sources():
    """Test both row source types are listed as registered."""
    from pixelreplay_mcp.server import mcp

    list_row_sources = mcp._tool_manager._tools["list_row_sources"].fn

    result = list_row_sources()

    assert {"type": "csv", "registered": True} in result
    assert {"type": "snowflake", "registered": True} in result


# =============================================================================
# preview_events Tests
# =============================================================================


class TestPreviewEvents:
    """Tests for the preview_events tool."""

    def test_web_preview(self):
        """Test eligible web rows are built and ineligible ones counted."""
        from pixelreplay_mcp.server import mcp

        preview_events = mcp._tool_manager._tools["preview_events"].fn

        result = preview_events(
            mode="web7d",
            namespace="123456",
            rows=[
                {"Order_ID": "A1", "Value": "25.50", "Event_Time": _epoch(6), "Email": "A@B.com", "UTM_Source": "x"},
                {"order_id": "A2", "value": "9.99", "event_time": _epoch(10), "utm_source": "x"},
                {"order_id": "A3", "value": "5", "event_time": _epoch(1)},
            ],
            now=NOW.isoformat(),
        )

        assert result["success"] is True
        assert result["processed"] == 3
        assert result["kept"] == 1
        assert result["skipped"] == 2
        payload = result["events"][0]
        assert payload["action_source"] == "website"
        assert payload["user_data"]["em"] == [hashlib.sha256(b"a@b.com").hexdigest()]

    def test_offline_preview_relaxed_attribution(self):
        """Test offline previews need no attribution signal."""
        from pixelreplay_mcp.server import mcp

        preview_events = mcp._tool_manager._tools["preview_events"].fn

        result = preview_events(
            mode="offline62d",
            namespace="789",
            rows=[{"order_id": "O1", "value": "10", "event_time": _epoch(40)}],
            now="2025-06-01T12:00:00",
        )

        assert result["kept"] == 1
        assert result["events"][0]["action_source"] == "other"

    def test_unknown_mode(self):
        """Test unknown modes are reported, not raised."""
        from pixelreplay_mcp.server import mcp

        preview_events = mcp._tool_manager._tools["preview_events"].fn

        result = preview_events(mode="web30d", namespace="1", rows=[])

        assert result == {"success": False, "error": "Unknown mode: web30d"}

    def test_invalid_now(self):
        """Test an unparseable reference time is reported."""
        from pixelreplay_mcp.server import mcp

        preview_events = mcp._tool_manager._tools["preview_events"].fn

        result = preview_events(mode="web7d", namespace="1", rows=[], now="yesterday")

        assert result["success"] is False
        assert "Invalid ISO datetime" in result["error"]


# =============================================================================
# replay_purchases Tests
# =============================================================================


class TestReplayPurchases:
    """Tests for the replay_purchases tool."""

    def test_csv_replay(self, graph_api, recent_csv):
        """Test a CSV replay sends eligible rows and returns the summary."""
        from pixelreplay_mcp.server import mcp

        replay_purchases = mcp._tool_manager._tools["replay_purchases"].fn

        result = replay_purchases(
            mode="web7d",
            access_token="token",
            pixel_id="123456",
            csv_path=str(recent_csv),
        )

        assert result["mode"] == "web7d"
        assert result["processed"] == 2
        assert result["kept"] == 1
        assert result["sent"] == 1
        assert result["skipped"] == 1
        assert result["test"] is True
        assert result["success"] is True
        path = graph_api.post.call_args.args[0]
        body = graph_api.post.call_args.kwargs["json"]
        assert path == "123456/events"
        assert body["test_event_code"].startswith("TEST_")

    def test_missing_namespace(self):
        """Test configuration errors are returned before reading any source."""
        from pixelreplay_mcp.server import mcp

        replay_purchases = mcp._tool_manager._tools["replay_purchases"].fn

        with patch("pixelreplay.connectors.create_row_source") as mock_create:
            result = replay_purchases(mode="offline62d", access_token="token", csv_path="x.csv")

        assert result == {"success": False, "error": "offline62d requires dataset_id"}
        mock_create.assert_not_called()

    def test_unknown_mode(self):
        """Test unknown modes are returned as errors."""
        from pixelreplay_mcp.server import mcp

        replay_purchases = mcp._tool_manager._tools["replay_purchases"].fn

        result = replay_purchases(mode="web30d", access_token="token", pixel_id="1")

        assert result["success"] is False
        assert "Unknown mode 'web30d'" in result["error"]

    def test_no_source(self):
        """Test a missing row source is returned as an error."""
        from pixelreplay_mcp.server import mcp

        replay_purchases = mcp._tool_manager._tools["replay_purchases"].fn

        result = replay_purchases(mode="web7d", access_token="token", pixel_id="1")

        assert result["success"] is False
        assert "No row source specified" in result["error"]

    def test_missing_csv_file(self, graph_api, tmp_path):
        """Test source read failures are returned as errors."""
        from pixelreplay_mcp.server import mcp

        replay_purchases = mcp._tool_manager._tools["replay_purchases"].fn

        result = replay_purchases(
            mode="web7d",
            access_token="token",
            pixel_id="1",
            csv_path=str(tmp_path / "missing.csv"),
        )

        assert result["success"] is False
        assert "CSV file not found" in result["error"]
        graph_api.post.assert_not_called()

    def test_snowflake_password_redacted(self):
        """Test Snowflake credentials never appear in returned errors."""
        from pixelreplay_mcp.server import mcp

        replay_purchases = mcp._tool_manager._tools["replay_purchases"].fn

        with patch("pixelreplay.delivery.run_replay", side_effect=RuntimeError("login failed: password=hunter2")):
            with patch("pixelreplay.connectors.create_row_source") as mock_create:
                mock_create.return_value = MagicMock()
                result = replay_purchases(
                    mode="offline62d",
                    access_token="token",
                    dataset_id="789",
                    snowflake={"account": "acme", "user": "u", "password": "hunter2", "query": "SELECT 1"},
                )

        assert result["success"] is False
        assert "hunter2" not in result["error"]
        mock_create.return_value.__exit__.assert_called_once()


def test_main_runs_server():
    """Test main starts the MCP server."""
    from pixelreplay_mcp import server

    with patch.object(server.mcp, "run") as mock_run:
        server.main()

    mock_run.assert_called_once_with()
