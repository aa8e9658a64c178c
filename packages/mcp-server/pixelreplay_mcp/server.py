"""
Pixel Replay MCP Server - Main entry point.

Tools for previewing and replaying historical purchases to a Meta pixel
(web7d) or offline event set (offline62d).
"""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime
from typing import Any

from fastmcp import FastMCP

logger = logging.getLogger(__name__)

# Initialize server
mcp = FastMCP("Pixel Replay")

_SENSITIVE_PATTERN = re.compile(
    r"""["']?(access_token|password|token|secret|api[_-]key)["']?\s*[:=]\s*["']?[^\s"',&}]+["']?""",
    re.IGNORECASE,
)


def _sanitize_error(message: str) -> str:
    """Redact credential values from an error message.

    Args:
        message: Raw error message.

    Returns:
        Message with credential values replaced by ***.
    """

    def _redact(match: re.Match[str]) -> str:
        key = match.group(1).lower().replace("-", "_")
        return f"{key}=***"

    return _SENSITIVE_PATTERN.sub(_redact, message)


# =============================================================================
# Row Source Tools
# =============================================================================


@mcp.tool()
def list_row_sources() -> list[dict]:
    """
    List the row source types that can feed a replay.

    Returns:
        List of source types with their registration status.
    """
    from pixelreplay.connectors import ConnectorType, get_registry

    registry = get_registry()
    available = registry.list_available()

    return [
        {
            "type": ct.value,
            "registered": ct in available,
        }
        for ct in ConnectorType
    ]


# =============================================================================
# Replay Tools
# =============================================================================


@mcp.tool()
def preview_events(
    mode: str,
    namespace: str,
    rows: list[dict],
    strict_attribution: bool = True,
    now: str | None = None,
) -> dict:
    """
    Build Conversions API payloads from raw rows without sending them.

    Args:
        mode: Replay mode ("web7d" or "offline62d")
        namespace: Pixel id (web7d) or dataset id (offline62d)
        rows: Raw purchase rows
        strict_attribution: Require fbc/fbp/fbclid/utm_source on web rows
        now: ISO datetime to evaluate the eligibility window against (default: now)

    Returns:
        Built event payloads and the number of skipped rows.
    """
    from pixelreplay.connectors.base import lower_keys
    from pixelreplay.conversions import EventBuilder, ReplayMode, build_events

    try:
        replay_mode = ReplayMode(mode)
    except ValueError:
        return {"success": False, "error": f"Unknown mode: {mode}"}

    now_dt = None
    if now:
        try:
            now_dt = datetime.fromisoformat(now)
        except ValueError as e:
            return {
                "success": False,
                "error": f"Invalid ISO datetime format for 'now': {now}. Error: {e}",
            }
        if now_dt.tzinfo is None:
            now_dt = now_dt.replace(tzinfo=UTC)

    builder = EventBuilder.for_mode(replay_mode, namespace, strict_attribution=strict_attribution)

    events = []
    skipped = 0
    for _, event in build_events((lower_keys(row) for row in rows), builder, now=now_dt):
        if event is None:
            skipped += 1
        else:
            events.append(event.to_payload())

    return {
        "success": True,
        "mode": replay_mode.value,
        "processed": len(rows),
        "kept": len(events),
        "skipped": skipped,
        "events": events,
    }


@mcp.tool()
def replay_purchases(
    mode: str,
    access_token: str,
    pixel_id: str | None = None,
    dataset_id: str | None = None,
    csv_path: str | None = None,
    snowflake: dict | None = None,
    batch_size: int = 400,
    test_mode: bool = True,
    timeout: float = 30.0,
    strict_attribution: bool = True,
    api_version: str | None = None,
    limit: int | None = None,
) -> dict:
    """
    Replay historical purchases to the Conversions API.

    Args:
        mode: Replay mode ("web7d" or "offline62d")
        access_token: Conversions API access token
        pixel_id: Pixel id (required for web7d)
        dataset_id: Offline event set id (required for offline62d)
        csv_path: Path to a CSV export (takes precedence over snowflake)
        snowflake: Snowflake settings (account, user, password, query or table,
            warehouse, database, schema, role)
        batch_size: Events per request (default 400)
        test_mode: Web only - send with a test event code (default True)
        timeout: Per-request timeout in seconds
        strict_attribution: Web only - require an attribution signal
        api_version: Graph API version (default v20.0)
        limit: Maximum rows to read from the source

    Returns:
        Run summary (mode, processed, kept, sent, skipped, failed, test,
        duration, success).

    Security:
        - The access token and Snowflake password are never logged
        - Credential values are redacted from returned error messages
    """
    from pixelreplay.connectors import ConnectorError, create_row_source
    from pixelreplay.delivery import ReplayConfig, ReplayError, run_replay
    from pixelreplay.delivery.config import DEFAULT_API_VERSION

    logger.info(f"Starting replay via MCP - Mode: {mode}, Test mode: {test_mode}")

    try:
        config = ReplayConfig(
            mode=mode,
            access_token=access_token,
            pixel_id=pixel_id,
            dataset_id=dataset_id,
            api_version=api_version or DEFAULT_API_VERSION,
            batch_size=batch_size,
            timeout=timeout,
            test_mode=test_mode,
            strict_attribution=strict_attribution,
        )
        config.validate()
        source = create_row_source(csv_path=csv_path, snowflake=snowflake)
    except (ReplayError, ConnectorError) as e:
        return {"success": False, "error": _sanitize_error(str(e))}

    try:
        with source:
            summary = run_replay(config, source.rows(limit=limit))
        return summary.to_dict()

    except Exception as e:
        logger.exception(f"Replay failed - Mode: {mode}")
        return {"success": False, "error": _sanitize_error(str(e))}


def main():
    """Run the MCP server."""
    mcp.run()


if __name__ == "__main__":
    main()
