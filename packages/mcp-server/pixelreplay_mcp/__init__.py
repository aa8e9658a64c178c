"""
Pixel Replay MCP Server - Model Context Protocol server for purchase backfills.

Exposes the replay pipeline to MCP clients:
- Row source discovery (CSV, Snowflake)
- Event previews (no network)
- Replays to the Conversions API

Usage:
    # Via CLI
    pixel-replay-mcp

    # Via Python
    from pixelreplay_mcp import server
    server.main()

    # Via .mcp.json
    {
        "mcpServers": {
            "pixel-replay": {
                "command": "pixel-replay-mcp"
            }
        }
    }
"""

__version__ = "0.1.0"
