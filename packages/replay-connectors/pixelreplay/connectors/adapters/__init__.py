"""Row source adapters.

Import this module to auto-register all available connectors.

Example:
    import pixelreplay.connectors.adapters  # noqa: F401

    from pixelreplay.connectors.adapters.csv_file import CSVConnector
    from pixelreplay.connectors.adapters.snowflake import SnowflakeConnector
"""

from __future__ import annotations

# Import adapters to trigger auto-registration. The Snowflake driver is
# imported lazily on authenticate(), so both adapters always load.
from pixelreplay.connectors.adapters.csv_file import CSVConnector as CSVConnector
from pixelreplay.connectors.adapters.snowflake import (
    SnowflakeConnector as SnowflakeConnector,
)

__all__ = ["CSVConnector", "SnowflakeConnector"]
