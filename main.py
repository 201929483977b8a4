# =============================================================================
# main.py - Entry Point for the AppSignal MCP Server
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py --appsignal-api-token <token>
#   APPSIGNAL_API_TOKEN=<token> uv run appsignal-mcp
#
# WHAT HAPPENS:
#   1. Configuration is resolved from CLI flags, then .env / environment
#      (core/config.py).  --help prints the options and exits.
#   2. Logging is pointed at stderr at the configured level.
#   3. The FastMCP server is built with that configuration and served over
#      stdio until the host closes the pipe.
#
# A missing API token does not stop the server from starting: every tool
# call reports it instead, so the host sees a readable error.
# =============================================================================

import logging
import sys

from core.config import load_config
from tools.mcp_server import configure_logging, create_server


def main() -> None:
    """Load configuration and serve the AppSignal tools over stdio."""
    try:
        config = load_config()
        configure_logging(config.log_level)
        server = create_server(config)
        logging.info("Starting MCP server with stdio transport")
        server.run()
    except Exception:
        logging.exception("Failed to start application")
        sys.exit(1)


# =============================================================================
# Script entry point
# =============================================================================
if __name__ == "__main__":
    main()
