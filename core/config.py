# =============================================================================
# core/config.py - Server Configuration (CLI flags + environment)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Builds the one Config object the whole server runs with.  It is created
#   once in main.py and then handed to everything that needs it. Nothing
#   in core/ reads os.environ on its own.
#
# PRECEDENCE (highest first):
#   1. CLI flags         --appsignal-api-token, --log-level, --port
#   2. Environment       APPSIGNAL_API_TOKEN, LOG_LEVEL, PORT
#      (a local .env file is loaded into the environment first)
#   3. Defaults          log level "info", port 3000
#
#   The token has no default.  A missing token is NOT an error here: the
#   server still starts, and each tool call reports the problem (see
#   core/auth.py).
# =============================================================================

import argparse
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from dotenv import load_dotenv

LOG_LEVELS = ("debug", "info", "warn", "error")
DEFAULT_LOG_LEVEL = "info"
DEFAULT_PORT = 3000

_EPILOG = """\
Environment variables can also be used instead of CLI options:
  APPSIGNAL_API_TOKEN            AppSignal API token
  LOG_LEVEL                      Logging level
  PORT                           Server port number
"""


@dataclass(frozen=True)
class Config:
    """Resolved server configuration.  Read-only after startup."""

    api_token: str = ""
    log_level: str = DEFAULT_LOG_LEVEL        # One of LOG_LEVELS
    port: int = DEFAULT_PORT                  # Not used by the stdio transport


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="appsignal-mcp",
        description="AppSignal MCP - tools for interacting with AppSignal error monitoring",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--appsignal-api-token", dest="api_token", help="AppSignal API token")
    # Unknown levels are dropped in load_config() rather than rejected here,
    # so a typo falls back to LOG_LEVEL instead of killing the server.
    parser.add_argument("--log-level", dest="log_level",
                        help="Logging level (debug, info, warn, error)")
    parser.add_argument("--port", dest="port", type=int, help="Server port number")
    return parser


def _parse_port(value: Optional[str]) -> int:
    try:
        return int(value) if value else DEFAULT_PORT
    except ValueError:
        return DEFAULT_PORT


def load_config(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Config:
    """Resolve configuration from CLI arguments and the environment.

    Args:
        argv: Command-line arguments without the program name.  Defaults to
              sys.argv[1:].
        environ: Environment mapping.  Defaults to os.environ, after a .env
                 file (if any) has been loaded into it.

    Returns:
        A frozen Config.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    args = build_parser().parse_args(argv)

    log_level = args.log_level if args.log_level in LOG_LEVELS else None
    if log_level is None:
        env_level = environ.get("LOG_LEVEL", DEFAULT_LOG_LEVEL).lower()
        log_level = env_level if env_level in LOG_LEVELS else DEFAULT_LOG_LEVEL

    return Config(
        api_token=args.api_token or environ.get("APPSIGNAL_API_TOKEN", ""),
        log_level=log_level,
        port=args.port or _parse_port(environ.get("PORT")),
    )
