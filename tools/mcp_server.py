# =============================================================================
# tools/mcp_server.py - FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Defines the four MCP tools that expose AppSignal samples.  Each tool is a
#   thin wrapper around core/: it calls the client, formats the payload, and
#   turns any failure into an MCP error result.
#
# HOW IT WORKS (the flow):
#   1. The MCP host calls a tool by name (e.g., "get_sample")
#   2. FastMCP validates the arguments against the tool's signature
#   3. The tool calls core/client.py (one GET to AppSignal)
#   4. core/formatter.py reduces the payload to the fields worth reading
#   5. The tool returns the dict, FastMCP serializes it as the result
#
# ERRORS:
#   Tools never let an exception escape as-is.  Every failure is raised as a
#   fastmcp ToolError, which FastMCP returns to the host as a result with
#   isError: true and the message as its only text content.
#
#     404  →  "<what> <id> not found"
#     401  →  "Authentication failed for AppSignal API"
#     else →  the error's own message, or the tool's fallback message
#
# RUNNING THIS SERVER:
#   a) python main.py                 (reads CLI flags and environment)
#   b) python -m tools.mcp_server     (environment only)
#   Both talk MCP over stdio.
# =============================================================================

import json
import logging
import sys
from typing import Annotated, Literal, Optional, Union

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

# --- Import core logic ---
# The tools layer depends on core/ and nothing else.
from core.client import AppSignalClient
from core.config import Config, load_config
from core.errors import AppSignalError, UpstreamError
from core.formatter import (
    format_error_sample,
    format_sample,
    format_search_result,
    parse_error_sample,
    parse_sample,
    parse_samples_response,
)
from core.models import SampleFilters, SampleType

SERVER_NAME = "appsignal-mcp"
SERVER_VERSION = "1.0.0"
AUTH_FAILED_MESSAGE = "Authentication failed for AppSignal API"

# =============================================================================
# Logging Setup
# =============================================================================
# We log to STDERR because MCP messages travel over STDOUT.  A log line on
# stdout would corrupt the JSON-RPC stream.
#
# ANSI colors make tool traffic easy to scan in a terminal:
#   - CYAN for incoming requests (tool name + parameters)
#   - GREEN for responses
#   - YELLOW for status messages
#   - RED for errors returned to the host
# =============================================================================
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_RESET = "\033[0m"

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def configure_logging(level: str = "info") -> None:
    """Send logs to stderr at the configured level (debug/info/warn/error)."""
    logging.basicConfig(
        level=_LOG_LEVELS.get(level, logging.INFO),
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items() if v is not None)
    logging.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logging.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: dict) -> dict:
    """Log the tool response as compact JSON in GREEN, then return it."""
    logging.debug(f"{_GREEN}  ← {tool_name} response: {json.dumps(result, separators=(',', ':'))}{_RESET}")
    return result


# =============================================================================
# Error mapping
# =============================================================================
def error_message(error: Exception, not_found: str, fallback: str) -> str:
    """Pick the user-facing message for a failed tool call.

    Args:
        error: Whatever the call raised.
        not_found: Message to use when AppSignal answered 404.
        fallback: Message to use when the error carries none of its own.
    """
    if isinstance(error, UpstreamError):
        if error.status == 404:
            return not_found
        if error.status == 401:
            return AUTH_FAILED_MESSAGE
    if isinstance(error, AppSignalError) and error.message:
        return error.message
    return fallback


def _tool_error(tool_name: str, error: Exception, not_found: str, fallback: str) -> ToolError:
    """Log a failed call and build the ToolError that reports it."""
    if isinstance(error, AppSignalError):
        logging.error(f"{_RED}  ✗ {tool_name} failed: {error}{_RESET}")
    else:
        logging.exception(f"{_RED}  ✗ {tool_name} failed unexpectedly{_RESET}")
    return ToolError(error_message(error, not_found, fallback))


# =============================================================================
# Parameter types
# =============================================================================
# The descriptions below are part of each tool's input schema; the host
# reads them to decide what to pass.
# =============================================================================
SampleId = Annotated[str, Field(description="The AppSignal sample ID")]
AppId = Annotated[str, Field(description="The AppSignal application ID")]
ExceptionFilter = Annotated[
    Optional[str], Field(description="Filter by exception name (e.g., NoMethodError)")]
ActionFilter = Annotated[
    Optional[str], Field(description="Filter by action name (e.g., BlogPostsController-hash-show)")]
Since = Annotated[
    Optional[Union[int, float, str]], Field(description="Start timestamp in UTC (timestamp or ISO format)")]
Before = Annotated[
    Optional[Union[int, float, str]], Field(description="End timestamp in UTC (timestamp or ISO format)")]
Limit = Annotated[
    Optional[int], Field(description="Maximum number of samples to return (defaults to 10)")]
CountOnly = Annotated[
    Optional[bool], Field(description="Only return the count, not the samples")]
SampleTypeParam = Annotated[
    Literal["all", "errors", "performance"],
    Field(description="Which samples to search: all, errors or performance"),
]


# =============================================================================
# Create the FastMCP server
# =============================================================================
def create_server(config: Config, client: Optional[AppSignalClient] = None) -> FastMCP:
    """Build the MCP server with all four AppSignal tools registered.

    Args:
        config: Resolved server configuration.
        client: AppSignal client to use.  Built from config when omitted;
                tests pass one with a fake opener.

    Returns:
        A FastMCP server, ready for .run() or an in-process Client.
    """
    client = client or AppSignalClient(config)
    mcp = FastMCP(SERVER_NAME, version=SERVER_VERSION)

    # =========================================================================
    # TOOL 1: get_error_sample
    # =========================================================================
    @mcp.tool()
    def get_error_sample(sampleId: SampleId, appId: AppId) -> dict:
        """Get details about a specific AppSignal error sample by ID.

        Returns the sample's action, path, status, duration, hostname, time,
        environment, params, session_data, tags and exception (message, name
        and backtrace).
        """
        _log_request("get_error_sample", sampleId=sampleId, appId=appId)
        try:
            payload = client.fetch_sample_by_id(sampleId, appId)
            result = format_error_sample(parse_error_sample(payload))
        except Exception as e:
            raise _tool_error(
                "get_error_sample", e,
                not_found=f"Error sample {sampleId} not found",
                fallback="Error fetching AppSignal error sample",
            ) from e
        return _log_response("get_error_sample", result)

    # =========================================================================
    # TOOL 2: search_error_samples
    # =========================================================================
    @mcp.tool()
    def search_error_samples(
        appId: AppId,
        exception: ExceptionFilter = None,
        action_id: ActionFilter = None,
        since: Since = None,
        before: Before = None,
        limit: Limit = None,
        count_only: CountOnly = None,
    ) -> dict:
        """Search for error samples in an AppSignal application.

        Returns {count, samples}; each sample is a listing row with id,
        action, path, duration, status, time, is_exception and the
        exception name.
        """
        filters = SampleFilters(
            action_id=action_id, exception=exception, since=since,
            before=before, limit=limit, count_only=count_only,
        )
        _log_request("search_error_samples", appId=appId, **vars(filters))
        try:
            payload = client.search_samples(filters, appId, SampleType.ERRORS)
            result = format_search_result(parse_samples_response(payload))
        except Exception as e:
            raise _tool_error(
                "search_error_samples", e,
                not_found=f"Application {appId} not found",
                fallback="Error searching AppSignal error samples",
            ) from e
        _log_status(f"Found {result['count']} error samples")
        return _log_response("search_error_samples", result)

    # =========================================================================
    # TOOL 3: get_sample
    # =========================================================================
    # Unlike get_error_sample, this one looks at the sample's is_exception
    # flag and formats error and performance samples differently.  The
    # result carries type: "error" or type: "performance".
    # =========================================================================
    @mcp.tool()
    def get_sample(sampleId: SampleId, appId: AppId) -> dict:
        """Get details about any AppSignal sample (error or performance) by ID.

        Error samples include tags and the exception; performance samples
        include db_runtime, view_runtime, allocation_count and the timed
        events of the request.  The `type` field says which one it is.
        """
        _log_request("get_sample", sampleId=sampleId, appId=appId)
        try:
            payload = client.fetch_sample_by_id(sampleId, appId)
            result = format_sample(parse_sample(payload))
        except Exception as e:
            raise _tool_error(
                "get_sample", e,
                not_found=f"Sample {sampleId} not found",
                fallback="Error fetching AppSignal sample",
            ) from e
        _log_status(f"Sample {sampleId} is a {result['type']} sample")
        return _log_response("get_sample", result)

    # =========================================================================
    # TOOL 4: search_samples
    # =========================================================================
    @mcp.tool()
    def search_samples(
        appId: AppId,
        sample_type: SampleTypeParam = "errors",
        exception: ExceptionFilter = None,
        action_id: ActionFilter = None,
        since: Since = None,
        before: Before = None,
        limit: Limit = None,
        count_only: CountOnly = None,
    ) -> dict:
        """Search for samples of any type in an AppSignal application.

        Returns {count, sample_type, samples}; each sample is a listing row
        with id, action, path, duration, status, time, is_exception and the
        exception name (null for performance samples).
        """
        filters = SampleFilters(
            action_id=action_id, exception=exception, since=since,
            before=before, limit=limit, count_only=count_only,
        )
        _log_request("search_samples", appId=appId, sample_type=sample_type, **vars(filters))
        try:
            kind = SampleType(sample_type)
            payload = client.search_samples(filters, appId, kind)
            result = format_search_result(parse_samples_response(payload), kind)
        except Exception as e:
            raise _tool_error(
                "search_samples", e,
                not_found=f"Application {appId} not found",
                fallback="Error searching AppSignal samples",
            ) from e
        _log_status(f"Found {result['count']} {sample_type} samples")
        return _log_response("search_samples", result)

    return mcp


if __name__ == "__main__":
    _config = load_config([])
    configure_logging(_config.log_level)
    create_server(_config).run()
