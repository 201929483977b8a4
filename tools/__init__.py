# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP tool wrappers.
#
# ARCHITECTURAL ROLE:
#   tools/ is the translation layer between the MCP host and core/.  It:
#     1. Declares each tool with typed, described parameters (the schema)
#     2. Calls the AppSignal client and formatter from core/
#     3. Converts core errors into MCP error results (isError: true)
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT build URLs or talk HTTP (that's core/client.py)
#   - They do NOT decide which fields to keep (that's core/formatter.py)
# =============================================================================
