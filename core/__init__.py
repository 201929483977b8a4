# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains ALL the AppSignal logic: configuration, the REST
# client, the sample models and the response formatting.
#
# CRITICAL ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP or any protocol framework.  The
#   client takes its HTTP opener as a parameter, so every module here can be
#   exercised offline with plain pytest.
#
#   core/ raises the errors in core/errors.py; tools/ decides what the MCP
#   host gets to see.
# =============================================================================
