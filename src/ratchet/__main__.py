"""Run the Ratchet MCP server: ``python -m ratchet``."""

from .tools.server import main

main()
