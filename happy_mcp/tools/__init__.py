"""
Tool package for the Happy MCP server.

The package is organised into:
- schemas.py: Pydantic input models (also the published inputSchema)
- registry.py: Tool, ToolRegistry and the build_registry() builder
- session.py: change_title executor
- reminders.py: inject_reminder executor

Re-exports:
    Tool: A single tool definition
    ToolRegistry: Validates arguments and dispatches tool calls
    build_registry: Builds the frozen tool set for a server instance
"""

from .registry import Tool, ToolRegistry, build_registry

__all__ = ["Tool", "ToolRegistry", "build_registry"]
