"""Custom exception hierarchy for happy_mcp."""


class HappyMcpError(Exception):
    """Base exception for the Happy MCP server."""
    pass


class ConfigurationError(HappyMcpError):
    """Raised at construction time when the server cannot be assembled."""
    pass


class DuplicateToolError(ConfigurationError):
    """Raised when a tool name is registered twice."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Tool already registered: {name}")
        self.name = name


class RegistryFrozenError(ConfigurationError):
    """Raised when registering into a registry that has been finalized."""
    pass


class ToolError(HappyMcpError):
    """Raised by dispatch; reported to the caller as an error result."""
    pass


class UnknownToolError(ToolError):
    """Raised when dispatching a tool name that is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Tool {name} not found")
        self.name = name


class ToolValidationError(ToolError):
    """Raised when tool arguments do not match the tool's input schema."""

    def __init__(self, tool: str, field: str | None, message: str) -> None:
        where = f" (field '{field}')" if field else ""
        super().__init__(f"Invalid arguments for tool {tool}{where}: {message}")
        self.tool = tool
        self.field = field
        self.message = message


class ServerStartError(HappyMcpError):
    """Raised when the HTTP listener does not come up."""
    pass
