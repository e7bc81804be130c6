"""
Custom exception hierarchy for the GraphDB MCP server.

All server errors inherit from GraphDBError so they can be caught
uniformly at the tool dispatcher or MCP handler level.
"""


class GraphDBError(Exception):
    """Base exception for all server errors."""

    def __init__(self, message: str, component: str = "unknown"):
        self.component = component
        self.detail = message
        super().__init__(f"[{component}] {message}")


class AddressError(GraphDBError):
    """A resource URI could not be resolved to a readable view."""

    MISSING_REPOSITORY = "missing_repository"
    INVALID_VIEW = "invalid_view"

    def __init__(self, message: str, reason: str = INVALID_VIEW):
        self.reason = reason
        super().__init__(message, component="addressing")


class QueryFailure(GraphDBError):
    """A SPARQL query against the remote repository did not succeed.

    Either the endpoint answered with a non-2xx status (``status`` and
    ``status_text`` are set) or the request never produced a usable
    response (``transport_error`` is set).
    """

    def __init__(
        self,
        message: str,
        status: int | None = None,
        status_text: str = "",
        transport_error: str | None = None,
    ):
        self.status = status
        self.status_text = status_text
        self.transport_error = transport_error
        super().__init__(message, component="executor")

    @classmethod
    def from_status(cls, status: int, status_text: str) -> "QueryFailure":
        return cls(
            f"GraphDB query failed: {status} {status_text}".rstrip(),
            status=status,
            status_text=status_text,
        )

    @classmethod
    def from_transport(cls, error: Exception | str) -> "QueryFailure":
        text = str(error) or type(error).__name__
        return cls(f"GraphDB request failed: {text}", transport_error=text)

    @property
    def is_transport(self) -> bool:
        return self.transport_error is not None


class ToolArgumentError(GraphDBError):
    """Tool arguments failed validation."""

    def __init__(self, message: str):
        super().__init__(message, component="tools")


class UnknownToolError(GraphDBError):
    """The requested tool name is not served by this server."""

    def __init__(self, name: str):
        self.tool_name = name
        super().__init__(f"Unknown tool: {name}", component="tools")
