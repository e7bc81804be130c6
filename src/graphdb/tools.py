"""
Tool Dispatcher for the sparqlQuery and listGraphs MCP tools.

Tool-level problems (bad arguments, failed queries) come back in-band as
``ToolResult(is_error=True)`` so the calling agent always gets an answer.
Only an unknown tool name escapes, as ``UnknownToolError``.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from src.graphdb.executor import ResultFormat, SparqlExecutor
from src.graphdb.rewriter import scope_to_graph
from src.graphdb.views import ViewResolver
from src.shared.exceptions import GraphDBError, ToolArgumentError, UnknownToolError

logger = logging.getLogger("graphdb.tools")


class ToolName(str, Enum):
    SPARQL_QUERY = "sparqlQuery"
    LIST_GRAPHS = "listGraphs"


@dataclass(frozen=True)
class ToolSpec:
    """Name, description and JSON input schema of one tool."""

    name: ToolName
    description: str
    input_schema: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ToolResult:
    content: str
    is_error: bool = False


TOOL_SPECS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name=ToolName.SPARQL_QUERY,
        description="Execute a read-only SPARQL query against the GraphDB repository",
        input_schema={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "The SPARQL query to execute",
                },
                "graph": {
                    "type": "string",
                    "description": "Optional: Specific graph IRI to query",
                },
                "format": {
                    "type": "string",
                    "description": "Optional: Response format (json, xml, csv)",
                    "enum": [fmt.value for fmt in ResultFormat],
                    "default": ResultFormat.JSON.value,
                },
            },
            "required": ["query"],
        },
    ),
    ToolSpec(
        name=ToolName.LIST_GRAPHS,
        description="List all graphs in the repository",
        input_schema={"type": "object", "properties": {}},
    ),
)


def _parse_query_arguments(
    arguments: dict[str, Any],
) -> tuple[str, str | None, ResultFormat]:
    """Validate sparqlQuery arguments into (query, graph, format).

    Raises:
        ToolArgumentError: If any argument is missing or malformed.
    """
    query = arguments.get("query")
    if not isinstance(query, str) or not query.strip():
        raise ToolArgumentError("Missing required argument: query")

    graph = arguments.get("graph") or None
    if graph is not None and not isinstance(graph, str):
        raise ToolArgumentError("Argument 'graph' must be a string IRI")

    raw_format = arguments.get("format") or ResultFormat.JSON.value
    try:
        fmt = ResultFormat(raw_format)
    except ValueError:
        allowed = ", ".join(f.value for f in ResultFormat)
        raise ToolArgumentError(
            f"Unsupported format {raw_format!r}; expected one of: {allowed}"
        ) from None
    return query, graph, fmt


class ToolDispatcher:
    """Validates tool calls and routes them to the executor."""

    def __init__(self, executor: SparqlExecutor, resolver: ViewResolver | None = None):
        self._executor = executor
        self._resolver = resolver or ViewResolver(executor)

    def list_tools(self) -> list[ToolSpec]:
        return list(TOOL_SPECS)

    async def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResult:
        """Run tool ``name`` with ``arguments``.

        Raises:
            UnknownToolError: If ``name`` is not one of ``ToolName``.
        """
        try:
            tool = ToolName(name)
        except ValueError:
            raise UnknownToolError(name) from None

        arguments = arguments or {}
        if tool is ToolName.SPARQL_QUERY:
            return await self._sparql_query(arguments)
        return await self._list_graphs()

    async def _sparql_query(self, arguments: dict[str, Any]) -> ToolResult:
        try:
            query, graph, fmt = _parse_query_arguments(arguments)
            scoped = scope_to_graph(query, graph)
            if scoped != query:
                logger.info("Scoped query to graph %s", graph)

            if fmt is ResultFormat.JSON:
                result = await self._executor.execute(scoped, fmt)
                text = json.dumps(result.to_dict(), indent=2)
            else:
                body = await self._executor.execute_raw(scoped, fmt)
                text = body.decode("utf-8", errors="replace")
        except GraphDBError as exc:
            return ToolResult(content=f"Error executing query: {exc}", is_error=True)
        return ToolResult(content=text)

    async def _list_graphs(self) -> ToolResult:
        try:
            result = await self._resolver.discover_graphs()
        except GraphDBError as exc:
            return ToolResult(content=f"Error listing graphs: {exc}", is_error=True)
        return ToolResult(content=json.dumps(result.to_dict(), indent=2))
