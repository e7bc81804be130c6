"""
GraphDB MCP Server

Exposes a GraphDB repository to MCP clients:

MCP Resources:
  - graphdb://<host>/repository/<repo>/{classes,predicates,stats,sample}
  - graphdb://<host>/repository/<repo>/graph/<percent-encoded graph IRI>

MCP Tools:
  - sparqlQuery: Run a read-only SPARQL query, optionally scoped to a graph
  - listGraphs: List the named graphs in the repository

Run as:  python -m src.graphdb.server [endpoint] [repository]   (stdio transport)
"""

import argparse
import asyncio
import json
import logging
from typing import Any

from mcp.server.lowlevel import NotificationOptions, Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from mcp.types import (
    INVALID_PARAMS,
    CallToolRequest,
    CallToolResult,
    ErrorData,
    Resource,
    ServerResult,
    TextContent,
    Tool,
)
from pydantic import AnyUrl

from src.graphdb.addressing import parse_resource_uri
from src.graphdb.config import GraphDBSettings, RepositoryRef
from src.graphdb.executor import SparqlExecutor
from src.graphdb.tools import ToolDispatcher
from src.graphdb.views import JSON_MIME_TYPE, ViewResolver
from src.shared.exceptions import UnknownToolError
from src.shared.logging import generate_correlation_id, setup_logging

SERVER_NAME = "mcp-server-graphdb"
SERVER_VERSION = "0.1.0"

logger = setup_logging("graphdb.server", level="INFO")

server = Server(SERVER_NAME)

# ─── Shared resources (lazy init) ─────────────────────────

_settings: GraphDBSettings | None = None
_executor: SparqlExecutor | None = None
_resolver: ViewResolver | None = None
_dispatcher: ToolDispatcher | None = None


def configure(settings: GraphDBSettings) -> None:
    """Install ``settings`` and drop any components built from earlier ones."""
    global _settings, _executor, _resolver, _dispatcher
    _settings = settings
    _executor = None
    _resolver = None
    _dispatcher = None


def _get_settings() -> GraphDBSettings:
    """Lazy-initialise settings from environment variables."""
    global _settings
    if _settings is None:
        _settings = GraphDBSettings()
    return _settings


def _get_executor() -> SparqlExecutor:
    """Lazy-initialise the executor on first request."""
    global _executor
    if _executor is None:
        settings = _get_settings()
        _executor = SparqlExecutor(
            RepositoryRef.from_settings(settings),
            timeout=settings.request_timeout,
        )
    return _executor


def _get_resolver() -> ViewResolver:
    global _resolver
    if _resolver is None:
        _resolver = ViewResolver(_get_executor())
    return _resolver


def _get_dispatcher() -> ToolDispatcher:
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = ToolDispatcher(_get_executor(), _get_resolver())
    return _dispatcher


# ─── Resources ───────────────────────────────────────────


@server.list_resources()
async def list_resources() -> list[Resource]:
    """List the fixed repository views and one view per named graph."""
    cid = generate_correlation_id()
    descriptors = await _get_resolver().enumerate()
    logger.info("[%s] list_resources -> %d resources", cid, len(descriptors))
    return [
        Resource(uri=d.uri, name=d.name, mimeType=d.mime_type)
        for d in descriptors
    ]


@server.read_resource()
async def read_resource(uri: AnyUrl) -> list[ReadResourceContents]:
    """Resolve a resource URI and return its JSON payload."""
    cid = generate_correlation_id()
    uri_str = str(uri)
    logger.info("[%s] read_resource %s", cid, uri_str)

    address = parse_resource_uri(uri_str)
    payload = await _get_resolver().resolve(address)
    return [
        ReadResourceContents(
            content=json.dumps(payload.to_dict(), indent=2),
            mime_type=JSON_MIME_TYPE,
        )
    ]


# ─── Tools ───────────────────────────────────────────────


@server.list_tools()
async def list_tools() -> list[Tool]:
    return [
        Tool(name=spec.name.value, description=spec.description, inputSchema=spec.input_schema)
        for spec in _get_dispatcher().list_tools()
    ]


async def call_tool(request: CallToolRequest) -> ServerResult:
    """Dispatch a tool call.

    Tool failures are reported in-band as ``isError`` results. An unknown
    tool name raises ``McpError``, which the session sends back as a
    JSON-RPC error response.
    """
    cid = generate_correlation_id()
    tool_name = request.params.name
    tool_args: dict[str, Any] = request.params.arguments or {}
    logger.info("[%s] call_tool %s", cid, tool_name)
    try:
        result = await _get_dispatcher().call_tool(tool_name, tool_args)
    except UnknownToolError as exc:
        logger.warning("[%s] %s", cid, exc.detail)
        raise McpError(ErrorData(code=INVALID_PARAMS, message=exc.detail)) from exc

    if result.is_error:
        logger.warning("[%s] %s returned an error: %s", cid, tool_name, result.content)
    return ServerResult(CallToolResult(
        content=[TextContent(type="text", text=result.content)],
        isError=result.is_error,
    ))


# Registered without @server.call_tool(): that wrapper converts every
# exception, McpError included, into an isError result.
server.request_handlers[CallToolRequest] = call_tool


# ─── Entry point ──────────────────────────────────────────


def build_settings(argv: list[str] | None = None) -> GraphDBSettings:
    """Settings from the environment, overridden by positional arguments."""
    parser = argparse.ArgumentParser(
        prog="mcp-server-graphdb",
        description="MCP server exposing a GraphDB repository over stdio",
    )
    parser.add_argument("endpoint", nargs="?", help="GraphDB base URL")
    parser.add_argument("repository", nargs="?", help="Repository name")
    args = parser.parse_args(argv)

    overrides = {
        key: value
        for key, value in (("endpoint", args.endpoint), ("repository", args.repository))
        if value
    }
    return GraphDBSettings(**overrides)


def initialization_options(settings: GraphDBSettings) -> InitializationOptions:
    return InitializationOptions(
        server_name=settings.server_name,
        server_version=SERVER_VERSION,
        capabilities=server.get_capabilities(
            notification_options=NotificationOptions(),
            experimental_capabilities={},
        ),
    )


async def serve(settings: GraphDBSettings) -> None:
    configure(settings)
    logging.getLogger("graphdb").setLevel(settings.log_level.upper())
    if not settings.repository:
        logger.warning(
            "No repository specified. Please set GRAPHDB_REPOSITORY environment "
            "variable or provide it as an argument."
        )

    logger.info("Starting GraphDB MCP server (stdio) for %s", settings.endpoint)
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, initialization_options(settings))
    finally:
        await _get_executor().aclose()


def main(argv: list[str] | None = None) -> None:
    asyncio.run(serve(build_settings(argv)))


if __name__ == "__main__":
    main()
