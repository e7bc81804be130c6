"""GraphDB MCP Server. Resource views and SPARQL tools over a GraphDB repository."""

from src.graphdb.executor import SparqlExecutor
from src.graphdb.tools import ToolDispatcher
from src.graphdb.views import ViewResolver

__all__ = [
    "SparqlExecutor",
    "ToolDispatcher",
    "ViewResolver",
]
