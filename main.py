"""
Entry point — prints the resource listing and statistics directly.

This bypasses the MCP server and runs the view resolver as a standalone
async operation.  Useful for checking connectivity and credentials.

Usage:
    python main.py [endpoint] [repository]

For MCP server mode (stdio transport):
    python -m src.graphdb.server [endpoint] [repository]
"""

import asyncio
import json
import sys

from src.graphdb.addressing import ResourceAddress, ViewKind
from src.graphdb.config import RepositoryRef
from src.graphdb.executor import SparqlExecutor
from src.graphdb.server import build_settings
from src.graphdb.views import ViewResolver


async def main(argv: list[str]) -> None:
    settings = build_settings(argv)
    if not settings.repository:
        print("No repository configured (GRAPHDB_REPOSITORY or second argument).")
        return

    async with SparqlExecutor(
        RepositoryRef.from_settings(settings), timeout=settings.request_timeout,
    ) as executor:
        resolver = ViewResolver(executor)

        resources = await resolver.enumerate()
        print(f"{len(resources)} resources:")
        for resource in resources:
            print(f"  {resource.name:<50} {resource.uri}")

        stats = await resolver.resolve(
            ResourceAddress(repository=settings.repository, view=ViewKind.STATS)
        )
        print("Statistics:", json.dumps(stats.to_dict(), indent=2))


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:]))
