"""
Integration tests against a live GraphDB repository.

Prerequisites:
    - A reachable GraphDB instance with at least one repository
    - GRAPHDB_INTEGRATION_ENDPOINT (e.g. http://localhost:7200) and
      GRAPHDB_INTEGRATION_REPOSITORY set in the environment

Run with:
    python -m pytest tests/integration/test_live_graphdb.py -v -s
"""

import json
import os

import pytest

from src.graphdb.addressing import ResourceAddress, ViewKind
from src.graphdb.config import RepositoryRef
from src.graphdb.executor import SparqlExecutor
from src.graphdb.tools import ToolDispatcher
from src.graphdb.views import ViewResolver

ENDPOINT = os.getenv("GRAPHDB_INTEGRATION_ENDPOINT", "")
REPOSITORY = os.getenv("GRAPHDB_INTEGRATION_REPOSITORY", "")

pytestmark = pytest.mark.skipif(
    not (ENDPOINT and REPOSITORY),
    reason="GRAPHDB_INTEGRATION_ENDPOINT / GRAPHDB_INTEGRATION_REPOSITORY not set",
)


@pytest.fixture
async def executor():
    repo = RepositoryRef(
        endpoint=ENDPOINT,
        repository=REPOSITORY,
        username=os.getenv("GRAPHDB_USERNAME", ""),
        password=os.getenv("GRAPHDB_PASSWORD", ""),
    )
    async with SparqlExecutor(repo, timeout=60.0) as ex:
        yield ex


async def test_listing_has_fixed_views(executor):
    resources = await ViewResolver(executor).enumerate()
    assert len(resources) >= 4
    assert resources[0].uri.endswith("/classes")


async def test_statistics(executor):
    payload = await ViewResolver(executor).resolve(
        ResourceAddress(repository=REPOSITORY, view=ViewKind.STATS)
    )
    assert "statistics" in payload.to_dict()


async def test_sparql_query_tool_formats(executor):
    dispatcher = ToolDispatcher(executor)
    query = "SELECT ?s WHERE { ?s ?p ?o } LIMIT 1"

    as_json = await dispatcher.call_tool("sparqlQuery", {"query": query})
    assert not as_json.is_error
    assert json.loads(as_json.content)["head"]["vars"] == ["s"]

    as_csv = await dispatcher.call_tool("sparqlQuery", {"query": query, "format": "csv"})
    assert not as_csv.is_error
    assert as_csv.content.splitlines()[0].strip() == "s"


async def test_bad_query_is_in_band_error(executor):
    result = await ToolDispatcher(executor).call_tool("sparqlQuery", {"query": "SELEC"})
    assert result.is_error
    assert "400" in result.content
