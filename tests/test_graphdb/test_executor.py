"""
Unit tests for the SPARQL executor.

The remote endpoint is replaced by ``httpx.MockTransport`` so the tests
see exactly what goes over the wire.
"""

import base64
import json

import httpx
import pytest

from src.graphdb.config import RepositoryRef
from src.graphdb.executor import ResultFormat, SparqlExecutor
from src.shared.exceptions import QueryFailure
from tests.helpers.sparql import results_json, uri

QUERY = "SELECT ?graph WHERE { GRAPH ?graph { ?s ?p ?o } }"


def _executor(repo: RepositoryRef, handler) -> SparqlExecutor:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SparqlExecutor(repo, client=client)


class Recorder:
    """Mock transport handler that remembers the last request."""

    def __init__(self, response: httpx.Response):
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response


@pytest.fixture
def ok_json() -> Recorder:
    body = results_json(["graph"], [{"graph": uri("urn:a")}])
    return Recorder(httpx.Response(200, json=body))


class TestRequestShape:

    async def test_posts_query_to_repository(self, repo_ref, ok_json):
        executor = _executor(repo_ref, ok_json)
        await executor.execute(QUERY)

        request = ok_json.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "http://localhost:7200/repositories/movies"
        assert request.content == QUERY.encode("utf-8")
        assert request.headers["Content-Type"] == "application/sparql-query"
        assert request.headers["Accept"] == "application/sparql-results+json"

    async def test_no_credentials_no_auth_headers(self, repo_ref, ok_json):
        await _executor(repo_ref, ok_json).execute(QUERY)
        headers = ok_json.requests[0].headers
        assert "Authorization" not in headers
        assert "CF-Access-Client-Id" not in headers

    async def test_basic_auth_header(self, ok_json):
        repo = RepositoryRef(
            endpoint="http://localhost:7200", repository="movies",
            username="admin", password="s3cret",
        )
        await _executor(repo, ok_json).execute(QUERY)

        expected = base64.b64encode(b"admin:s3cret").decode()
        assert ok_json.requests[0].headers["Authorization"] == f"Basic {expected}"

    async def test_partial_basic_auth_is_ignored(self, ok_json):
        repo = RepositoryRef(
            endpoint="http://localhost:7200", repository="movies", username="admin",
        )
        await _executor(repo, ok_json).execute(QUERY)
        assert "Authorization" not in ok_json.requests[0].headers

    async def test_access_credential_headers(self, ok_json):
        repo = RepositoryRef(
            endpoint="http://localhost:7200", repository="movies",
            access_client_id="client-id", access_client_secret="client-secret",
        )
        await _executor(repo, ok_json).execute(QUERY)

        headers = ok_json.requests[0].headers
        assert headers["CF-Access-Client-Id"] == "client-id"
        assert headers["CF-Access-Client-Secret"] == "client-secret"

    async def test_partial_access_credentials_are_ignored(self, ok_json):
        repo = RepositoryRef(
            endpoint="http://localhost:7200", repository="movies",
            access_client_id="client-id",
        )
        await _executor(repo, ok_json).execute(QUERY)
        assert "CF-Access-Client-Id" not in ok_json.requests[0].headers

    async def test_trailing_slash_on_endpoint(self, ok_json):
        repo = RepositoryRef(endpoint="http://localhost:7200/", repository="movies")
        await _executor(repo, ok_json).execute(QUERY)
        assert str(ok_json.requests[0].url) == "http://localhost:7200/repositories/movies"


class TestExecute:

    async def test_decodes_envelope(self, repo_ref, ok_json):
        result = await _executor(repo_ref, ok_json).execute(QUERY)
        assert result.variables == ["graph"]
        assert result.values("graph") == ["urn:a"]

    async def test_ask_result(self, repo_ref):
        recorder = Recorder(httpx.Response(200, json={"head": {}, "boolean": True}))
        result = await _executor(repo_ref, recorder).execute("ASK { ?s ?p ?o }")
        assert result.boolean is True
        assert result.bindings == []

    async def test_non_success_status(self, repo_ref):
        recorder = Recorder(httpx.Response(400, text="MALFORMED QUERY"))
        with pytest.raises(QueryFailure) as exc_info:
            await _executor(repo_ref, recorder).execute("SELECT")

        failure = exc_info.value
        assert failure.status == 400
        assert failure.status_text == "Bad Request"
        assert not failure.is_transport
        assert "GraphDB query failed: 400 Bad Request" in str(failure)

    async def test_failure_is_not_retried(self, repo_ref):
        recorder = Recorder(httpx.Response(503))
        with pytest.raises(QueryFailure):
            await _executor(repo_ref, recorder).execute(QUERY)
        assert len(recorder.requests) == 1

    async def test_connection_error(self, repo_ref):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        with pytest.raises(QueryFailure) as exc_info:
            await _executor(repo_ref, refuse).execute(QUERY)

        failure = exc_info.value
        assert failure.is_transport
        assert failure.status is None
        assert "Connection refused" in failure.transport_error

    async def test_timeout(self, repo_ref):
        def slow(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(QueryFailure) as exc_info:
            await _executor(repo_ref, slow).execute(QUERY)
        assert exc_info.value.is_transport

    async def test_body_not_json(self, repo_ref):
        recorder = Recorder(httpx.Response(200, text="<html>proxy login</html>"))
        with pytest.raises(QueryFailure) as exc_info:
            await _executor(repo_ref, recorder).execute(QUERY)
        assert exc_info.value.is_transport

    async def test_binding_with_undeclared_variable(self, repo_ref):
        body = results_json(["s"], [{"s": uri("urn:a"), "o": uri("urn:b")}])
        recorder = Recorder(httpx.Response(200, content=json.dumps(body).encode()))
        with pytest.raises(QueryFailure) as exc_info:
            await _executor(repo_ref, recorder).execute(QUERY)
        assert "malformed response" in exc_info.value.transport_error


class TestExecuteRaw:

    @pytest.mark.parametrize("fmt, media_type", [
        (ResultFormat.XML, "application/sparql-results+xml"),
        (ResultFormat.CSV, "text/csv"),
    ])
    async def test_passes_body_through(self, repo_ref, fmt, media_type):
        recorder = Recorder(httpx.Response(200, content=b"graph\r\nurn:a\r\n"))
        body = await _executor(repo_ref, recorder).execute_raw(QUERY, fmt)

        assert body == b"graph\r\nurn:a\r\n"
        assert recorder.requests[0].headers["Accept"] == media_type

    async def test_non_success_status(self, repo_ref):
        recorder = Recorder(httpx.Response(401))
        with pytest.raises(QueryFailure) as exc_info:
            await _executor(repo_ref, recorder).execute_raw(QUERY, ResultFormat.CSV)
        assert exc_info.value.status == 401


class TestLifecycle:

    async def test_injected_client_is_left_open(self, repo_ref, ok_json):
        client = httpx.AsyncClient(transport=httpx.MockTransport(ok_json))
        async with SparqlExecutor(repo_ref, client=client) as executor:
            await executor.execute(QUERY)
        assert not client.is_closed
        await client.aclose()

    async def test_owned_client_is_closed(self, repo_ref):
        executor = SparqlExecutor(repo_ref)
        await executor.aclose()
        assert executor._client.is_closed
