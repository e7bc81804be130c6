"""
SPARQL Executor — the only component that talks to the remote endpoint.

POSTs query text to ``<endpoint>/repositories/<repository>`` with the
requested result encoding and whatever credential headers are configured.
Non-2xx answers and transport problems both surface as ``QueryFailure``;
nothing is retried.
"""

import logging
from enum import Enum

import httpx
from pydantic import ValidationError

from src.graphdb.config import RepositoryRef
from src.graphdb.models import SparqlResults
from src.shared.exceptions import QueryFailure

logger = logging.getLogger("graphdb.executor")

SPARQL_QUERY_CONTENT_TYPE = "application/sparql-query"


class ResultFormat(str, Enum):
    """Result encodings the repository endpoint can be asked for."""

    JSON = "json"
    XML = "xml"
    CSV = "csv"

    @property
    def media_type(self) -> str:
        return _MEDIA_TYPES[self]


_MEDIA_TYPES = {
    ResultFormat.JSON: "application/sparql-results+json",
    ResultFormat.XML: "application/sparql-results+xml",
    ResultFormat.CSV: "text/csv",
}


class SparqlExecutor:
    """
    Sends SPARQL queries to a single GraphDB repository.

    Usage
    -----
    executor = SparqlExecutor(repo_ref)
    results = await executor.execute("SELECT * WHERE { ?s ?p ?o } LIMIT 5")
    await executor.aclose()

    The executor can also be used as an async context-manager:

        async with SparqlExecutor(repo_ref) as executor:
            await executor.execute(...)
    """

    def __init__(
        self,
        repo: RepositoryRef,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        self._repo = repo
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def repository(self) -> RepositoryRef:
        return self._repo

    # ─── Lifecycle ──────────────────────────────────────────

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "SparqlExecutor":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ─── Queries ────────────────────────────────────────────

    def _headers(self, fmt: ResultFormat) -> dict[str, str]:
        headers = {
            "Content-Type": SPARQL_QUERY_CONTENT_TYPE,
            "Accept": fmt.media_type,
        }
        headers.update(self._repo.credential_headers())
        return headers

    async def _post(self, query: str, fmt: ResultFormat) -> httpx.Response:
        try:
            response = await self._client.post(
                self._repo.repository_url,
                content=query.encode("utf-8"),
                headers=self._headers(fmt),
            )
        except httpx.HTTPError as exc:
            logger.error("Error executing SPARQL query against %s: %s",
                         self._repo.repository_url, exc)
            raise QueryFailure.from_transport(exc) from exc

        if not response.is_success:
            failure = QueryFailure.from_status(response.status_code, response.reason_phrase)
            logger.error("Error executing SPARQL query: %s", failure)
            raise failure
        return response

    async def execute(
        self, query: str, fmt: ResultFormat = ResultFormat.JSON,
    ) -> SparqlResults:
        """Run ``query`` and decode the endpoint's JSON results envelope.

        Args:
            query: SPARQL query text, sent verbatim as the request body.
            fmt: Requested result encoding.  Only JSON can be decoded here;
                use ``execute_raw`` for XML or CSV.

        Returns:
            The validated ``SparqlResults`` envelope.

        Raises:
            QueryFailure: On a non-2xx status, a network error, or a body
                that is not a valid SPARQL JSON results document.
        """
        response = await self._post(query, fmt)
        try:
            return SparqlResults.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            logger.error("Malformed SPARQL results from %s: %s",
                         self._repo.repository_url, exc)
            raise QueryFailure.from_transport(f"malformed response: {exc}") from exc

    async def execute_raw(self, query: str, fmt: ResultFormat) -> bytes:
        """Run ``query`` and return the response body untouched."""
        response = await self._post(query, fmt)
        return response.content
