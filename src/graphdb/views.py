"""
View Resolver. Turns resource addresses into query results.

Each view runs a fixed set of queries from ``queries.py`` and returns a
typed payload; ``enumerate`` builds the resource listing from the graphs
currently present in the repository.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from src.graphdb import queries
from src.graphdb.addressing import (
    FIXED_VIEWS,
    ResourceAddress,
    ViewKind,
    build_resource_uri,
)
from src.graphdb.executor import SparqlExecutor
from src.graphdb.models import Binding, RdfTerm, SparqlResults, binding_to_dict
from src.shared.exceptions import AddressError, QueryFailure

logger = logging.getLogger("graphdb.views")

JSON_MIME_TYPE = "application/json"

_FIXED_VIEW_LABELS = {
    ViewKind.CLASSES: "class list",
    ViewKind.PREDICATES: "predicates",
    ViewKind.STATS: "statistics",
    ViewKind.SAMPLE: "sample data",
}


# ─── Payloads ────────────────────────────────────────────────


@dataclass(frozen=True)
class ResourceDescriptor:
    """One entry of the resource listing."""

    uri: str
    name: str
    mime_type: str = JSON_MIME_TYPE


@dataclass(frozen=True)
class StatisticsView:
    """Repository-wide counts plus the number of named graphs."""

    counts: Binding = field(default_factory=dict)
    graphs: RdfTerm | None = None

    def to_dict(self) -> dict[str, Any]:
        statistics = binding_to_dict(self.counts) or {}
        if self.graphs is not None:
            statistics["graphs"] = self.graphs.to_dict()
        return {"statistics": statistics}


@dataclass(frozen=True)
class GraphDetailView:
    """Sample rows, counts and declared classes of one named graph."""

    sample_data: list[Binding] = field(default_factory=list)
    metadata: Binding | None = None
    ontology_classes: list[Binding] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sampleData": [binding_to_dict(row) for row in self.sample_data],
            "metadata": binding_to_dict(self.metadata),
            "ontologyClasses": [binding_to_dict(row) for row in self.ontology_classes],
        }


ViewPayload = SparqlResults | StatisticsView | GraphDetailView


# ─── Resolver ────────────────────────────────────────────────


class ViewResolver:
    """Materializes resource views against the executor's repository."""

    def __init__(self, executor: SparqlExecutor):
        self._executor = executor
        self._repo = executor.repository
        self._handlers = {
            ViewKind.CLASSES: self._class_list,
            ViewKind.PREDICATES: self._predicate_list,
            ViewKind.STATS: self._statistics,
            ViewKind.SAMPLE: self._sample,
            ViewKind.GRAPH: self._graph_detail,
        }

    async def discover_graphs(self) -> SparqlResults:
        """Distinct named graphs in the repository, ordered by IRI."""
        return await self._executor.execute(queries.LIST_GRAPHS)

    async def enumerate(self) -> list[ResourceDescriptor]:
        """List the fixed views plus one graph view per named graph.

        Never raises: a failing discovery query yields an empty listing.
        """
        repository = self._repo.repository
        if not repository:
            return []

        try:
            result = await self.discover_graphs()
        except QueryFailure as exc:
            logger.error("Error listing resources: %s", exc)
            return []

        resources = [
            ResourceDescriptor(
                uri=build_resource_uri(self._repo, kind),
                name=f"Repository '{repository}' {_FIXED_VIEW_LABELS[kind]}",
            )
            for kind in FIXED_VIEWS
        ]
        for graph in result.values("graph"):
            resources.append(ResourceDescriptor(
                uri=build_resource_uri(self._repo, ViewKind.GRAPH, graph),
                name=f"Graph '{graph}'",
            ))
        return resources

    async def resolve(self, address: ResourceAddress) -> ViewPayload:
        """Run the queries behind ``address`` and assemble the payload.

        Raises:
            AddressError: If the address does not name a readable view.
            QueryFailure: If a required query fails.
        """
        handler = self._handlers.get(address.view)
        if handler is None:
            raise AddressError("Invalid resource URI", reason=AddressError.INVALID_VIEW)
        return await handler(address)

    # ─── Views ────────────────────────────────────────────

    async def _class_list(self, address: ResourceAddress) -> SparqlResults:
        return await self._executor.execute(queries.CLASS_LIST)

    async def _predicate_list(self, address: ResourceAddress) -> SparqlResults:
        return await self._executor.execute(queries.PREDICATE_LIST)

    async def _sample(self, address: ResourceAddress) -> SparqlResults:
        return await self._executor.execute(queries.SAMPLE_DATA)

    async def _statistics(self, address: ResourceAddress) -> StatisticsView:
        counts = await self._executor.execute(queries.REPOSITORY_COUNTS)
        graph_count = await self._executor.execute(queries.GRAPH_COUNT)
        graph_row = graph_count.first_row() or {}
        return StatisticsView(
            counts=counts.first_row() or {},
            graphs=graph_row.get("graphs"),
        )

    async def _graph_detail(self, address: ResourceAddress) -> GraphDetailView:
        graph = address.graph
        sample = await self._executor.execute(queries.graph_sample(graph))
        metadata = await self._executor.execute(queries.graph_counts(graph))

        # Graphs without class declarations are normal; the class list is optional
        try:
            classes = (await self._executor.execute(queries.graph_classes(graph))).bindings
        except QueryFailure as exc:
            logger.warning("Ontology class lookup failed for graph %s: %s", graph, exc)
            classes = []

        return GraphDetailView(
            sample_data=sample.bindings,
            metadata=metadata.first_row(),
            ontology_classes=classes,
        )
