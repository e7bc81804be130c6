"""
Resource addressing: naming derived views of the repository.

Resource URIs look like::

    graphdb://localhost:7200/repository/<repo>/classes
    graphdb://localhost:7200/repository/<repo>/graph/<percent-encoded IRI>

``parse_resource_uri`` scans the path segment by segment, so anything in
front of the ``repository`` marker is ignored.
"""

from dataclasses import dataclass
from enum import Enum
from urllib.parse import quote, unquote, urlsplit

from src.graphdb.config import RepositoryRef
from src.shared.exceptions import AddressError

REPOSITORY_SEGMENT = "repository"
GRAPH_SEGMENT = "graph"


class ViewKind(str, Enum):
    """Every view a resource URI can name."""

    CLASSES = "classes"
    PREDICATES = "predicates"
    STATS = "stats"
    SAMPLE = "sample"
    GRAPH = "graph"
    NONE = "none"


# Views addressed by a fixed trailing token
FIXED_VIEWS: tuple[ViewKind, ...] = (
    ViewKind.CLASSES,
    ViewKind.PREDICATES,
    ViewKind.STATS,
    ViewKind.SAMPLE,
)
_VIEW_TOKENS = {kind.value: kind for kind in FIXED_VIEWS}


@dataclass(frozen=True)
class ResourceAddress:
    """Typed form of a resource URI."""

    repository: str
    view: ViewKind = ViewKind.NONE
    graph: str | None = None


def parse_resource_uri(uri: str) -> ResourceAddress:
    """Decompose a resource URI into a ``ResourceAddress``.

    Raises:
        AddressError: If no repository name can be found in the path.
    """
    segments = urlsplit(str(uri)).path.split("/")

    repository = ""
    graph = ""
    view = ViewKind.NONE
    for i, segment in enumerate(segments):
        has_next = i + 1 < len(segments)
        if segment == REPOSITORY_SEGMENT and has_next:
            repository = segments[i + 1]
        elif segment == GRAPH_SEGMENT and has_next:
            graph = unquote(segments[i + 1])
        elif segment in _VIEW_TOKENS:
            view = _VIEW_TOKENS[segment]

    if not repository:
        raise AddressError(
            "Invalid resource URI: missing repository name",
            reason=AddressError.MISSING_REPOSITORY,
        )

    if view is ViewKind.NONE and graph:
        return ResourceAddress(repository=repository, view=ViewKind.GRAPH, graph=graph)
    return ResourceAddress(repository=repository, view=view)


def build_resource_uri(
    repo: RepositoryRef, view: ViewKind, graph: str | None = None,
) -> str:
    """Compose the resource URI for ``view`` on the configured repository."""
    prefix = f"{repo.resource_base}/{REPOSITORY_SEGMENT}/{repo.repository}"
    if view is ViewKind.GRAPH:
        if not graph:
            raise ValueError("A graph IRI is required for graph resources")
        return f"{prefix}/{GRAPH_SEGMENT}/{quote(graph, safe='')}"
    if view not in FIXED_VIEWS:
        raise ValueError(f"No resource URI for view kind {view.value!r}")
    return f"{prefix}/{view.value}"
