"""
Graph scoping for caller-supplied SPARQL.

This is a textual heuristic, not a SPARQL rewrite: a ``WHERE`` inside a
string literal, a comment or a nested sub-select is indistinguishable
from the real clause keyword.
"""

# Caller scoping that always wins over the graph argument
EXPLICIT_SCOPING_MARKERS = ("FROM <", "GRAPH <")
WHERE_KEYWORD = "WHERE"


def scope_to_graph(query: str, graph: str | None = None) -> str:
    """Restrict ``query`` to the named graph by splicing in ``FROM <graph>``.

    The clause goes immediately before the first ``WHERE``.  The query is
    returned unchanged when no graph is given, when it already names a
    source or graph explicitly, or when there is no ``WHERE`` after the
    first character to insert before.

    Args:
        query: SPARQL query text.
        graph: IRI of the named graph to scope to.

    Returns:
        The (possibly) rewritten query text.
    """
    if not graph:
        return query
    if any(marker in query for marker in EXPLICIT_SCOPING_MARKERS):
        return query

    insert_at = query.find(WHERE_KEYWORD)
    if insert_at <= 0:
        return query
    return f"{query[:insert_at]}FROM <{graph}> {query[insert_at:]}"
