"""
SPARQL texts behind every resource view and the listGraphs tool.

Repository-wide views use fixed queries; graph views are scoped with an
explicit ``FROM <iri>`` clause built by the helpers at the bottom.
"""

PREFIXES = """\
PREFIX rdf: <http://www.w3.org/1999/02/22-rdf-syntax-ns#>
PREFIX rdfs: <http://www.w3.org/2000/01/rdf-schema#>
PREFIX owl: <http://www.w3.org/2002/07/owl#>
"""

# ─── Discovery ──────────────────────────────────────────────

LIST_GRAPHS = """\
SELECT DISTINCT ?graph
WHERE {
  GRAPH ?graph { ?s ?p ?o }
}
ORDER BY ?graph
"""

# ─── Repository-wide views ──────────────────────────────────

CLASS_LIST = PREFIXES + """\
SELECT DISTINCT ?class ?label ?comment (COUNT(?instance) AS ?count)
WHERE {
  {
    ?class a rdfs:Class .
  } UNION {
    ?class a owl:Class .
  }
  OPTIONAL { ?instance a ?class }
  OPTIONAL { ?class rdfs:label ?label }
  OPTIONAL { ?class rdfs:comment ?comment }
}
GROUP BY ?class ?label ?comment
ORDER BY DESC(?count)
"""

PREDICATE_LIST = PREFIXES + """\
SELECT DISTINCT ?predicate ?label ?comment (COUNT(*) AS ?usage)
WHERE {
  ?s ?predicate ?o .
  OPTIONAL { ?predicate rdfs:label ?label }
  OPTIONAL { ?predicate rdfs:comment ?comment }
}
GROUP BY ?predicate ?label ?comment
ORDER BY DESC(?usage)
LIMIT 100
"""

REPOSITORY_COUNTS = """\
SELECT
  (COUNT(DISTINCT ?s) AS ?subjects)
  (COUNT(DISTINCT ?p) AS ?predicates)
  (COUNT(DISTINCT ?o) AS ?objects)
  (COUNT(*) AS ?triples)
WHERE {
  ?s ?p ?o .
}
"""

GRAPH_COUNT = """\
SELECT (COUNT(DISTINCT ?g) AS ?graphs)
WHERE {
  GRAPH ?g { ?s ?p ?o }
}
"""

SAMPLE_DATA = """\
SELECT ?subject ?predicate ?object
WHERE {
  ?subject ?predicate ?object
}
LIMIT 50
"""


# ─── Graph-scoped views ─────────────────────────────────────


def graph_sample(graph: str) -> str:
    return f"""\
SELECT ?subject ?predicate ?object
FROM <{graph}>
WHERE {{
  ?subject ?predicate ?object
}}
LIMIT 100
"""


def graph_counts(graph: str) -> str:
    return f"""\
SELECT (COUNT(*) AS ?triples) (COUNT(DISTINCT ?s) AS ?subjects) (COUNT(DISTINCT ?p) AS ?predicates)
FROM <{graph}>
WHERE {{
  ?s ?p ?o .
}}
"""


def graph_classes(graph: str) -> str:
    return PREFIXES + f"""\
SELECT DISTINCT ?class
FROM <{graph}>
WHERE {{
  {{
    ?class a rdfs:Class .
  }} UNION {{
    ?class a owl:Class .
  }}
}}
LIMIT 20
"""
