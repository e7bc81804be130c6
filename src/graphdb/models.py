"""
SPARQL Result Models

Pydantic models for the SPARQL 1.1 JSON results envelope returned by
the repository endpoint.  Every view and tool works on these instead of
raw dicts, and dumps them back with the wire key names (``xml:lang``).
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RdfTerm(BaseModel):
    """A single bound value: IRI, literal, blank node or quoted triple."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    type: str
    value: Any
    datatype: str | None = None
    lang: str | None = Field(default=None, alias="xml:lang")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


Binding = dict[str, RdfTerm]


class SparqlHead(BaseModel):
    vars: list[str] = Field(default_factory=list)
    link: list[str] | None = None


class SparqlBindings(BaseModel):
    bindings: list[Binding] = Field(default_factory=list)


class SparqlResults(BaseModel):
    """The normalized ``{head, results}`` envelope of one query execution.

    ASK queries come back with ``boolean`` set and no ``results`` block.
    """

    head: SparqlHead = Field(default_factory=SparqlHead)
    results: SparqlBindings | None = None
    boolean: bool | None = None

    @model_validator(mode="after")
    def _bindings_use_declared_vars(self) -> "SparqlResults":
        declared = set(self.head.vars)
        for row in self.bindings:
            undeclared = set(row) - declared
            if undeclared:
                raise ValueError(
                    f"Binding uses undeclared variable(s): {sorted(undeclared)}"
                )
        return self

    @property
    def variables(self) -> list[str]:
        return self.head.vars

    @property
    def bindings(self) -> list[Binding]:
        return self.results.bindings if self.results is not None else []

    def first_row(self) -> Binding | None:
        rows = self.bindings
        return rows[0] if rows else None

    def values(self, variable: str) -> list[Any]:
        """Values bound to ``variable``, in row order, skipping unbound rows."""
        return [row[variable].value for row in self.bindings if variable in row]

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


def binding_to_dict(row: Binding | None) -> dict[str, Any] | None:
    if row is None:
        return None
    return {name: term.to_dict() for name, term in row.items()}
