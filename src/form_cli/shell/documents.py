"""
RDF document loading and graph-pattern queries.

Shell layer: wraps rdflib parsing and SPARQL evaluation behind the narrow
`query_bindings(source, query, base_iri)` capability the core relies on.
"""

import asyncio
import logging
from typing import Protocol

from rdflib import Graph
from rdflib.term import Node

from ..errors import DocumentLoadError
from .http import HttpTransport

logger = logging.getLogger(__name__)

# One row of query results: variable name -> bound term (None when unbound)
Row = dict[str, Node | None]


def base_iri_for(url: str) -> str:
    """Base IRI of a document: its URL without fragment."""
    return url.split("#")[0]


def with_base(content: str, url: str) -> str:
    """Prefix `content` with a base directive unless it already declares one."""
    if "@base" in content or "BASE" in content:
        return content
    return f"@base <{base_iri_for(url)}> .\n{content}"


async def load_document(url: str, transport: HttpTransport) -> str:
    """Fetch an N3 document and make its relative IRIs resolve against its URL."""
    content = await transport.fetch_text(url)
    logger.debug(f"Loaded {len(content)} chars from {url}")
    return with_base(content, url)


class QueryEngine(Protocol):
    """Evaluates a graph-pattern query against an N3 document."""

    async def query_bindings(
        self,
        source: str,
        query: str,
        base_iri: str | None = None,
    ) -> list[Row]:
        ...


class RdfQueryEngine:
    """
    rdflib-backed query engine.

    Parsed graphs are cached per (source, base) so repeated queries over the
    same form document parse it only once.
    """

    def __init__(self, source_format: str = "n3"):
        self.source_format = source_format
        self._graphs: dict[tuple[str, str | None], Graph] = {}

    def parse(self, source: str, base_iri: str | None = None) -> Graph:
        key = (source, base_iri)
        graph = self._graphs.get(key)
        if graph is None:
            graph = Graph()
            if source.strip():
                try:
                    graph.parse(data=source, format=self.source_format, publicID=base_iri)
                except Exception as e:
                    raise DocumentLoadError(base_iri or "<inline>", f"invalid RDF: {e}") from e
            self._graphs[key] = graph
        return graph

    def _evaluate(self, source: str, query: str, base_iri: str | None) -> list[Row]:
        graph = self.parse(source, base_iri)
        result = graph.query(query, base=base_iri)
        variables = [str(var) for var in (result.vars or [])]
        return [
            {name: row[name] for name in variables}
            for row in result
        ]

    async def query_bindings(
        self,
        source: str,
        query: str,
        base_iri: str | None = None,
    ) -> list[Row]:
        return await asyncio.to_thread(self._evaluate, source, query, base_iri)
