"""
Policy Resolver

Derives which submission policies fire for the submit event of a form:
the form graph doubles as the rule set, the event is the only fact.
"""

from __future__ import annotations

import logging

from ..kernel.types import ExecutionTarget, Policy
from ..kernel.vocab import EX, QUERY_PREFIXES
from ..core.context import FormContext
from ..shell.documents import base_iri_for

logger = logging.getLogger(__name__)


POLICIES_QUERY = QUERY_PREFIXES + """
SELECT ?executionTarget ?url ?method ?contentType WHERE {
  ?id pol:policy ?policy .
  ?policy a fno:Execution ;
    fno:executes ?executionTarget ;
    http:requestURI ?url .
  OPTIONAL { ?policy http:methodName ?method . }
  OPTIONAL {
    ?policy http:headers ?headerList .
    ?headerList rdf:rest*/rdf:first ?header .
    ?header http:fieldName "Content-Type" ;
      http:fieldValue ?contentType .
  }
}
"""


def submit_event_facts(form_iri: str) -> str:
    """Fact graph stating that the form was submitted."""
    return f"@prefix ex: <{EX}> .\n<{form_iri}> ex:event ex:Submit .\n"


def policy_from_row(row: dict) -> Policy:
    target_iri = str(row["executionTarget"])
    method = row.get("method")
    content_type = row.get("contentType")
    return Policy(
        target=ExecutionTarget.from_iri(target_iri),
        target_iri=target_iri,
        url=str(row["url"]),
        method=str(method) if method is not None else None,
        content_type=str(content_type) if content_type is not None else None,
    )


async def resolve_policies(ctx: FormContext, form_graph: str, form_iri: str) -> list[Policy]:
    """
    Policies fired by submitting `form_iri`, in query-result order.

    An empty list means the form has no submit policy.
    """
    derived = await ctx.reasoner.derive(submit_event_facts(form_iri), form_graph)
    rows = await ctx.engine.query_bindings(derived, POLICIES_QUERY, base_iri_for(form_iri))
    policies = [policy_from_row(row) for row in rows]

    if not policies:
        logger.warning("No submit policy found")
    for policy in policies:
        logger.debug(f"Resolved policy {policy.target.value} → {policy.url}")
    return policies
