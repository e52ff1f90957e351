"""
Data Binding Resolver.

Binds fields to the values already present in a data graph for instances of
the form's target class, and captures the pre-edit snapshot.
"""

from __future__ import annotations

import logging

from ..kernel.types import Field, Value
from ..kernel.vocab import QUERY_PREFIXES
from ..shell.documents import base_iri_for
from .context import FormContext

logger = logging.getLogger(__name__)


VALUES_QUERY = QUERY_PREFIXES + """
SELECT ?s ?value WHERE {{
  ?s a <{target_class}> ;
    <{property}> ?value .
}}
"""


async def query_field_values(
    ctx: FormContext,
    data_graph: str | None,
    field: Field,
    target_class: str | None,
    data_iri: str | None = None,
) -> list[Value]:
    """
    Existing values of `field.property` on instances of `target_class`.

    An absent or empty data graph yields no values.
    """
    if not data_graph or not target_class:
        return []

    rows = await ctx.engine.query_bindings(
        data_graph,
        VALUES_QUERY.format(target_class=target_class, property=field.property),
        base_iri_for(data_iri) if data_iri else None,
    )
    values = [Value(raw=str(row["value"]), origin_subject=str(row["s"])) for row in rows]

    if not field.multiple and len(values) > 1:
        logger.warning(
            f"Multiple values found for {field.display_name} while only one is expected."
        )
    return values


async def bind_fields(
    ctx: FormContext,
    data_graph: str | None,
    fields: list[Field],
    target_class: str | None,
    data_iri: str | None = None,
) -> None:
    """Replace every field's values with the values bound from `data_graph`."""
    for field in fields:
        field.values = await query_field_values(ctx, data_graph, field, target_class, data_iri)


def snapshot_fields(fields: list[Field]) -> tuple[Field, ...]:
    """
    Deep copy of the fields taken right after binding.

    Used as the delete side of the submission delta; nothing mutates it.
    """
    return tuple(field.model_copy(deep=True) for field in fields)
