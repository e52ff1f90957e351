"""
Form Schema Resolver.

Turns a form description graph into an ordered list of fields and the class
that submitted data will instantiate.
"""

from __future__ import annotations

import logging

from ..kernel.types import Field, FieldType, Option, local_name
from ..kernel.vocab import QUERY_PREFIXES
from .context import FormContext
from ..shell.documents import base_iri_for

logger = logging.getLogger(__name__)


FIELDS_QUERY = QUERY_PREFIXES + """
SELECT ?type ?property ?label ?from ?required ?multiple ?sequence WHERE {{
  <{form}> ui:parts ?list .
  ?list rdf:rest*/rdf:first ?field .
  ?field a ?type ;
    ui:property ?property .
  OPTIONAL {{ ?field ui:label ?label . }}
  OPTIONAL {{ ?field ui:from ?from . }}
  OPTIONAL {{ ?field ui:required ?required . }}
  OPTIONAL {{ ?field ui:multiple ?multiple . }}
  OPTIONAL {{ ?field ui:sequence ?sequence . }}
}}
"""

TARGET_CLASS_QUERY = QUERY_PREFIXES + """
SELECT ?targetClass WHERE {{
  <{form}> ui:property ?targetClass .
}}
"""

OPTIONS_QUERY = QUERY_PREFIXES + """
SELECT ?value ?label WHERE {{
  ?value a <{source_class}> ;
    skos:prefLabel ?label .
}}
"""


def _as_bool(term) -> bool:
    return term is not None and str(term).strip().lower() == "true"


def _as_int(term) -> int | None:
    if term is None:
        return None
    try:
        return int(str(term))
    except ValueError:
        logger.warning(f"Ignoring non-integer sequence value '{term}'")
        return None


def sort_fields(fields: list[Field]) -> list[Field]:
    """
    Order fields by ascending sequence.

    Fields without a sequence go after all sequenced ones; ties keep their
    encounter order.
    """
    return sorted(
        fields,
        key=lambda f: (f.sequence is None, f.sequence if f.sequence is not None else 0),
    )


def field_from_row(row: dict) -> Field:
    type_name = local_name(str(row["type"]))
    field_type = FieldType.from_local_name(type_name)
    label = row.get("label")
    source = row.get("from")
    return Field(
        field_type=field_type,
        type_name=type_name,
        property=str(row["property"]),
        label=str(label) if label is not None else None,
        source_class=str(source) if source is not None else None,
        required=_as_bool(row.get("required")),
        multiple=_as_bool(row.get("multiple")),
        sequence=_as_int(row.get("sequence")),
    )


async def resolve_options(ctx: FormContext, form_graph: str, form_iri: str, field: Field) -> list[Option]:
    """Options of a Choice field: labelled instances of its source class."""
    if not field.source_class:
        logger.warning(f"Choice field '{field.display_name}' has no ui:from class")
        return []
    rows = await ctx.engine.query_bindings(
        form_graph,
        OPTIONS_QUERY.format(source_class=field.source_class),
        base_iri_for(form_iri),
    )
    return [Option(value=str(row["value"]), label=str(row["label"])) for row in rows]


async def resolve_form(ctx: FormContext, form_graph: str, form_iri: str) -> tuple[list[Field], str | None]:
    """
    Resolve the fields of `form_iri` and its target class.

    Returns (fields sorted by sequence, target class IRI or None).
    """
    base = base_iri_for(form_iri)
    rows = await ctx.engine.query_bindings(form_graph, FIELDS_QUERY.format(form=form_iri), base)
    fields = sort_fields([field_from_row(row) for row in rows])

    for field in fields:
        if field.field_type is FieldType.UNKNOWN:
            logger.warning(
                f"Field '{field.display_name}' has unsupported type '{field.type_name}'"
            )
        elif field.field_type is FieldType.CHOICE:
            field.options = await resolve_options(ctx, form_graph, form_iri, field)

    target_rows = await ctx.engine.query_bindings(
        form_graph, TARGET_CLASS_QUERY.format(form=form_iri), base
    )
    target_class = str(target_rows[0]["targetClass"]) if target_rows else None
    if target_class is None:
        logger.warning(f"Form {form_iri} declares no target class")

    logger.info(f"Resolved {len(fields)} fields for {form_iri}")
    return fields, target_class
