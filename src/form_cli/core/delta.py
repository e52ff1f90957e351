"""
Triple serialization and submission deltas.

Field values are turned into rdflib terms so literal escaping is handled by
rdflib; triples are rendered to N3 text only when a request body is built.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field as dataclass_field
from typing import Callable, Iterable, Sequence

from rdflib import Literal, URIRef
from rdflib.term import Identifier

from ..kernel.types import Field, FieldType, Value
from ..kernel.vocab import PROV, RDF, SOLID, XSD
from .rendering import parse_instant

logger = logging.getLogger(__name__)

Triple = tuple[URIRef, URIRef, Identifier]


# =============================================================================
# VALUE TERMS
# =============================================================================

def _text_term(value: Value) -> Identifier | None:
    return Literal(value.raw)


def _choice_term(value: Value) -> Identifier | None:
    return URIRef(value.raw)


def _boolean_term(value: Value) -> Identifier | None:
    return Literal(value.raw == "true")


def _date_term(value: Value) -> Identifier | None:
    try:
        moment = parse_instant(value.raw)
    except ValueError:
        logger.warning(f"Skipping unparsable date '{value.raw}'")
        return None
    return Literal(moment.date().isoformat(), datatype=XSD.date)


def _unknown_term(value: Value) -> Identifier | None:
    return None


TERM_BUILDERS: dict[FieldType, Callable[[Value], Identifier | None]] = {
    FieldType.SINGLE_LINE_TEXT: _text_term,
    FieldType.MULTI_LINE_TEXT: _text_term,
    FieldType.CHOICE: _choice_term,
    FieldType.DATE: _date_term,
    FieldType.BOOLEAN: _boolean_term,
    FieldType.UNKNOWN: _unknown_term,
}


def _unique(triples: Iterable[Triple]) -> list[Triple]:
    seen: set[Triple] = set()
    ordered = []
    for triple in triples:
        if triple not in seen:
            seen.add(triple)
            ordered.append(triple)
    return ordered


def serialize_fields(
    fields: Sequence[Field],
    subject: str | None = None,
    target_class: str | None = None,
    form_iri: str | None = None,
) -> list[Triple]:
    """
    Triples for the values of `fields`.

    With `subject`, every value is written on that subject, which is also
    typed with `target_class` and linked to the generating form. Without it,
    each value keeps the subject it was bound from.
    """
    triples: list[Triple] = []
    if subject is not None:
        if target_class:
            triples.append((URIRef(subject), RDF.type, URIRef(target_class)))
        if form_iri:
            triples.append((URIRef(subject), PROV.wasGeneratedBy, URIRef(form_iri)))

    for field in fields:
        if field.field_type is FieldType.UNKNOWN and field.values:
            logger.warning(
                f"Not serializing '{field.display_name}': unsupported type '{field.type_name}'"
            )
            continue
        for value in field.values:
            owner = subject if subject is not None else value.origin_subject
            if owner is None:
                logger.debug(f"Value '{value.raw}' of {field.display_name} has no subject")
                continue
            term = TERM_BUILDERS[field.field_type](value)
            if term is not None:
                triples.append((URIRef(owner), URIRef(field.property), term))

    return _unique(triples)


# =============================================================================
# DELTA
# =============================================================================

@dataclass
class Delta:
    """Insert and delete triple sets of a submission."""

    inserts: list[Triple] = dataclass_field(default_factory=list)
    deletes: list[Triple] = dataclass_field(default_factory=list)

    @property
    def net_inserts(self) -> list[Triple]:
        """Inserted triples that are not also deleted."""
        deleted = set(self.deletes)
        return [t for t in self.inserts if t not in deleted]

    @property
    def net_deletes(self) -> list[Triple]:
        """Deleted triples that are not inserted again."""
        inserted = set(self.inserts)
        return [t for t in self.deletes if t not in inserted]


def original_subjects(original: Sequence[Field]) -> list[str]:
    """Distinct subjects the original values were bound from, in encounter order."""
    subjects: list[str] = []
    for field in original:
        for value in field.values:
            if value.origin_subject and value.origin_subject not in subjects:
                subjects.append(value.origin_subject)
    return subjects


def compute_delta(
    fields: Sequence[Field],
    original: Sequence[Field],
    target_class: str | None,
    subject: str | None = None,
    form_iri: str | None = None,
) -> Delta:
    """
    Delta between the edited fields and the snapshot taken before editing.

    Every subject in the snapshot loses its type triple and all of its
    original values; the current values are inserted on `subject`.
    """
    inserts = serialize_fields(fields, subject, target_class, form_iri)

    deletes: list[Triple] = []
    if target_class:
        deletes += [
            (URIRef(s), RDF.type, URIRef(target_class))
            for s in original_subjects(original)
        ]
    deletes += serialize_fields(original)

    return Delta(inserts=inserts, deletes=_unique(deletes))


# =============================================================================
# N3 RENDERING
# =============================================================================

def term_n3(term: Identifier) -> str:
    """N3 form of a term; booleans use the bare true/false token."""
    if isinstance(term, Literal) and term.datatype == XSD.boolean:
        return "true" if term.toPython() is True else "false"
    return term.n3()


def render_triples(triples: Iterable[Triple], indent: str = "") -> str:
    return "\n".join(
        f"{indent}{term_n3(s)} {term_n3(p)} {term_n3(o)} ." for s, p, o in triples
    )


def build_patch(delta: Delta) -> str:
    """
    N3 insert/delete patch document.

    The deletes block is only written when there is something to delete.
    """
    lines = [
        f"@prefix solid: <{SOLID}> .",
        "_:patch a solid:InsertDeletePatch ;",
        "  solid:inserts {",
    ]
    if delta.inserts:
        lines.append(render_triples(delta.inserts, indent="    "))
    if delta.deletes:
        lines.append("  } ;")
        lines.append("  solid:deletes {")
        lines.append(render_triples(delta.deletes, indent="    "))
    lines.append("  } .")
    return "\n".join(lines) + "\n"
