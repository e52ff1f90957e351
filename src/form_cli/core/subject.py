"""
Subject Resolver.

Decides which entity the collected values are attached to: an existing
instance of the target class, a freshly minted IRI, or free-text input.
"""

from __future__ import annotations

import logging
from uuid import uuid4

from rdflib import URIRef

from ..errors import InvalidSubjectError, UnknownPrefixError
from ..kernel.vocab import QUERY_PREFIXES
from ..shell.documents import base_iri_for
from ..shell.prompts import Choice
from .context import FormContext, PrefixResolver

logger = logging.getLogger(__name__)


SUBJECTS_QUERY = QUERY_PREFIXES + """
SELECT DISTINCT ?s WHERE {{
  ?s a <{target_class}> .
}}
"""

# Sentinel value of the free-text entry in the subject list
OTHER = object()


def generate_subject(data_iri: str | None = None) -> str:
    """A fresh identifier, local to the data document when one is known."""
    token = uuid4().hex
    if data_iri:
        return f"{base_iri_for(data_iri)}#{token}"
    return f"urn:uuid:{token}"


async def existing_subjects(
    ctx: FormContext,
    data_graph: str | None,
    target_class: str | None,
    data_iri: str | None = None,
) -> list[str]:
    if not data_graph or not target_class:
        return []
    rows = await ctx.engine.query_bindings(
        data_graph,
        SUBJECTS_QUERY.format(target_class=target_class),
        base_iri_for(data_iri) if data_iri else None,
    )
    return [str(row["s"]) for row in rows]


def check_iri(iri: str) -> str:
    """Return `iri` unchanged if rdflib can serialize it, else raise InvalidSubjectError."""
    try:
        URIRef(iri).n3()
    except Exception as e:
        # rdflib raises a bare Exception for characters not allowed in IRIs
        raise InvalidSubjectError(f"'{iri}' is not a valid IRI") from e
    return iri


async def expand_subject(text: str, prefixes: PrefixResolver) -> str:
    """
    Turn free-text input into a subject IRI.

    Full IRIs (containing '://') are kept as typed. Prefixed names are
    expanded through the prefix service. Raises InvalidSubjectError when the
    input is neither, or when the result cannot be written as an N3 IRI.
    """
    text = text.strip()
    if ":" not in text:
        raise InvalidSubjectError(f"'{text}' is neither an IRI nor a prefixed name")
    if "://" in text:
        return check_iri(text)

    prefix, local = text.split(":", 1)
    namespace = await prefixes.resolve(prefix)
    if not namespace:
        raise UnknownPrefixError(prefix)
    return check_iri(namespace + local)


async def resolve_subject(
    ctx: FormContext,
    data_graph: str | None,
    target_class: str | None,
    data_iri: str | None = None,
) -> str:
    """Ask the user which subject the submitted data describes."""
    candidates = await existing_subjects(ctx, data_graph, target_class, data_iri)
    generated = generate_subject(data_iri)

    choices = [Choice(title=s, value=s) for s in candidates]
    choices.append(Choice(title=f"{generated} (new)", value=generated))
    choices.append(Choice(title="Other", value=OTHER))

    picked = await ctx.prompter.choose("Choose a subject for the data", choices)
    if picked is not OTHER:
        return picked

    while True:
        text = await ctx.prompter.text("Enter a subject IRI or prefixed name")
        try:
            return await expand_subject(text, ctx.prefixes)
        except InvalidSubjectError as e:
            logger.warning(f"Invalid subject: {e}")
