"""
Display rule for field values.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from rich.markup import escape

from ..kernel.types import Field, FieldType, Value

logger = logging.getLogger(__name__)

# Shown for a Choice value that matches none of the field's options
NO_LABEL = "(no label)"


def parse_instant(raw: str) -> datetime:
    """
    Parse an ISO-8601 date or instant.

    A trailing 'Z' is read as UTC. Raises ValueError on anything else
    fromisoformat rejects.
    """
    text = raw.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def format_timestamp(raw: str) -> str:
    """Locale-independent rendering of an ISO-8601 instant."""
    try:
        moment = parse_instant(raw)
    except ValueError:
        logger.warning(f"'{raw}' is not an ISO-8601 date")
        return raw
    text = moment.strftime("%Y-%m-%d %H:%M:%S")
    if moment.tzinfo is not None:
        text += f" {moment.strftime('%Z')}"
    return text


def _render_text(field: Field, value: Value) -> str:
    return value.raw


def _render_choice(field: Field, value: Value) -> str:
    label = field.option_label(value.raw)
    return label if label is not None else NO_LABEL


def _render_date(field: Field, value: Value) -> str:
    return format_timestamp(value.raw)


def _render_boolean(field: Field, value: Value) -> str:
    return "Yes" if value.raw == "true" else "No"


def _render_unknown(field: Field, value: Value) -> None:
    logger.warning(f"Cannot display values of unsupported type '{field.type_name}'")
    return None


RENDERERS: dict[FieldType, Callable[[Field, Value], str | None]] = {
    FieldType.SINGLE_LINE_TEXT: _render_text,
    FieldType.MULTI_LINE_TEXT: _render_text,
    FieldType.CHOICE: _render_choice,
    FieldType.DATE: _render_date,
    FieldType.BOOLEAN: _render_boolean,
    FieldType.UNKNOWN: _render_unknown,
}


def render_value(field: Field, value: Value) -> str | None:
    """
    Human-readable form of `value`.

    Returns None for fields of unsupported type.
    """
    return RENDERERS[field.field_type](field, value)


def format_answers(field: Field) -> str:
    """Rich-markup summary of a field: its label and one line per value."""
    lines = [f"[bold]{escape(field.display_name)}[/bold]"]
    for value in field.values:
        rendered = render_value(field, value)
        if rendered is not None:
            lines.append(f"- {escape(rendered)}")
    return "\n".join(lines)
