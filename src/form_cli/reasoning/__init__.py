"""
Form reasoning: field editing state machine and submit policy resolution.
"""
from .editing import (
    ACTION_RULES,
    EditAction,
    EditState,
    FieldEditor,
    FieldStatus,
    can_add_value,
    edit_fields,
    legal_actions,
)
from .policy import resolve_policies, submit_event_facts

__all__ = [
    "ACTION_RULES",
    "EditAction",
    "EditState",
    "FieldEditor",
    "FieldStatus",
    "can_add_value",
    "edit_fields",
    "legal_actions",
    "resolve_policies",
    "submit_event_facts",
]
