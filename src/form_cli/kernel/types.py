"""
Form kernel: core types shared by every stage of a session.

- FieldType: closed set of supported form inputs (plus UNKNOWN)
- Field, Value, Option: a form input, its current data and its choices
- ExecutionTarget, Policy: resolved submission rules
"""
from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field as PydanticField


class FieldType(Enum):
    """
    Supported field kinds, keyed by the local name of the ui: class.

    UNKNOWN keeps fields of unrecognized classes in the form so later stages
    can warn about them instead of failing.
    """
    SINGLE_LINE_TEXT = "SingleLineTextField"
    MULTI_LINE_TEXT = "MultiLineTextField"
    CHOICE = "Choice"
    DATE = "DateField"
    BOOLEAN = "BooleanField"
    UNKNOWN = "Unknown"

    @classmethod
    def from_local_name(cls, name: str) -> FieldType:
        for member in cls:
            if member is not cls.UNKNOWN and member.value == name:
                return member
        return cls.UNKNOWN

    @property
    def is_text(self) -> bool:
        return self in (FieldType.SINGLE_LINE_TEXT, FieldType.MULTI_LINE_TEXT)


class Option(BaseModel):
    """One selectable value of a Choice field."""
    value: str
    label: str

    model_config = {"frozen": True}


class Value(BaseModel):
    """
    One datum assigned to a field.

    `origin_subject` is set only for values bound from existing data; fresh
    values take the subject chosen later in the session.
    """
    raw: str
    origin_subject: Optional[str] = None

    model_config = {"frozen": True}


class Field(BaseModel):
    """A form input definition together with its current values."""
    field_type: FieldType
    type_name: str = PydanticField(description="Local name of the declared ui: class")
    property: str
    label: Optional[str] = None
    source_class: Optional[str] = None
    required: bool = False
    multiple: bool = False
    sequence: Optional[int] = None
    options: list[Option] = PydanticField(default_factory=list)
    values: list[Value] = PydanticField(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.label or self.property

    def option_label(self, raw: str) -> Optional[str]:
        """Label of the option whose value equals `raw`, if any."""
        for option in self.options:
            if option.value == raw:
                return option.label
        return None


class ExecutionTarget(Enum):
    """Dispatch channel selected by a policy, keyed by the local name of its IRI."""
    HTTP_REQUEST = "httpRequest"
    PATCH = "n3Patch"
    REDIRECT = "redirect"
    UNKNOWN = "unknown"

    @classmethod
    def from_iri(cls, iri: str) -> ExecutionTarget:
        local = local_name(iri)
        for member in cls:
            if member is not cls.UNKNOWN and member.value == local:
                return member
        return cls.UNKNOWN


class Policy(BaseModel):
    """A submission rule resolved for the submit event."""
    target: ExecutionTarget
    target_iri: str
    url: str
    method: Optional[str] = None
    content_type: Optional[str] = None

    model_config = {"frozen": True}


def local_name(iri: str) -> str:
    """Fragment of an IRI, or its last path segment when there is none."""
    if "#" in iri:
        return iri.rsplit("#", 1)[1]
    return iri.rstrip("/").rsplit("/", 1)[-1]
