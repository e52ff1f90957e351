"""
Form kernel: types and vocabularies.

Provides:
- FieldType, Field, Value, Option: form inputs and their data
- ExecutionTarget, Policy: resolved submission rules
- Vocabulary namespaces used to query form and policy graphs
"""
from .types import (
    ExecutionTarget,
    Field,
    FieldType,
    Option,
    Policy,
    Value,
    local_name,
)

__all__ = [
    "ExecutionTarget",
    "Field",
    "FieldType",
    "Option",
    "Policy",
    "Value",
    "local_name",
]
