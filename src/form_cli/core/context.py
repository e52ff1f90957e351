"""
Session context: the handles every component needs, passed explicitly.
"""

from dataclasses import dataclass
from typing import Protocol

from ..shell.documents import QueryEngine
from ..shell.http import HttpTransport
from ..shell.prompts import Prompter
from ..shell.reasoner import Reasoner


class PrefixResolver(Protocol):
    async def resolve(self, prefix: str) -> str | None:
        ...


@dataclass
class FormContext:
    """Collaborators of a form session."""
    engine: QueryEngine
    reasoner: Reasoner
    prompter: Prompter
    transport: HttpTransport
    prefixes: PrefixResolver
    default_content_type: str = "text/n3"
