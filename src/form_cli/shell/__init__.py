"""
Shell layer: documents and queries, reasoner, HTTP and terminal prompts.
"""
from .documents import QueryEngine, RdfQueryEngine, load_document, with_base
from .http import HttpTransport, PrefixCcResolver
from .prompts import Choice, Prompter, RichPrompter
from .reasoner import EyeReasoner, Reasoner

__all__ = [
    "Choice",
    "EyeReasoner",
    "HttpTransport",
    "PrefixCcResolver",
    "Prompter",
    "QueryEngine",
    "RdfQueryEngine",
    "Reasoner",
    "RichPrompter",
    "load_document",
    "with_base",
]
