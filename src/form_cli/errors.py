"""
Exception hierarchy for form sessions.

None of these abort a session on their own: callers either log and continue
or re-prompt, and only the CLI turns an uncaught FormCliError into an exit
status.
"""


class FormCliError(Exception):
    """Base class for all form-cli errors."""


class DocumentLoadError(FormCliError):
    """A document could not be fetched or parsed as RDF."""

    def __init__(self, location: str, reason: str):
        self.location = location
        self.reason = reason
        super().__init__(f"Could not load {location}: {reason}")


class ReasonerError(FormCliError):
    """The rule engine failed to derive a fact graph."""


class InvalidSubjectError(FormCliError):
    """Free-text subject input that cannot be turned into an IRI."""


class UnknownPrefixError(InvalidSubjectError):
    """A prefixed name whose prefix could not be resolved."""

    def __init__(self, prefix: str):
        self.prefix = prefix
        super().__init__(f"Unknown prefix '{prefix}'")
