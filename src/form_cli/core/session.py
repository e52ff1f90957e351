"""
Form session pipeline.

Form schema → data binding → subject → field editing (until confirmed) →
policies → dispatch. Each stage receives the session's FormContext.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field as dataclass_field

from rich.console import Console
from rich.markup import escape

from ..kernel.types import Field, Policy
from ..reasoning.editing import edit_fields
from ..reasoning.policy import resolve_policies
from ..shell.documents import load_document
from .binding import bind_fields, snapshot_fields
from .context import FormContext
from .dispatch import DispatchOutcome, submit
from .rendering import format_answers
from .schema import resolve_form
from .subject import resolve_subject

logger = logging.getLogger(__name__)


@dataclass
class SessionResult:
    """Everything a finished session produced."""

    fields: list[Field]
    target_class: str | None
    subject: str | None = None
    policies: list[Policy] = dataclass_field(default_factory=list)
    outcome: DispatchOutcome | None = None


class FormSession:
    """
    One interactive run over a form and an optional data document.

    The form document as loaded is the rule source for submit policies;
    when conversion rules are given, the fields are read from the converted
    form instead.
    """

    def __init__(
        self,
        ctx: FormContext,
        form_url: str,
        data_url: str | None = None,
        rules_url: str | None = None,
        console: Console | None = None,
    ):
        self.ctx = ctx
        self.form_url = form_url
        self.data_url = data_url
        self.rules_url = rules_url
        self.console = console or Console()

        self.original_form = ""
        self.form_graph = ""
        self.data_graph = ""
        self.fields: list[Field] = []
        self.original_fields: tuple[Field, ...] = ()
        self.target_class: str | None = None

    async def load(self) -> None:
        """Fetch the documents and apply conversion rules."""
        self.data_graph = (
            await load_document(self.data_url, self.ctx.transport) if self.data_url else ""
        )
        self.original_form = await load_document(self.form_url, self.ctx.transport)
        self.form_graph = self.original_form

        if self.rules_url:
            rules = await load_document(self.rules_url, self.ctx.transport)
            self.form_graph = await self.ctx.reasoner.derive(self.original_form, rules)
            logger.info(f"Converted form with rules from {self.rules_url}")

    async def prepare(self) -> None:
        """Resolve the form's fields and bind them to existing data."""
        self.fields, self.target_class = await resolve_form(
            self.ctx, self.form_graph, self.form_url
        )
        await bind_fields(
            self.ctx, self.data_graph, self.fields, self.target_class, self.data_url
        )
        self.original_fields = snapshot_fields(self.fields)

    def print_answers(self, field: Field) -> None:
        self.console.print(format_answers(field))

    async def edit(self) -> None:
        """Edit all fields, then review; repeat until the user confirms."""
        while True:
            for field in self.fields:
                await edit_fields([field], self.ctx.prompter)
                self.print_answers(field)
                self.console.print()

            self.console.print("[bold]Final answers:[/bold]")
            for field in self.fields:
                self.print_answers(field)

            if await self.ctx.prompter.confirm("Do you want to submit?"):
                return

    async def run(self) -> SessionResult:
        await self.load()
        await self.prepare()

        result = SessionResult(fields=self.fields, target_class=self.target_class)
        result.subject = await resolve_subject(
            self.ctx, self.data_graph, self.target_class, self.data_url
        )
        self.console.print("[bold]Subject[/bold]")
        self.console.print(f"- {escape(result.subject)}")

        await self.edit()

        result.policies = await resolve_policies(self.ctx, self.original_form, self.form_url)
        if not result.policies:
            return result

        result.outcome = await submit(
            self.ctx,
            result.policies,
            self.fields,
            self.original_fields,
            self.target_class,
            result.subject,
            self.form_url,
        )
        return result
