"""
User prompting.

Shell layer: the core asks for choices, confirmations, text and dates through
the Prompter protocol; RichPrompter implements it on a terminal.
"""

import asyncio
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Protocol, Sequence

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, IntPrompt, Prompt


@dataclass(frozen=True)
class Choice:
    """One entry of a single-choice list."""
    title: str
    value: Any


class Prompter(Protocol):
    async def choose(self, message: str, choices: Sequence[Choice]) -> Any:
        ...

    async def text(self, message: str, multiline: bool = False) -> str:
        ...

    async def confirm(self, message: str, default: bool = True) -> bool:
        ...

    async def date(self, message: str) -> datetime:
        ...


class RichPrompter:
    """Terminal prompter built on rich.prompt."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    async def choose(self, message: str, choices: Sequence[Choice]) -> Any:
        return await asyncio.to_thread(self._choose, message, choices)

    async def text(self, message: str, multiline: bool = False) -> str:
        if multiline:
            return await asyncio.to_thread(self._multiline, message)
        return await asyncio.to_thread(Prompt.ask, escape(message), console=self.console)

    async def confirm(self, message: str, default: bool = True) -> bool:
        return await asyncio.to_thread(
            Confirm.ask, escape(message), default=default, console=self.console
        )

    async def date(self, message: str) -> datetime:
        return await asyncio.to_thread(self._date, message)

    def _choose(self, message: str, choices: Sequence[Choice]) -> Any:
        self.console.print(f"[bold]{escape(message)}[/bold]")
        for index, choice in enumerate(choices, start=1):
            self.console.print(f"  {index}) {escape(choice.title)}")
        picked = IntPrompt.ask(
            "Select",
            choices=[str(i) for i in range(1, len(choices) + 1)],
            show_choices=False,
            console=self.console,
        )
        return choices[picked - 1].value

    def _multiline(self, message: str) -> str:
        self.console.print(f"[bold]{escape(message)}[/bold] [dim](finish with an empty line)[/dim]")
        lines = []
        while True:
            line = self.console.input()
            if not line:
                break
            lines.append(line)
        return "\n".join(lines)

    def _date(self, message: str) -> datetime:
        while True:
            answer = Prompt.ask(
                f"{escape(message)} [dim](YYYY-MM-DD)[/dim]",
                default=date.today().isoformat(),
                console=self.console,
            )
            try:
                picked = date.fromisoformat(answer.strip())
            except ValueError:
                self.console.print(f"[red]'{answer}' is not a valid date[/red]")
                continue
            return datetime(picked.year, picked.month, picked.day, tzinfo=timezone.utc)
