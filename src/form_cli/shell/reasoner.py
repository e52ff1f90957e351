"""
Forward-chaining rule engine access.

Shell layer: runs the EYE reasoner as a subprocess. The core only relies on
`derive(facts, rules) -> str`.
"""

import asyncio
import logging
import tempfile
from pathlib import Path
from typing import Protocol

from ..errors import ReasonerError

logger = logging.getLogger(__name__)


class Reasoner(Protocol):
    """Derives the consequences of a rule set over a fact graph."""

    async def derive(self, facts: str, rules: str) -> str:
        ...


class EyeReasoner:
    """
    EYE invoked through its command line.

    With `pass_only_new` (the default) only derived triples are returned,
    which is what both form conversion and policy resolution consume.
    """

    def __init__(self, executable: str = "eye", pass_only_new: bool = True):
        self.executable = executable
        self.pass_only_new = pass_only_new

    def _command(self, facts_path: Path, rules_path: Path) -> list[str]:
        command = [self.executable, "--nope", "--quiet"]
        command.append("--pass-only-new" if self.pass_only_new else "--pass")
        command += [str(facts_path), str(rules_path)]
        return command

    async def derive(self, facts: str, rules: str) -> str:
        with tempfile.TemporaryDirectory(prefix="form-cli-") as tmp:
            facts_path = Path(tmp) / "facts.n3"
            rules_path = Path(tmp) / "rules.n3"
            facts_path.write_text(facts, encoding="utf-8")
            rules_path.write_text(rules, encoding="utf-8")

            command = self._command(facts_path, rules_path)
            logger.debug(f"Running reasoner: {' '.join(command)}")
            try:
                process = await asyncio.create_subprocess_exec(
                    *command,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except OSError as e:
                raise ReasonerError(f"Cannot start reasoner '{self.executable}': {e}") from e

            stdout, stderr = await process.communicate()

        if process.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise ReasonerError(
                f"Reasoner exited with status {process.returncode}: {detail[:500]}"
            )
        return stdout.decode("utf-8")
