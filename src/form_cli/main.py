"""
form-cli - Main entry point.

Fills in an RDF form on the terminal and submits the result through the
form's submit policies.
"""

import argparse
import asyncio
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from .config import Config, load_config, validate_config
from .core.context import FormContext
from .core.session import FormSession, SessionResult
from .errors import FormCliError
from .shell.documents import RdfQueryEngine
from .shell.http import HttpTransport, PrefixCcResolver
from .shell.prompts import RichPrompter
from .shell.reasoner import EyeReasoner

logger = logging.getLogger(__name__)

console = Console()


def setup_logging(level: str = "INFO", *, verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging with Rich handler."""
    if verbose:
        level = "DEBUG"
    elif quiet:
        level = "WARNING"

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())

    for name in ("httpx", "httpcore", "rdflib"):
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="form-cli",
        description="Fill in an RDF form and submit it according to its policies",
        usage="%(prog)s -f <form description> [-d <dataset URL>] [-r <N3 conversion rules>]",
    )
    parser.add_argument("-d", "--data", help="Dataset URL")
    parser.add_argument("-f", "--form", required=True, help="Form description URI")
    parser.add_argument("-r", "--rules", help="N3 Conversion Rules URL")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    return parser


def print_result(result: SessionResult) -> None:
    if result.outcome is None:
        return

    if result.outcome.redirect_url:
        console.print(f"Redirecting to [link={result.outcome.redirect_url}]{result.outcome.redirect_url}[/link]")
    elif result.outcome.success:
        console.print("[green]✓[/green] Submission succeeded")
    else:
        console.print("[red]✗[/red] Submission failed")


async def run(args: argparse.Namespace, config: Config) -> SessionResult:
    async with HttpTransport(
        timeout=config.http_timeout,
        default_method=config.default_method,
    ) as transport:
        ctx = FormContext(
            engine=RdfQueryEngine(),
            reasoner=EyeReasoner(config.eye_path),
            prompter=RichPrompter(console),
            transport=transport,
            prefixes=PrefixCcResolver(transport, config.prefix_service),
            default_content_type=config.default_content_type,
        )
        session = FormSession(ctx, args.form, data_url=args.data, rules_url=args.rules, console=console)
        return await session.run()


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = setup_argparser().parse_args(argv)
    config = load_config()
    setup_logging(config.log_level, verbose=args.verbose, quiet=args.quiet)

    for warning in validate_config(config):
        logger.warning(warning)

    console.print(f"Dataset URL: {args.data}")
    console.print(f"N3 Conversion Rules URL: {args.rules}")
    console.print(f"Form description URL: {args.form}")

    try:
        result = asyncio.run(run(args, config))
    except FormCliError as e:
        console.print(f"[red]✗[/red] {e}")
        return 1
    except KeyboardInterrupt:
        console.print("\n[!] Interrupted by user.")
        return 130

    print_result(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
