"""CLI entry point for Persisted Query Signer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.logging import RichHandler
from rich.table import Table

from .config import (
    DEFAULT_OUTPUT,
    SIGNING_KEY_ENV,
    ExtractionStrategy,
    SignerConfig,
    TextualScan,
    resolve_signing_key,
)
from .errors import ExtractionError, MissingInputError, OutputWriteError
from .extractors import get_extractor
from .file_locator import locate_files
from .orchestrator import Orchestrator
from .output import (
    EXIT_FAILURE,
    EXIT_MISSING_INPUT,
    HumanReporter,
    get_exit_code,
    write_signatures,
)
from .signer import Signer

app = typer.Typer(
    name="persisted-query-signer",
    help="Sign generated GraphQL request descriptors for persisted query validation.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Route log records through Rich on stderr."""
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from . import __version__
        console.print(f"persisted-query-signer v{__version__}")
        raise typer.Exit()


def _parse_strategy(strategy: str) -> ExtractionStrategy:
    try:
        return ExtractionStrategy(strategy.lower())
    except ValueError:
        console.print(
            f"[red]Error: Invalid strategy '{escape(strategy)}'. Use 'structural' or 'textual'.[/red]"
        )
        raise typer.Exit(EXIT_MISSING_INPUT)


def _parse_textual_scan(scan: str) -> TextualScan:
    try:
        return TextualScan(scan.lower())
    except ValueError:
        console.print(
            f"[red]Error: Invalid textual scan '{escape(scan)}'. Use 'balanced' or 'indented'.[/red]"
        )
        raise typer.Exit(EXIT_MISSING_INPUT)


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version", "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Persisted Query Signer - HMAC signatures for generated GraphQL requests."""
    pass


@app.command()
def sign(
    root: Annotated[
        Path,
        typer.Argument(help="Directory to scan for *.graphql.ts files."),
    ],
    signing_key: Annotated[
        Optional[str],
        typer.Argument(
            help=f"Signing key. The {SIGNING_KEY_ENV} environment variable takes precedence.",
            show_default=False,
        ),
    ] = None,
    output: Annotated[
        Path,
        typer.Option(
            "--output", "-o",
            help="Signature file to write.",
        ),
    ] = Path(DEFAULT_OUTPUT),
    strategy: Annotated[
        str,
        typer.Option(
            "--strategy", "-s",
            help="Extraction strategy: 'structural' (TypeScript parser) or 'textual' (line scan).",
        ),
    ] = ExtractionStrategy.STRUCTURAL.value,
    textual_scan: Annotated[
        str,
        typer.Option(
            "--textual-scan",
            help="How the textual strategy finds the end of params: 'balanced' or 'indented'.",
        ),
    ] = TextualScan.BALANCED.value,
    workers: Annotated[
        Optional[int],
        typer.Option(
            "--workers", "-w",
            help="Number of worker threads (defaults to the CPU count).",
        ),
    ] = None,
    allow_failures: Annotated[
        bool,
        typer.Option(
            "--allow-failures",
            help="Write signatures even if some files could not be processed.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log every processed file."),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only log warnings and errors."),
    ] = False,
) -> None:
    """
    Sign every persisted query found under ROOT.

    Extracts the operation name and text from each generated request file,
    signs the text with HMAC-SHA256 and writes a JSON object mapping
    operation names to hex digests, sorted by name.

    Examples:

        # Key from the environment
        SIGNING_KEY=secret persisted-query-signer sign src/__generated__

        # Key as an argument, textual strategy
        persisted-query-signer sign src secret --strategy textual -o build/signatures.json
    """
    setup_logging(verbose, quiet)

    try:
        config = SignerConfig(
            root=root,
            output=output,
            strategy=_parse_strategy(strategy),
            textual_scan=_parse_textual_scan(textual_scan),
            workers=workers,
            allow_failures=allow_failures,
        )
        config.validate_root()
        key = resolve_signing_key(signing_key)
    except ValidationError as e:
        console.print(f"[red]Error: Invalid configuration: {escape(str(e))}[/red]")
        raise typer.Exit(EXIT_MISSING_INPUT)
    except MissingInputError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(EXIT_MISSING_INPUT)

    extractor = get_extractor(config.strategy, config.textual_scan)
    orchestrator = Orchestrator(extractor, Signer(key), config.workers)
    result = orchestrator.run(config.root)

    exit_code = get_exit_code(result, config.allow_failures)
    written: Optional[Path] = None

    if exit_code == 0:
        try:
            write_signatures(result.signatures, config.output)
            written = config.output
        except OutputWriteError as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            exit_code = EXIT_FAILURE

    HumanReporter(console).report(result, written)

    raise typer.Exit(exit_code)


@app.command("list")
def list_operations(
    root: Annotated[
        Path,
        typer.Argument(help="Directory to scan for *.graphql.ts files."),
    ],
    strategy: Annotated[
        str,
        typer.Option(
            "--strategy", "-s",
            help="Extraction strategy: 'structural' or 'textual'.",
        ),
    ] = ExtractionStrategy.STRUCTURAL.value,
    textual_scan: Annotated[
        str,
        typer.Option(
            "--textual-scan",
            help="How the textual strategy finds the end of params: 'balanced' or 'indented'.",
        ),
    ] = TextualScan.BALANCED.value,
) -> None:
    """
    List the operations found under ROOT without signing them.

    Examples:

        persisted-query-signer list src/__generated__
    """
    setup_logging(quiet=True)
    extractor = get_extractor(_parse_strategy(strategy), _parse_textual_scan(textual_scan))

    if not root.is_dir():
        console.print(f"[red]Error: Directory not found: {escape(str(root))}[/red]")
        raise typer.Exit(EXIT_MISSING_INPUT)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Operation", no_wrap=True)
    table.add_column("File", style="dim", overflow="fold")

    failed = False
    for file_path in locate_files(root):
        try:
            descriptor = extractor.extract_file(file_path)
        except ExtractionError as e:
            console.print(f"[red]✗ {escape(str(e))}[/red]")
            failed = True
            continue
        if descriptor is not None:
            table.add_row(escape(descriptor.name), escape(str(file_path)))

    console.print(table)
    raise typer.Exit(EXIT_FAILURE if failed else 0)


if __name__ == "__main__":
    app()
