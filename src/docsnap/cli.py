"""Command-line interface for docsnap."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from . import __version__
from .core.batch import BatchExtractor
from .dom.tree import DocumentTree
from .logging_config import setup_logging
from .models.config import DocsnapConfig, ExportFormat
from .models.document import ExtractedDocument
from .models.events import EventType
from .output.formatters import (
    format_as_json,
    format_as_markdown,
    format_batch_as_json,
    format_batch_as_markdown,
)
from .output.writer import DocumentWriter

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="docsnap",
        description="Extract the main content of a documentation page as Markdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Extract one page to ./docs/<domain>/<title>.md
  docsnap https://docs.example.com/guide/intro

  # Print JSON to stdout instead of saving
  docsnap https://docs.example.com/guide/intro -f json --stdout

  # List the pages linked from the docs sidebar
  docsnap https://docs.example.com/guide/intro --sections

  # Extract every page linked from the docs sidebar
  docsnap https://docs.example.com/guide/intro --all-sections -f both

  # Stop the batch at the first page that cannot be fetched
  docsnap https://docs.example.com/guide/intro --all-sections --fail-fast

  # Extract a saved page, resolving links against its live URL
  docsnap page.html --base-url https://docs.example.com/guide/intro
        """,
    )

    parser.add_argument(
        "url",
        nargs="?",
        help="Page URL or path to a local HTML file",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        metavar="FILE",
        help="YAML configuration file (requires pyyaml)",
    )

    # Output
    output_group = parser.add_argument_group("output")
    output_group.add_argument(
        "--output-dir",
        "-o",
        type=Path,
        default=None,
        help="Output directory (default: ./docs)",
    )
    output_group.add_argument(
        "--format",
        "-f",
        choices=[f.value for f in ExportFormat],
        default=None,
        help="Output format (default: markdown)",
    )
    output_group.add_argument(
        "--stdout",
        action="store_true",
        help="Print the result instead of writing files",
    )

    # Discovery
    sections_group = parser.add_argument_group("sections")
    sections_group.add_argument(
        "--sections",
        action="store_true",
        help="List sibling pages found in the page's navigation",
    )
    sections_group.add_argument(
        "--all-sections",
        action="store_true",
        help="Extract every sibling page found in the page's navigation",
    )
    sections_group.add_argument(
        "--base-url",
        type=str,
        default=None,
        metavar="URL",
        help="URL of a local HTML file, used to resolve its links",
    )
    sections_group.add_argument(
        "--fail-fast",
        action="store_true",
        help="With --all-sections, stop at the first page that fails",
    )

    # Network settings
    network_group = parser.add_argument_group("network settings")
    network_group.add_argument(
        "--rate-limit",
        "-r",
        type=float,
        default=None,
        help="Seconds between requests to the same host",
    )
    network_group.add_argument(
        "--user-agent",
        type=str,
        help="Custom User-Agent string",
    )
    network_group.add_argument(
        "--max-retries",
        type=int,
        default=None,
        help="Maximum retry attempts",
    )

    # Logging
    log_group = parser.add_argument_group("logging")
    log_group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )
    log_group.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress output",
    )
    log_group.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file",
    )

    return parser


def build_config(args: argparse.Namespace) -> DocsnapConfig:
    """
    Build the run configuration from a config file and command-line flags.

    Flags override values from the config file.

    Args:
        args: Parsed arguments

    Returns:
        Validated DocsnapConfig

    Raises:
        ValidationError: If the combined settings are invalid
    """
    data: dict = {}
    if args.config:
        data = DocsnapConfig.from_yaml_file(args.config).model_dump(exclude_unset=True)

    data["url"] = args.url

    if args.output_dir:
        data.setdefault("output", {})["directory"] = args.output_dir
    if args.format:
        data.setdefault("output", {})["format"] = args.format

    network_kwargs: dict = {}
    if args.rate_limit is not None:
        network_kwargs["rate_limit"] = args.rate_limit
    if args.user_agent:
        network_kwargs["user_agent"] = args.user_agent
    if args.max_retries is not None:
        network_kwargs["max_retries"] = args.max_retries
    if network_kwargs:
        data.setdefault("network", {}).update(network_kwargs)

    if args.verbose:
        data["log_level"] = "DEBUG"
    elif args.quiet:
        data["log_level"] = "ERROR"
    else:
        data.setdefault("log_level", "WARNING")

    if args.log_file:
        data["log_file"] = args.log_file

    return DocsnapConfig.model_validate(data)


def render_documents(docs: list[ExtractedDocument], export_format: ExportFormat) -> str:
    """Render documents for printing; "both" prints Markdown."""
    if export_format == ExportFormat.JSON:
        if len(docs) == 1:
            return format_as_json(docs[0]) + "\n"
        return format_batch_as_json(docs) + "\n"
    if len(docs) == 1:
        return format_as_markdown(docs[0])
    return format_batch_as_markdown(docs)


async def load_tree(source: str, base_url: Optional[str], batch: BatchExtractor) -> DocumentTree:
    """
    Load a page from a local file or over HTTP.

    Args:
        source: URL or local file path
        base_url: URL to attribute to a local file (file:// URI if None)
        batch: Batch extractor whose HTTP client fetches remote pages

    Returns:
        Parsed page
    """
    path = Path(source)
    if path.is_file():
        page_url = base_url or path.resolve().as_uri()
        logger.debug(f"Loading local file {path} as {page_url}")
        html = await asyncio.to_thread(path.read_bytes)
        return DocumentTree.from_html(html, page_url)

    return await batch.fetch_tree(source)


async def run_extraction(args: argparse.Namespace, config: DocsnapConfig, console: Console) -> int:
    """Run a single-page, sections-listing or batch extraction."""
    writer = None if args.stdout else DocumentWriter(config.output.directory, config.output.format)

    async with BatchExtractor(config, writer=writer) as batch:
        tree = await load_tree(args.url, args.base_url, batch)

        if args.sections:
            links = batch.discover_tree(tree)
            if not links:
                console.print("[yellow]No sections found[/yellow]")
                return 0
            for index, link in enumerate(links, start=1):
                marker = " [green](current)[/green]" if link.is_current_page else ""
                console.print(f"{index:3}. {escape(link.title)}{marker}\n     [dim]{escape(link.url)}[/dim]")
            return 0

        if not args.all_sections:
            doc = batch.extract_tree(tree)
            if writer is None:
                sys.stdout.write(render_documents([doc], config.output.format))
            else:
                for path in await writer.write(doc):
                    if not args.quiet:
                        console.print(f"[green]Saved:[/green] {path}")
            return 0

        links = batch.discover_tree(tree)
        if not links:
            console.print("[red]Error:[/red] No sections found in the page's navigation")
            return 1

        if args.quiet:
            async for event in batch.run(links):
                if event.is_error and args.fail_fast:
                    batch.cancel()
        else:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True,
            ) as progress:
                task = progress.add_task("Starting...", total=None)

                async for event in batch.run(links):
                    if event.type == EventType.STARTED:
                        progress.update(task, description=f"[cyan]{event.message}")
                    elif event.type == EventType.FETCH_STARTED:
                        progress.update(
                            task,
                            description=f"[cyan]Extracting {event.current}/{event.total}: {event.url}",
                        )
                    elif event.type == EventType.FETCH_FAILED:
                        console.print(f"[red]Failed:[/red] {event.url} - {escape(event.error or '')}")
                        if args.fail_fast:
                            batch.cancel()
                    elif event.type == EventType.CANCELLED:
                        console.print("[yellow]Stopping after the first failure[/yellow]")
                    elif event.type == EventType.COMPLETED:
                        progress.update(task, description=f"[green]{event.message}")

        if writer is None:
            sys.stdout.write(render_documents(batch.documents, config.output.format))

        stats = batch.stats
        if not args.quiet:
            console.print()
            console.print("[bold]Results:[/bold]")
            console.print(f"  Sections found: {stats.pages_discovered}")
            console.print(f"  Pages extracted: {stats.pages_extracted}")
            console.print(f"  Pages failed: {stats.pages_failed}")
            if stats.pages_skipped:
                console.print(f"  Pages skipped: {stats.pages_skipped}")
            console.print(f"  Code blocks: {stats.code_blocks_extracted}")
            console.print(f"  Files saved: {stats.files_saved}")
            console.print(f"  Duration: {stats.duration_seconds:.1f}s")

        return 0 if stats.pages_failed == 0 else 1


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Keep stdout clean for the document when printing it
    console = Console(stderr=args.stdout)

    if not args.url:
        console.print("[red]Error:[/red] Please provide a URL or HTML file to extract")
        return 1

    if args.sections and args.all_sections:
        console.print("[red]Error:[/red] --sections and --all-sections are mutually exclusive")
        return 1

    try:
        config = build_config(args)
    except (ValidationError, OSError, ImportError) as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return 1

    setup_logging(
        config.log_level,
        config.log_file,
        stream=sys.stderr if args.stdout else None,
    )

    if not args.quiet and not args.stdout:
        console.print(f"[bold blue]docsnap[/bold blue] v{__version__}")
        console.print(f"Target: {config.url}")
        console.print()

    try:
        return asyncio.run(run_extraction(args, config, console))
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        if args.verbose:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
