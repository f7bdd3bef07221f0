"""
JuicyURLs CLI - Command Line Interface

Entry point for scanning URL lists, inspecting the active pattern tables,
and printing version information.
"""

import asyncio
import signal
import sys
import time
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from juicyurls import __version__
from juicyurls.core.config import (
    load_scan_config,
    parse_categories,
    parse_duration,
    parse_excludes,
)
from juicyurls.core.constants import CHUNK_SIZE, Category, OutputFormat, RunOutcome
from juicyurls.core.exceptions import JuicyURLsError
from juicyurls.core.inputs import is_large_input, iter_lines, load_lines, validate_input_file
from juicyurls.core.logging import configure_logging
from juicyurls.core.models import RunStats, ScanConfig, ScanReport
from juicyurls.orchestrator.pipeline import ClassificationPipeline
from juicyurls.reporting.exporters.json import JSONExporter
from juicyurls.reporting.sink import TextResultSink
from juicyurls.reporting.summary import build_summary_table, format_progress


# Create CLI app
app = typer.Typer(
    name="juicyurls",
    help="JuicyURLs - Fast and Safe URL Security Scanner",
    add_completion=False,
    no_args_is_help=True,
)

# Status messages go to stderr; stdout carries results
console = Console(stderr=True)


# ============================================================================
# Helpers
# ============================================================================

def build_config(
    config_file: Optional[Path],
    *,
    categories: Optional[str] = None,
    excludes: Optional[str] = None,
    workers: Optional[int] = None,
    timeout: Optional[str] = None,
    validate: bool = False,
    verbose: bool = False,
) -> ScanConfig:
    """Merge the optional config file with command-line overrides.

    Raises:
        ConfigError: If the file or any flag value is invalid
    """
    config = load_scan_config(config_file) if config_file else ScanConfig()

    if categories is not None:
        config.categories = parse_categories(categories)
    if excludes is not None:
        config.excludes = parse_excludes(excludes)
    if workers is not None:
        config.workers = workers
    if timeout is not None:
        config.timeout = parse_duration(timeout)

    config.validate_urls = config.validate_urls or validate
    config.verbose = config.verbose or verbose
    return config


async def run_pipeline(pipeline: ClassificationPipeline, lines) -> ScanReport:
    """Run the pipeline with Ctrl-C mapped to a graceful abort."""
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, pipeline.cancel)
    except (NotImplementedError, RuntimeError):
        # Not supported on this platform or outside the main thread
        pass

    try:
        return await pipeline.run(lines)
    finally:
        try:
            loop.remove_signal_handler(signal.SIGINT)
        except (NotImplementedError, RuntimeError):
            pass


# ============================================================================
# Main Commands
# ============================================================================

@app.command()
def scan(
    url_list: Path = typer.Option(
        ...,
        "--list",
        "-l",
        help="Path to the list of URLs (one per line)",
    ),
    categories: Optional[str] = typer.Option(
        None,
        "--categories",
        "-m",
        help="Comma-separated categories to check (keywords, extensions, paths, hidden)",
    ),
    excludes: Optional[str] = typer.Option(
        None,
        "--exclude",
        "-e",
        help="Comma-separated patterns to exclude",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file path (default: stdout)",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        min=0,
        help="Number of workers (default: CPU cores)",
    ),
    timeout: Optional[str] = typer.Option(
        None,
        "--timeout",
        "-t",
        help="Processing timeout, e.g. 60s or 5m (default: 5m, 0 = no timeout)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Verbose output with categories and statistics",
    ),
    validate: bool = typer.Option(
        False,
        "--validate",
        help="Validate URL format before processing",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML scan configuration file",
        exists=True,
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.TEXT,
        "--format",
        "-f",
        help="Output format",
        case_sensitive=False,
    ),
    sort: bool = typer.Option(
        True,
        "--sort/--no-sort",
        help="Sort results by URL (--no-sort streams results as they are found)",
    ),
) -> None:
    """
    Scan a URL list and report suspicious URLs.

    Examples:

        juicyurls scan -l urls.txt -o results.txt -v

        juicyurls scan -l urls.txt -m keywords,paths -e cdn,static

        juicyurls scan -l urls.txt -w 8 -t 60s
    """
    configure_logging(verbose)

    try:
        scan_config = build_config(
            config,
            categories=categories,
            excludes=excludes,
            workers=workers,
            timeout=timeout,
            validate=validate,
            verbose=verbose,
        )

        if output_format == OutputFormat.JSON and output is None:
            console.print("[red]Error:[/red] --format json requires --output")
            raise typer.Exit(code=1)

        size = validate_input_file(url_list)
        if is_large_input(size) and scan_config.chunk_size is None:
            scan_config.chunk_size = CHUNK_SIZE

        if scan_config.verbose:
            console.print(
                f"[blue]Processing file:[/blue] {url_list} ({size / (1024 * 1024):.2f} MB)"
            )
            if scan_config.chunk_size:
                console.print("[blue]Using chunked mode[/blue]")

        if scan_config.chunk_size:
            lines = iter_lines(url_list)
        else:
            lines = load_lines(url_list)

        stream_sink: Optional[TextResultSink] = None
        if output_format == OutputFormat.TEXT and not sort:
            stream_sink = TextResultSink(output, verbose=scan_config.verbose)
            stream_sink.open()

        start_time = time.monotonic()

        def on_progress(stats: RunStats) -> None:
            console.print(format_progress(stats, time.monotonic() - start_time))

        pipeline = ClassificationPipeline.from_config(
            scan_config,
            on_result=stream_sink.write if stream_sink else None,
            progress_callback=on_progress if scan_config.verbose else None,
        )

        try:
            report = asyncio.run(run_pipeline(pipeline, lines))
        finally:
            if stream_sink is not None:
                stream_sink.close()

        if report.timed_out:
            console.print("[yellow]Timeout reached, partial results written.[/yellow]")
        elif report.is_partial:
            console.print("[yellow]Scan aborted, partial results written.[/yellow]")

        if output_format == OutputFormat.JSON:
            JSONExporter().export(report, output, sort_results=sort)
            console.print(f"[green]Results written to:[/green] {output}")
        elif not report.results:
            console.print("No suspicious URLs found.")
        else:
            if stream_sink is None:
                with TextResultSink(output, verbose=scan_config.verbose) as sink:
                    sink.write_all(report.sorted_results())
            if output is not None:
                console.print(f"[green]Results written to:[/green] {output}")

        if scan_config.verbose:
            console.print(build_summary_table(report))

        if report.outcome == RunOutcome.CANCELLED:
            raise typer.Exit(code=130)

    except JuicyURLsError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)


@app.command()
def patterns(
    categories: Optional[str] = typer.Option(
        None,
        "--categories",
        "-m",
        help="Comma-separated categories to show",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML scan configuration file",
        exists=True,
    ),
) -> None:
    """List the active suspicious pattern tables."""
    try:
        scan_config = build_config(config, categories=categories)
    except JuicyURLsError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    table = Table(title="Suspicious Patterns")
    table.add_column("Category", style="cyan")
    table.add_column("Count", justify="right")
    table.add_column("Patterns")

    for category in Category:
        if not scan_config.is_enabled(category):
            continue
        table_patterns = scan_config.patterns.for_category(category)
        table.add_row(category.value, str(len(table_patterns)), ", ".join(table_patterns))

    if scan_config.excludes:
        table.add_row("excludes", str(len(scan_config.excludes)), ", ".join(scan_config.excludes))

    Console().print(table)


@app.command()
def version() -> None:
    """Show version information."""
    Console().print(f"[bold cyan]JuicyURLs[/bold cyan] version [yellow]{__version__}[/yellow]")


# ============================================================================
# Entry Point
# ============================================================================

def main() -> None:
    """Main entry point for CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]Unexpected error:[/red] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
