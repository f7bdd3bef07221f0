"""Run summary rendering for verbose mode."""

from rich.table import Table

from juicyurls.core.constants import RunOutcome
from juicyurls.core.models import RunStats, ScanReport


OUTCOME_STYLES = {
    RunOutcome.COMPLETED: "green",
    RunOutcome.TIMED_OUT: "yellow",
    RunOutcome.CANCELLED: "yellow",
}


def format_duration(seconds: float) -> str:
    """Format seconds as a short human-readable duration."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    if seconds < 60:
        return f"{seconds:.2f}s"
    minutes, secs = divmod(seconds, 60)
    if minutes < 60:
        return f"{int(minutes)}m{secs:.0f}s"
    hours, minutes = divmod(minutes, 60)
    return f"{int(hours)}h{int(minutes)}m{secs:.0f}s"


def format_progress(stats: RunStats, elapsed: float) -> str:
    """One-line progress message for a stats snapshot."""
    rate = stats.processed / elapsed if elapsed > 0 else 0.0
    return (
        f"Progress: {stats.total} read, {stats.processed} processed, "
        f"{stats.suspicious} suspicious, {rate:.0f} URLs/sec"
    )


def build_summary_table(report: ScanReport) -> Table:
    """Build the scan statistics table.

    Args:
        report: Finished (or partial) scan report

    Returns:
        Rich table ready to print
    """
    stats = report.stats
    style = OUTCOME_STYLES.get(report.outcome, "white")

    table = Table(title="Scan Statistics", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Outcome", f"[{style}]{report.outcome.value}[/{style}]")
    table.add_row("Total URLs", str(stats.total))
    table.add_row("Processed URLs", str(stats.processed))
    table.add_row("Suspicious URLs", str(stats.suspicious))
    table.add_row("Unique suspicious", str(len(report.results)))
    table.add_row("Invalid URLs", str(stats.invalid))
    table.add_row("Skipped URLs", str(stats.skipped))
    table.add_row("Duration", format_duration(report.duration))
    if report.processing_rate > 0:
        table.add_row("Processing Rate", f"{report.processing_rate:.0f} URLs/sec")
    table.add_row("Suspicious Ratio", f"{stats.suspicious_ratio:.2f}%")
    if report.chunks > 1:
        table.add_row("Chunks", str(report.chunks))

    return table
