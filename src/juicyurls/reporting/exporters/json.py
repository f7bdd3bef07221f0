"""JSON report exporter for JuicyURLs.

This module provides JSON export of a scan report: the run outcome,
statistics, and every suspicious URL with its category and reason.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

from juicyurls import __version__
from juicyurls.core.exceptions import OutputError
from juicyurls.core.models import ScanReport


class ReportJSONEncoder(json.JSONEncoder):
    """Custom JSON encoder for report objects.

    Handles serialization of datetime, Enum, and Path objects.
    """

    def default(self, o):
        if isinstance(o, datetime):
            return o.isoformat()

        if isinstance(o, Enum):
            return o.value

        if isinstance(o, Path):
            return str(o)

        return super().default(o)


class JSONExporter:
    """Export scan reports to JSON format.

    Provides structured output suitable for programmatic consumption and
    further processing.
    """

    def build(self, report: ScanReport, *, sort_results: bool = True) -> dict:
        """Build the JSON-serializable report structure.

        Args:
            report: Scan report to export
            sort_results: Order results by URL

        Returns:
            Report dictionary
        """
        results = report.sorted_results() if sort_results else report.results

        return {
            "report_metadata": {
                "generated_at": datetime.now(timezone.utc),
                "generator": "JuicyURLs",
                "version": __version__,
            },
            "run": {
                "outcome": report.outcome,
                "duration_seconds": round(report.duration, 3),
                "processing_rate": round(report.processing_rate, 1),
                "chunks": report.chunks,
            },
            "statistics": {
                **report.stats.to_dict(),
                "clean": report.stats.clean,
                "suspicious_ratio": round(report.stats.suspicious_ratio, 2),
            },
            "results": [result.to_dict() for result in results],
        }

    def export(self, report: ScanReport, output_path: Path, *, sort_results: bool = True) -> None:
        """Export report to JSON file.

        Args:
            report: Scan report to export
            output_path: Path where JSON file will be written
            sort_results: Order results by URL

        Raises:
            OutputError: If export fails
        """
        try:
            data = self.build(report, sort_results=sort_results)

            output_path.parent.mkdir(parents=True, exist_ok=True)

            with output_path.open("w", encoding="utf-8") as f:
                json.dump(
                    data,
                    f,
                    cls=ReportJSONEncoder,
                    indent=2,
                    ensure_ascii=False,
                )

        except (OSError, TypeError, ValueError) as e:
            raise OutputError(f"Failed to export JSON report: {e}") from e
