"""
Migration report formatting for console display.
"""

import logging
from typing import Any, Dict, Optional

from logger import format_elapsed

MAX_LISTED_FAILURES = 10


class MigrationReport:
    """Formats the orchestrator's report dictionary for humans and machines."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger('wordpress_markdown_migrator.orchestrator.report')

    def format_console_report(self, report: Dict[str, Any]) -> str:
        """
        Format report for console display.

        Args:
            report: Report dictionary returned by MigrationOrchestrator.run

        Returns:
            Formatted console string
        """
        sections = []

        sections.append("=" * 60)
        sections.append("MIGRATION REPORT")
        sections.append("=" * 60)
        sections.append("")

        sections.append("Posts:")
        sections.append(f"  Total:       {report.get('posts_total', 0)}")
        sections.append(f"  Written:     {report.get('posts_written', 0)}")
        sections.append(f"  Unchanged:   {report.get('posts_unchanged', 0)}")
        sections.append(f"  Failed:      {report.get('posts_failed', 0)}")
        sections.append("")

        sections.append("Assets:")
        sections.append(f"  Total:       {report.get('assets_total', 0)}")
        sections.append(f"  Downloaded:  {report.get('assets_downloaded', 0)}")
        sections.append(f"  Failed:      {report.get('assets_failed', 0)}")
        sections.append(f"  Size:        {self._format_bytes(report.get('assets_bytes', 0))}")
        sections.append("")

        sections.append(f"Duration:      {format_elapsed(report.get('duration_seconds', 0.0))}")

        failures = report.get('failures', [])
        if failures:
            sections.append("")
            sections.append("Failed Posts:")
            sections.append("-" * 60)
            for failure in failures[:MAX_LISTED_FAILURES]:
                sections.append(f"  [{failure['post_id']}] {failure['title']}: {failure['error']}")
            if len(failures) > MAX_LISTED_FAILURES:
                sections.append(f"  ... and {len(failures) - MAX_LISTED_FAILURES} more")

        sections.append("=" * 60)

        return "\n".join(sections)

    @staticmethod
    def _format_bytes(bytes_val: int) -> str:
        """Format byte counts in human-readable units."""
        for unit in ('B', 'KB', 'MB', 'GB'):
            if bytes_val < 1024:
                return f"{bytes_val:.1f} {unit}" if unit != 'B' else f"{bytes_val} {unit}"
            bytes_val /= 1024
        return f"{bytes_val:.1f} TB"


__all__ = ['MigrationReport']
