"""Summary report over a set of extracted calls."""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from pathlib import Path

from csreports.naming import extract_customer_name

__all__ = ["CallSummaryReporter"]


class CallSummaryReporter:
    """Builds a Markdown summary of calls grouped by customer."""

    def generate_summary_report(self, calls_data, output_path=None, resolved_customer_name=None):
        """Return the summary as Markdown, also writing it to output_path when given."""
        now = datetime.now().astimezone()
        today = now.strftime("%Y-%m-%d")
        generated_time = now.strftime("%B %d, %Y at %I:%M %p")
        calls = list(calls_data)

        parts = [
            f"# Team Calls Summary - {today}\n\n"
            f"Generated on {generated_time}\n\n"
            "## Overview\n\n"
            f"- **Total Calls:** {len(calls)}\n"
            "- **Date Range:** Last 7 days\n"
            f"- **Extraction Date:** {today}\n\n"
            "## Calls by Customer\n\n"
        ]

        if resolved_customer_name is not None:
            by_customer = {resolved_customer_name: calls}
        else:
            by_customer = defaultdict(list)
            for call in calls:
                by_customer[extract_customer_name(call.title)].append(call)

        for customer in sorted(by_customer):
            customer_calls = by_customer[customer]
            parts.append(f"### {customer} ({len(customer_calls)} calls)\n\n")
            for call in customer_calls:
                date = getattr(call, "actual_start", None) or call.scheduled_start
                parts.append(
                    f"- **{call.title}** - {date.strftime('%m/%d/%Y')} (ID: `{call.id})\n"
                )
            parts.append("\n")

        summary = "".join(parts)
        if output_path is not None:
            Path(output_path).write_text(summary, encoding="utf-8")
        return summary