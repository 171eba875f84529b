"""Markdown reports for individual calls and for batches of customer emails."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from csreports.naming import (
    UNKNOWN_CUSTOMER,
    clean_email_body,
    clean_transcript,
    extract_customer_name,
    format_date,
    format_date_for_filename,
    is_fallback_date,
    sanitize_filename,
)

__all__ = ["CallMarkdownFormatter", "default_output_dir"]

logger = logging.getLogger(__name__)

EMAIL_BATCH_SIZE = 20


def default_output_dir():
    """Return the default report directory on the user's desktop."""
    return Path.home() / "Desktop" / "team-calls-output"


def _now_like(date: datetime) -> datetime:
    return datetime.now(date.tzinfo)


def _real_dates(dates):
    """Keep only dates that are not stand-ins close to the current time."""
    return [date for date in dates if not is_fallback_date(date, _now_like(date))]


def _direction_label(direction) -> str:
    return str(getattr(direction, "name", direction)).lower()


class CallMarkdownFormatter:
    """Writes calls and emails as Markdown files into an output directory."""

    def __init__(self, output_dir=None):
        self.output_dir = Path(output_dir) if output_dir is not None else default_output_dir()

    def _resolve_output_dir(self, custom_dir_name, fallback_name):
        """Pick the directory to write into: a desktop subdirectory in default mode."""
        if self.output_dir != default_output_dir():
            return self.output_dir
        desktop = Path.home() / "Desktop"
        if custom_dir_name is not None:
            return desktop / f"ct_{sanitize_filename(custom_dir_name)}"
        return desktop / fallback_name

    # Calls

    def format_call_to_markdown(self, call):
        """Render one call, with its attendees and transcript, as Markdown."""
        customer = call.customer_name if call.customer_name is not None else UNKNOWN_CUSTOMER
        transcript = call.transcript if call.transcript is not None else "No transcript available"
        call_url = call.recording_url or ""
        formatted_date = call.scheduled_start.strftime("%Y-%m-%dT%H:%M:%S")

        parts = [
            f"# {call.title}\n\n**Customer:** {customer}\n"
            f"**Date:** {formatted_date}\n**Call ID:** `{call.id}`"
        ]
        if call_url:
            parts.append(f"\n**Call Link:** {call_url}")
        parts.append("\n\n## Attendees\n\n")

        if call.participants:
            for attendee in call.participants:
                line = f"- **{attendee.name}**"
                if attendee.title:
                    line += f" - {attendee.title}"
                if attendee.company:
                    line += f" ({attendee.company})"
                if attendee.email:
                    line += f" - {attendee.email}"
                parts.append(line + "\n")
        else:
            parts.append("No attendee information available.\n")

        generated_time = datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")
        parts.append(
            f"\n\n## Transcript\n\n{clean_transcript(transcript)}"
            f"\n\n---\n*Generated on {generated_time}*\n"
        )
        return "".join(parts)

    def _call_filename_base(self, call) -> str:
        generated_title = getattr(call, "generated_title", None)
        if generated_title is not None and generated_title.strip():
            return sanitize_filename(generated_title)
        if call.customer_name is not None:
            return sanitize_filename(call.customer_name)
        return sanitize_filename(extract_customer_name(call.title))

    def save_call_markdown(self, call):
        """Write one call to a Markdown file and return its path."""
        file_date = format_date_for_filename(call.scheduled_start)
        filename = f"{self._call_filename_base(call)}-{file_date}-{call.id[:8]}.md"
        filepath = self.output_dir / filename

        content = self.format_call_to_markdown(call)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        filepath.write_text(content, encoding="utf-8")
        logger.info("Saved call markdown to %s", filepath)
        return filepath

    def save_multiple_calls(self, calls, custom_dir_name=None):
        """Write each call to its own file; calls that fail to save are logged and skipped."""
        today = datetime.now().astimezone().strftime("%Y-%m-%d")
        output_dir = self._resolve_output_dir(custom_dir_name, f"team-calls-{today}")
        output_dir.mkdir(parents=True, exist_ok=True)

        writer = CallMarkdownFormatter(output_dir)
        saved = []
        for call in calls:
            try:
                saved.append(writer.save_call_markdown(call))
            except OSError as exc:
                logger.error("Failed to save call %s: %s", call.id, exc)
        logger.info("Saved %d call markdown files to %s", len(saved), output_dir)
        return saved

    # Emails

    def format_email_to_markdown(self, email):
        """Render one email, with sender, recipients and body, as Markdown."""
        subject = email.subject or "No Subject"
        sender = email.sender
        sender_info = sender.name if sender.name is not None else "Unknown Sender"
        if sender.email:
            sender_info += f" ({sender.email})"
        if getattr(sender, "title", None) is not None:
            sender_info += f" - {sender.title}"
        if getattr(sender, "company", None) is not None:
            sender_info += f" @ {sender.company}"

        parts = [
            f"## {subject}\n\n**From:** {sender_info}\n"
            f"**Date:** {format_date(email.sent_at)}\n"
            f"**Direction:** {_direction_label(email.direction)}\n"
            f"**Email ID:** `{email.id}`"
        ]

        if email.recipients:
            names = []
            for recipient in email.recipients:
                name = (
                    recipient.name
                    if recipient.name is not None
                    else recipient.email.split("@", 1)[0]
                )
                names.append(f"{name} ({recipient.email})" if recipient.email else name)
            parts.append("\n**To:** " + ", ".join(names))

        if email.is_automated or email.is_template:
            kind = "Template/Automated" if email.is_template else "Automated"
            parts.append(f"\n**Type:** {kind}")

        parts.append("\n\n### Content\n\n")
        if email.body_text is not None:
            if email.body_text.strip():
                parts.append(clean_email_body(email.body_text))
        elif email.snippet is not None:
            if email.snippet.strip():
                parts.append(
                    "*[Preview only - full content not available]*\n\n" + email.snippet
                )
        else:
            parts.append("*No content available*")

        parts.append("\n\n---\n")
        return "".join(parts)

    def format_emails_batch_to_markdown(self, emails, batch_num, customer_name):
        """Render a batch of emails, newest first, as one Markdown document."""
        emails = list(emails)
        if not emails:
            return "# No Emails\n\nNo emails found in this batch."

        ordered = sorted(emails, key=lambda email: email.sent_at, reverse=True)
        valid = _real_dates(email.sent_at for email in ordered)
        if valid:
            date_range = f"{min(valid).strftime('%m/%d')} - {max(valid).strftime('%m/%d/%Y')}"
        else:
            date_range = "Unknown Date Range"

        generated_time = datetime.now().astimezone().strftime("%B %d, %Y at %I:%M %p")
        total = len(emails)
        parts = [
            f"# {customer_name} - Emails Batch {batch_num}\n\n"
            f"**Date Range:** {date_range}  \n"
            f"**Total Emails:** {total}  \n"
            f"**Generated:** {generated_time}  \n"
            "**Advanced BDR/SPAM filtering applied** - Templates, duplicates, "
            "and automation removed\n\n---\n\n"
        ]
        for number, email in enumerate(ordered, start=1):
            parts.append(f"### Email {number}/{total}\n\n")
            parts.append(self.format_email_to_markdown(email))
            parts.append("\n")
        parts.append(
            f"\n\n---\n*Batch {batch_num} of emails for {customer_name}"
            " - Generated by cs-transcript-cli*\n"
        )
        return "".join(parts)

    def save_emails_as_markdown(self, emails, customer_name, custom_dir_name=None):
        """Write emails, oldest first, to Markdown files of up to 20 each."""
        emails = list(emails)
        if not emails:
            logger.info("No emails to save")
            return []

        output_dir = self._resolve_output_dir(
            custom_dir_name, f"ct_{sanitize_filename(customer_name)}"
        )
        output_dir.mkdir(parents=True, exist_ok=True)

        ordered = sorted(emails, key=lambda email: email.sent_at)
        clean_customer = sanitize_filename(customer_name)
        saved = []
        for start in range(0, len(ordered), EMAIL_BATCH_SIZE):
            batch = ordered[start:start + EMAIL_BATCH_SIZE]
            batch_num = start // EMAIL_BATCH_SIZE + 1

            dates = _real_dates(email.sent_at for email in batch)
            if dates:
                opening, closing = min(dates).strftime("%m-%d"), max(dates).strftime("%m-%d")
            else:
                opening = closing = "unknown"

            stem = f"{clean_customer}-emls-{opening}-{closing}"
            filepath = output_dir / f"{stem}.md"
            if filepath.exists():
                filepath = output_dir / f"{stem}-batch{batch_num}.md"

            content = self.format_emails_batch_to_markdown(batch, batch_num, customer_name)
            try:
                filepath.write_text(content, encoding="utf-8")
            except OSError as exc:
                logger.error("Failed to save email batch %d: %s", batch_num, exc)
                continue
            saved.append(filepath)
            logger.info(
                "Saved email batch %d (%d emails) to %s", batch_num, len(batch), filepath
            )

        logger.info(
            "Saved %d emails across %d batch files to %s", len(emails), len(saved), output_dir
        )
        return saved