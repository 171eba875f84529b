"""Text helpers for report files: filenames, customer names, transcripts, email bodies, dates."""

from __future__ import annotations

import re
from datetime import datetime

__all__ = [
    "sanitize_filename",
    "extract_customer_name",
    "clean_transcript",
    "clean_email_body",
    "format_date",
    "format_date_for_filename",
    "is_fallback_date",
]

UNKNOWN_CUSTOMER = "Unknown Customer"
MAX_FILENAME_LENGTH = 50
MAX_EMAIL_BODY_LENGTH = 5000
FALLBACK_WINDOW_SECONDS = 60

_DISALLOWED = re.compile(r"[^a-zA-Z0-9\s\-._()]")
_SPACES_AND_PARENS = re.compile(r"[\s()]+")
_DOTS_AND_UNDERSCORES = re.compile(r"[._]+")
_HYPHEN_RUNS = re.compile(r"-+")

_EXTRA_BLANK_LINES = re.compile(r"\n\n\n+")
_BODY_BLANK_LINES = re.compile(r"\n\s*\n\s*\n+")
_HORIZONTAL_SPACE = re.compile(r"[ \t]+")
_LEADING_QUOTE = re.compile(r"^[\s>]+")
_REPLY_HEADER = re.compile(r"(^|\n)On .* wrote:\s*\Z")

_TRUNCATION_NOTE = "\n\n*[Email content truncated for readability]*"


def _byte_length(text: str) -> int:
    return len(text.encode("utf-8"))


def sanitize_filename(filename):
    """Reduce a string to lower-case letters, digits and single hyphens, at most 50 long."""
    if not filename:
        return "unnamed"
    sanitized = _DISALLOWED.sub("", filename)
    sanitized = _SPACES_AND_PARENS.sub("-", sanitized)
    sanitized = _DOTS_AND_UNDERSCORES.sub("-", sanitized)
    sanitized = _HYPHEN_RUNS.sub("-", sanitized)
    sanitized = sanitized.strip("-.").lower()
    if len(sanitized) > MAX_FILENAME_LENGTH:
        sanitized = sanitized[:MAX_FILENAME_LENGTH].rstrip("-.")
    return sanitized or "unnamed"


def extract_customer_name(title):
    """Guess the customer from a call title such as 'Customer + Team - Meeting'."""
    if " + " in title and " - " in title:
        candidate = title.split(" + ", 1)[0].strip()
        if _byte_length(candidate) > 1:
            return candidate

    if " - " in title:
        candidate = title.split(" - ", 1)[0].strip()
        if _byte_length(candidate) > 1:
            return candidate

    if title.startswith("Postman + "):
        remaining = title[len("Postman + "):]
        head, separator, _ = remaining.partition(" - ")
        if separator and head.strip():
            return head.strip()

    return UNKNOWN_CUSTOMER


def clean_transcript(transcript):
    """Format a transcript as Markdown with bold speaker names."""
    if not transcript:
        return "No transcript available."

    cleaned = transcript.strip()
    if "**" in cleaned and ":**" in cleaned:
        return _EXTRA_BLANK_LINES.sub("\n\n", cleaned)

    formatted = []
    for raw_line in cleaned.split("\n"):
        line = raw_line.strip()
        if not line:
            continue
        speaker, colon, text = line.partition(":")
        if colon and _byte_length(speaker) < 50:
            formatted.append(f"**{speaker.strip()}:** {text.strip()}")
        else:
            formatted.append(line)
    return "\n\n".join(formatted)


def clean_email_body(body_text):
    """Tidy an email body for Markdown and cut it down to a readable length."""
    if not body_text.strip():
        return "*No content available*"

    cleaned = body_text.strip()
    cleaned = _BODY_BLANK_LINES.sub("\n\n", cleaned)
    cleaned = _HORIZONTAL_SPACE.sub(" ", cleaned)
    cleaned = _LEADING_QUOTE.sub("", cleaned)
    cleaned = _REPLY_HEADER.sub(
        lambda match: f"{match.group(1)}\n---\n\n**Previous conversation:**\n", cleaned
    )

    if len(cleaned) > MAX_EMAIL_BODY_LENGTH:
        cleaned = cleaned[:MAX_EMAIL_BODY_LENGTH] + _TRUNCATION_NOTE
    return cleaned


def format_date(date):
    """Format a timestamp for display, e.g. 'January 02, 2024 at 03:04 PM'."""
    return date.strftime("%B %d, %Y at %I:%M %p")


def format_date_for_filename(date):
    """Format a timestamp as YYYY-MM-DDtHHMMSS for use in filenames."""
    return date.strftime("%Y-%m-%dt%H%M%S")


def is_fallback_date(date, now):
    """Tell whether a date lies within a minute of now, so is likely a stand-in value."""
    difference = abs((now - date).total_seconds())
    return difference <= FALLBACK_WINDOW_SECONDS