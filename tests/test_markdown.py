from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timedelta

import pytest

from csreports.markdown import CallMarkdownFormatter, default_output_dir


@dataclass
class Participant:
    name: str
    title: str | None = None
    company: str | None = None
    email: str | None = None


@dataclass
class Call:
    id: str
    title: str
    scheduled_start: datetime
    customer_name: str | None = None
    generated_title: str | None = None
    participants: list = field(default_factory=list)
    transcript: str | None = None
    recording_url: str | None = None
    actual_start: datetime | None = None


class Direction(enum.Enum):
    Inbound = "inbound"
    Outbound = "outbound"


@dataclass
class Contact:
    email: str
    name: str | None = None
    title: str | None = None
    company: str | None = None


@dataclass
class Email:
    id: str
    subject: str
    sender: Contact
    sent_at: datetime
    direction: Direction = Direction.Inbound
    recipients: list = field(default_factory=list)
    is_automated: bool = False
    is_template: bool = False
    body_text: str | None = None
    snippet: str | None = None


START = datetime(2024, 3, 5, 14, 30, 0)


def make_call(**overrides):
    values = dict(
        id="abcdefghijkl",
        title="Acme + Team - Weekly Sync",
        scheduled_start=START,
        customer_name="Acme",
        participants=[Participant("Jane Doe", "CSM", "Acme", "jane@example.com")],
        transcript="Alice: Hello\nBob: Hi there",
        recording_url="https://calls.example.com/1",
    )
    values.update(overrides)
    return Call(**values)


def make_email(index=0, **overrides):
    values = dict(
        id=f"mail-{index}",
        subject=f"Subject {index}",
        sender=Contact("alice@example.com", name="Alice"),
        sent_at=datetime(2024, 1, 1, 9, 0) + timedelta(days=index),
        recipients=[Contact("bob@example.com", name="Bob")],
        body_text="Hello there",
    )
    values.update(overrides)
    return Email(**values)


def strip_generated_line(text):
    return text.rsplit("*Generated on", 1)[0]


def test_format_call_header_and_attendees(tmp_path):
    text = CallMarkdownFormatter(tmp_path).format_call_to_markdown(make_call())
    assert text.startswith("# Acme + Team - Weekly Sync\n\n**Customer:** Acme\n")
    assert "**Date:** 2024-03-05T14:30:00" in text
    assert "**Call ID:** `abcdefghijkl`" in text
    assert "**Call Link:** https://calls.example.com/1" in text
    assert "- **Jane Doe** - CSM (Acme) - jane@example.com\n" in text
    assert "**Alice:** Hello\n\n**Bob:** Hi there" in text


def test_format_call_without_optional_fields(tmp_path):
    call = make_call(customer_name=None, participants=[], transcript=None, recording_url=None)
    text = CallMarkdownFormatter(tmp_path).format_call_to_markdown(call)
    assert "**Customer:** Unknown Customer" in text
    assert "No attendee information available.\n" in text
    assert "**Call Link:**" not in text
    assert "No transcript available" in text


def test_save_call_uses_generated_title(tmp_path):
    formatter = CallMarkdownFormatter(tmp_path)
    call = make_call(generated_title="Quarterly Review")
    path = formatter.save_call_markdown(call)
    assert path.name == "quarterly-review-2024-03-05t143000-abcdefgh.md"
    assert path.parent == tmp_path
    written = path.read_text(encoding="utf-8")
    assert strip_generated_line(written) == strip_generated_line(
        formatter.format_call_to_markdown(call)
    )


def test_save_call_falls_back_to_customer_name(tmp_path):
    path = CallMarkdownFormatter(tmp_path).save_call_markdown(
        make_call(generated_title="   ", customer_name="Big Corp")
    )
    assert path.name.startswith("big-corp-")
    assert path.name.endswith("-abcdefgh.md")


def test_save_call_falls_back_to_title_and_short_id(tmp_path):
    call = make_call(customer_name=None, id="xyz", title="Globex - Kickoff")
    path = CallMarkdownFormatter(tmp_path).save_call_markdown(call)
    assert path.name.startswith("globex-")
    assert path.name.endswith("-xyz.md")


def test_save_multiple_calls_into_configured_dir(tmp_path):
    calls = [make_call(id=f"call{i}aaaaaa", customer_name=f"Customer {i}") for i in range(3)]
    paths = CallMarkdownFormatter(tmp_path).save_multiple_calls(calls, None)
    assert len(paths) == 3
    assert all(path.parent == tmp_path and path.exists() for path in paths)


def test_default_mode_writes_to_desktop(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    formatter = CallMarkdownFormatter()
    assert formatter.output_dir == default_output_dir()
    paths = formatter.save_multiple_calls([make_call()], "My Project")
    assert paths[0].parent == tmp_path / "Desktop" / "ct_my-project"


def test_format_email_details(tmp_path):
    email = make_email(
        sender=Contact("alice@example.com", name="Alice", title="CTO", company="Acme"),
        recipients=[Contact("bob@example.com", name="Bob"), Contact("carol@example.com")],
    )
    text = CallMarkdownFormatter(tmp_path).format_email_to_markdown(email)
    assert text.startswith("## Subject 0\n\n")
    assert "**From:** Alice (alice@example.com) - CTO @ Acme\n" in text
    assert "**Direction:** inbound\n" in text
    assert "**Email ID:** `mail-0`" in text
    assert "**To:** Bob (bob@example.com), carol (carol@example.com)" in text
    assert "\n\n### Content\n\nHello there\n\n---\n" in text
    assert "**Type:**" not in text


@pytest.mark.parametrize(
    ("automated", "template", "label"),
    [(True, False, "Automated"), (False, True, "Template/Automated")],
)
def test_format_email_type(tmp_path, automated, template, label):
    email = make_email(is_automated=automated, is_template=template)
    text = CallMarkdownFormatter(tmp_path).format_email_to_markdown(email)
    assert f"\n**Type:** {label}\n" in text


def test_format_email_snippet_and_missing_content(tmp_path):
    formatter = CallMarkdownFormatter(tmp_path)
    preview = formatter.format_email_to_markdown(make_email(body_text=None, snippet="Short bit"))
    assert "*[Preview only - full content not available]*\n\nShort bit" in preview
    empty = formatter.format_email_to_markdown(
        make_email(body_text=None, snippet=None, subject="", sender=Contact(""))
    )
    assert "*No content available*" in empty
    assert empty.startswith("## No Subject\n\n**From:** Unknown Sender\n")


def test_batch_of_no_emails(tmp_path):
    formatter = CallMarkdownFormatter(tmp_path)
    result = formatter.format_emails_batch_to_markdown([], 1, "Acme")
    assert result == "# No Emails\n\nNo emails found in this batch."


def test_batch_orders_newest_first_with_date_range(tmp_path):
    older = make_email(0, sent_at=datetime(2024, 1, 5, 10, 0), subject="Older")
    newer = make_email(1, sent_at=datetime(2024, 2, 10, 10, 0), subject="Newer")
    text = CallMarkdownFormatter(tmp_path).format_emails_batch_to_markdown(
        [older, newer], 2, "Acme"
    )
    assert text.startswith("# Acme - Emails Batch 2\n\n")
    assert "**Date Range:** 01/05 - 02/10/2024  \n" in text
    assert "**Total Emails:** 2  \n" in text
    assert text.index("## Newer") < text.index("## Older")
    assert "### Email 1/2" in text and "### Email 2/2" in text
    assert text.endswith("*Batch 2 of emails for Acme - Generated by cs-transcript-cli*\n")


def test_batch_ignores_fallback_dates(tmp_path):
    email = make_email(sent_at=datetime.now())
    text = CallMarkdownFormatter(tmp_path).format_emails_batch_to_markdown([email], 1, "Acme")
    assert "**Date Range:** Unknown Date Range" in text


def test_save_emails_in_batches_of_twenty(tmp_path):
    emails = [make_email(i) for i in reversed(range(25))]
    paths = CallMarkdownFormatter(tmp_path).save_emails_as_markdown(emails, "Acme Corp", None)
    assert [path.name for path in paths] == [
        "acme-corp-emls-01-01-01-20.md",
        "acme-corp-emls-01-21-01-25.md",
    ]
    first = paths[0].read_text(encoding="utf-8")
    second = paths[1].read_text(encoding="utf-8")
    assert "**Total Emails:** 20  " in first
    assert "**Total Emails:** 5  " in second
    assert "# Acme Corp - Emails Batch 2" in second


def test_save_emails_avoids_overwriting(tmp_path):
    formatter = CallMarkdownFormatter(tmp_path)
    emails = [make_email(i) for i in range(2)]
    first = formatter.save_emails_as_markdown(emails, "Acme", None)
    second = formatter.save_emails_as_markdown(emails, "Acme", None)
    assert second[0].name == first[0].name.replace(".md", "-batch1.md")
    assert first[0].exists() and second[0].exists()


def test_save_emails_with_unknown_dates(tmp_path):
    paths = CallMarkdownFormatter(tmp_path).save_emails_as_markdown(
        [make_email(sent_at=datetime.now())], "Acme", None
    )
    assert paths[0].name == "acme-emls-unknown-unknown.md"


def test_save_no_emails(tmp_path):
    out = tmp_path / "out"
    assert CallMarkdownFormatter(out).save_emails_as_markdown([], "Acme", None) == []
    assert not out.exists()