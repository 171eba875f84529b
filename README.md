# csreports

Turns customer call and email records into readable Markdown files. It also
converts HTML message bodies into plain text or Markdown. It uses only the
standard library.

## Installation

```
pip install csreports
```

## HTML conversion

```python
from csreports.html import HTMLProcessor, html_to_text, html_to_markdown

html_to_text("<p>Hello <strong>world</strong></p>")       # "Hello world"
html_to_markdown("<h1>Title</h1><p>Some <em>text</em></p>")

processor = HTMLProcessor()
processor.process_content("<div>Plain text please</div>")   # same as to_text
processor.process_with_config("<nav>menu</nav><p>Body</p>", ["nav"])
```

`to_markdown` drops `script`, `style`, `meta` and `link` elements. It renders
the following as Markdown:

- headings, bold, italics and inline code
- links and images
- lists and block quotes
- `pre` blocks and horizontal rules

`to_text` first converts the HTML to Markdown. It then strips the Markdown
formatting and collapses whitespace. Empty or blank input gives `""`.

`process_with_config` skips exactly the tags you pass. A failed conversion
raises `HTMLProcessingError`.

## Call and email reports

`CallMarkdownFormatter` writes Markdown files encoded as UTF-8:

- one file per call
- email batch files of up to 20 emails each, named after the customer and
  the month-day range the batch covers

```python
from pathlib import Path
from csreports.markdown import CallMarkdownFormatter

formatter = CallMarkdownFormatter(Path("reports"))
formatter.save_multiple_calls(calls)
formatter.save_emails_as_markdown(emails, "Acme Corp")
```

### Output directory

With no output directory, `default_output_dir()` is used, which is
`~/Desktop/team-calls-output`. In that default mode:

- `save_multiple_calls` writes into `~/Desktop/team-calls-YYYY-MM-DD`, or into
  `~/Desktop/ct_<name>` when a `custom_dir_name` is given.
- `save_emails_as_markdown` writes into `~/Desktop/ct_<name>`. The name is the
  custom directory name if you give one, and the customer name otherwise.

A call that fails to save is logged and skipped. So is an email batch that
fails to save.

### Call and email records

The package defines no record classes. Calls and emails are plain objects
read by attribute.

A call has these attributes:

- `id`, `title`
- `scheduled_start` (a `datetime`), and optionally `actual_start`
- `customer_name`, `generated_title`, `transcript`, `recording_url`
- `participants`: each with `name`, `title`, `company`, `email`

An email has these attributes:

- `id`, `subject`, `sent_at`
- `sender`: with `name`, `email`, `title`, `company`
- `recipients`: each with `name`, `email`
- `direction`: an enum member or a string
- `is_automated`, `is_template`
- `body_text`, `snippet`

### Summary report

`csreports.summary.CallSummaryReporter.generate_summary_report(calls,
output_path=None, resolved_customer_name=None)` returns a Markdown overview
of the calls. It groups them by customer. When `resolved_customer_name` is
given, every call is listed under that name. When `output_path` is given,
the overview is also written to that path.

## Helpers

`csreports.naming` holds the smaller pieces:

- `sanitize_filename` reduces a string to lower-case letters, digits and
  single hyphens, at most 50 characters long. It returns `unnamed` when
  nothing is left.
- `extract_customer_name` guesses the customer from a title such as
  `Acme + Team - Weekly Sync`.
- `clean_transcript` bolds speaker names. `clean_email_body` tidies up an
  email body and truncates it at 5000 characters.
- `format_date` and `format_date_for_filename` format timestamps.
- `is_fallback_date` tells whether a date lies within a minute of the
  current time.

## Terminal

`csreports.terminal.ensure_terminal()` returns `True` when standard output is
a terminal. Otherwise it uses `osascript` to open a macOS Terminal window and
rerun the current program there. It returns whether that launch could be
started.

## What it does not do

The package only formats records it is handed. It does not:

- fetch calls or emails from any service
- provide record classes
- offer a command-line program

## Running the tests

```
pip install csreports[test]
pytest
```