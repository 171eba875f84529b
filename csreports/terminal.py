"""Make sure the program runs attached to a terminal window."""

from __future__ import annotations

import os
import shlex
import subprocess
import sys
from pathlib import Path

__all__ = ["ensure_terminal"]


def _launch_command() -> str | None:
    if not sys.argv or not sys.argv[0]:
        return None
    program = Path(sys.argv[0]).resolve()
    if program.is_file() and os.access(program, os.X_OK) and program.suffix != ".py":
        return shlex.quote(str(program))
    return f"{shlex.quote(sys.executable)} {shlex.quote(str(program))}"


def _applescript_string(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def ensure_terminal() -> bool:
    """Return True if stdout is a terminal, otherwise try to relaunch in Terminal."""
    stdout = sys.stdout
    if stdout is not None and stdout.isatty():
        return True

    command = _launch_command()
    if command is None:
        return False

    apple_script = (
        "\n"
        '        tell application "Terminal"\n'
        "            activate\n"
        f'            do script "{_applescript_string(command)}"\n'
        "        end tell\n"
        "        "
    )
    try:
        subprocess.Popen(["osascript", "-e", apple_script])
    except OSError:
        return False
    return True