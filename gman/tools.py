"""Run external programs and capture what they print."""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
from collections.abc import Sequence

FORMATTER_NAME = "rman"


def _diagnostic(message: str) -> None:
    print(f"gman: {message}", file=sys.stderr)


def run_command(argv: Sequence[str], input_text: str | None = None) -> str:
    """Run `argv` without a shell and return its standard output as text.

    Failures never raise: a missing program or a non-zero exit is reported
    on stderr and whatever stdout was produced (possibly "") is returned.
    """
    command = [str(part) for part in argv]
    try:
        result = subprocess.run(
            command,
            input=input_text,
            text=True,
            encoding="utf-8",
            errors="replace",
            capture_output=True,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        _diagnostic(f"could not run {command[0]}: {exc}")
        return ""

    if result.returncode != 0:
        details = (result.stderr or "").strip().splitlines()
        summary = details[0] if details else f"exit status {result.returncode}"
        _diagnostic(f"{command[0]} failed: {summary}")
    return result.stdout or ""


def find_formatter(configured: str | None = None) -> str | None:
    """Locate PolyglotMan; a configured path wins when it is executable."""
    if configured:
        candidate = os.path.expanduser(configured)
        if os.path.isfile(candidate) and os.access(candidate, os.X_OK):
            return candidate
        found = shutil.which(candidate)
        if found is not None:
            return found
        _diagnostic(f"configured formatter not usable: {configured}")
    return shutil.which(FORMATTER_NAME)
