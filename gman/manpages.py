"""Man page retrieval and tidying of PolyglotMan HTML."""

from __future__ import annotations

import bz2
import gzip
import html
import lzma
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from .tools import run_command

# rman expands this template for every cross reference it emits.
CROSS_REFERENCE_TEMPLATE = "man:%s(%s)"

# rman 3.0.9 (Mac OS) and 3.2 (Linux) differ in tag case and in the quote
# character around attribute values, hence the IGNORECASE and ['"].
_TOC_BLOCK_RE = re.compile(r"<hr><p>.*</ul>", re.IGNORECASE | re.DOTALL)
_TOC_ANCHOR_RE = re.compile(
    r"<a name=['\"]sect\d+['\"] href=['\"]#toc\d+['\"]>(.*?)</a>",
    re.IGNORECASE | re.DOTALL,
)
_TOC_LINK_RE = re.compile(r"<a href=['\"]#toc['\"]>Table of Contents</a><p>", re.IGNORECASE)
_OVERSTRIKE_RE = re.compile(r".\x08")

_DECOMPRESSORS: dict[str, Callable] = {
    ".gz": gzip.open,
    ".bz2": bz2.open,
    ".xz": lzma.open,
    ".lzma": lzma.open,
}

CommandRunner = Callable[..., str]


def tidy_formatter_html(text: str) -> str:
    """Drop the table of contents rman appends, and the links into it."""
    # Subsections produce nested lists, so run through the last </ul>.
    text = _TOC_BLOCK_RE.sub("", text)
    text = _TOC_ANCHOR_RE.sub(r"\1", text)
    return _TOC_LINK_RE.sub("", text)


def strip_overstrike(text: str) -> str:
    """Remove backspace bold/underline sequences, like `col -b`."""
    return _OVERSTRIKE_RE.sub("", text)


def read_man_source(path: str | Path) -> str:
    """Return the troff source at `path`, decompressing by suffix."""
    source = Path(path)
    opener = _DECOMPRESSORS.get(source.suffix.lower())
    if opener is None:
        return source.read_text(encoding="utf-8", errors="replace")
    with opener(source, "rt", encoding="utf-8", errors="replace") as handle:
        return handle.read()


@dataclass(frozen=True)
class ManPage:
    section: str
    page: str
    html: str
    formatted: bool

    @property
    def location(self) -> str:
        return f"man:{self.page}({self.section})"

    @property
    def is_empty(self) -> bool:
        return not self.html.strip()


class ManPageSource:
    """Produces HTML for a man page, preferring PolyglotMan when present."""

    def __init__(self, formatter: str | None, runner: CommandRunner = run_command) -> None:
        self.formatter = formatter
        self._run = runner

    def locate(self, section: str, page: str) -> str:
        """Return the on-disk path `man -w` reports, or "" if none."""
        output = self._run(["man", "-S", section, "-w", page])
        return output.split("\n")[0].strip()

    def fetch(self, section: str, page: str) -> ManPage:
        if self.formatter is None:
            return self._fetch_plain(section, page)

        filename = self.locate(section, page)
        source = ""
        if filename:
            try:
                source = read_man_source(filename)
            except (OSError, EOFError, lzma.LZMAError) as exc:
                print(f"gman: could not read {filename}: {exc}", file=sys.stderr)
        command = [self.formatter, "-f", "HTML", "-r", CROSS_REFERENCE_TEMPLATE, "-S"]
        output = self._run(command, input_text=source) if source else ""
        return ManPage(section, page, tidy_formatter_html(output), True)

    def _fetch_plain(self, section: str, page: str) -> ManPage:
        output = strip_overstrike(self._run(["man", "-S", section, page]))
        body = f"<pre>{html.escape(output)}</pre>" if output.strip() else ""
        return ManPage(section, page, body, False)
