"""SGI STL reference pages: term index and page rewriting."""

from __future__ import annotations

import re
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

STL_INDEX_FILE_NAME = "stl_index.html"
STD_PREFIX = "std::"

_INDEX_ENTRY_RE = re.compile(r'.*<A href="(.+\.html)">([a-z0-9_]+)(&lt;.*&gt;)?</A></TD>.*')
_HEAD_RE = re.compile(r"<head>", re.IGNORECASE)
_TT_CELL_RE = re.compile(r"\n<tt>(.*?)</tt>\n</td>", re.IGNORECASE)

# std::string and std::wstring are typedefs for std::basic_string.
TERM_ALIASES = {"basic_string": ("string", "wstring")}


def strip_std_prefix(term: str) -> str:
    return term[len(STD_PREFIX):] if term.startswith(STD_PREFIX) else term


@dataclass(frozen=True)
class StlIndex:
    """Read-only map from STL term to its documentation page."""

    root: Path
    entries: Mapping[str, Path] = field(default_factory=dict)
    problem: str | None = None

    @classmethod
    def build(cls, root: Path, index_name: str = STL_INDEX_FILE_NAME) -> StlIndex:
        """Scan `root/index_name` once.

        A missing documentation tree is not an error: the index comes back
        empty with `problem` describing what was missing.
        """
        root = Path(root)
        if not root.is_dir():
            problem = 'STL documentation not installed. install package "stl-manual".'
            print(f"gman: {problem}", file=sys.stderr)
            return cls(root, MappingProxyType({}), problem)

        index_path = root / index_name
        try:
            lines = index_path.read_text(encoding="utf-8", errors="replace").splitlines()
        except OSError as exc:
            problem = f"could not read STL index {index_path}: {exc}"
            print(f"gman: {problem}", file=sys.stderr)
            return cls(root, MappingProxyType({}), problem)

        entries: dict[str, Path] = {}
        for line in lines:
            match = _INDEX_ENTRY_RE.match(line)
            if match is None:
                continue
            filename = root / match.group(1)
            term = match.group(2)
            entries[term] = filename
            for alias in TERM_ALIASES.get(term, ()):
                entries[alias] = filename

        print(f"gman: Learned of {len(entries)} STL terms.", file=sys.stderr)
        return cls(root, MappingProxyType(entries))

    @property
    def available(self) -> bool:
        return self.problem is None

    def lookup(self, term: str) -> Path | None:
        return self.entries.get(term)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, term: object) -> bool:
        return term in self.entries


def base_href(root: Path) -> str:
    uri = Path(root).absolute().as_uri()
    return uri if uri.endswith("/") else uri + "/"


def rewrite_stl_page(text: str, root: Path) -> str:
    """Make a stored STL page render correctly outside its directory."""
    base_tag = f'<base href="{base_href(root)}">'
    # Relative links resolve against the documentation root.
    text, count = _HEAD_RE.subn(lambda m: m.group(0) + base_tag, text, count=1)
    if count == 0:
        text = f"<head>{base_tag}</head>" + text
    # Member tables read better with TT-only cells shown as PRE.
    return _TT_CELL_RE.sub(r"\n<pre>\1</pre></td>\n", text)


class StlPages:
    """Loads rewritten STL pages; the index is built on first use."""

    def __init__(self, root: Path, index_name: str = STL_INDEX_FILE_NAME) -> None:
        self.root = Path(root)
        self.index_name = index_name
        self._index: StlIndex | None = None

    @property
    def index(self) -> StlIndex:
        if self._index is None:
            self._index = StlIndex.build(self.root, self.index_name)
        return self._index

    def load(self, term: str) -> str | None:
        """Return the page for `term` (given without `std::`), or None if unknown."""
        filename = self.index.lookup(term)
        if filename is None:
            return None
        text = filename.read_text(encoding="utf-8", errors="replace")
        return rewrite_stl_page(text, self.root)
