"""Shared fixtures: a fake viewport and a small STL documentation tree."""
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from gman.loaders import FetchResult  # noqa: E402
from gman.manpages import ManPage  # noqa: E402


STL_INDEX_HTML = """\
<HTML><HEAD><TITLE>Index</TITLE></HEAD><BODY>
<TABLE>
<TR><TD><A href="Vector.html">vector</A></TD><TD>Container</TD></TR>
<TR><TD><A href="basic_string.html">basic_string&lt;charT, traits, Alloc&gt;</A></TD><TD>String</TD></TR>
<TR><TD><A href="Map.html">map</A></TD><TD>Container</TD></TR>
<TR><TD><A href="Container.html">Container</A></TD><TD>Concept</TD></TR>
<TR><TD>not a link</TD></TR>
</TABLE>
</BODY></HTML>
"""

VECTOR_HTML = """\
<HTML>
<HEAD>
<TITLE>vector&lt;T, Alloc&gt;</TITLE>
</HEAD>
<BODY>
<A href="Container.html">Container</A>
<table>
<tr><td>
<tt>void push_back(const T&amp;)</tt>
</td>
<td>Inserts a new element at the end.</td></tr>
</table>
</BODY>
</HTML>
"""


class StreamRecorder:
    def __init__(self, base_url):
        self.base_url = base_url
        self.chunks = []
        self.encoding = None
        self.closed = False

    def write(self, chunk):
        self.chunks.append(chunk)

    def close(self, encoding):
        self.encoding = encoding
        self.closed = True

    @property
    def body(self):
        return b"".join(self.chunks)


class FakeViewport:
    def __init__(self):
        self.shown = []
        self.notices = []
        self.streams = []

    def show_html(self, text, base_url=None):
        self.shown.append((text, base_url))

    def begin_stream(self, base_url):
        stream = StreamRecorder(base_url)
        self.streams.append(stream)
        return stream

    def notify(self, message):
        self.notices.append(message)

    @property
    def last_html(self):
        return self.shown[-1][0] if self.shown else None


class RecordingManPages:
    """Stands in for ManPageSource; returns canned HTML per page name."""

    def __init__(self, pages=None):
        self.pages = pages if pages is not None else {}
        self.calls = []

    def fetch(self, section, page):
        self.calls.append((section, page))
        return ManPage(section, page, self.pages.get(page, f"<p>{page}</p>"), True)


class RecordingFetcher:
    def __init__(self, failing=()):
        self.failing = set(failing)
        self.urls = []

    def __call__(self, url, viewport, session=None, timeout=None):
        self.urls.append(url)
        if url in self.failing:
            return FetchResult(url, False, "connection refused")
        viewport.begin_stream(url).close("utf-8")
        return FetchResult(url, True, status_code=200)


@pytest.fixture
def viewport():
    return FakeViewport()


@pytest.fixture
def stl_root(tmp_path):
    root = tmp_path / "stl-manual" / "html"
    root.mkdir(parents=True)
    (root / "stl_index.html").write_text(STL_INDEX_HTML)
    (root / "Vector.html").write_text(VECTOR_HTML)
    (root / "basic_string.html").write_text("<html><head><title>basic_string</title></head><body>s</body></html>")
    (root / "Map.html").write_text("<html><head></head><body>map</body></html>")
    return root
