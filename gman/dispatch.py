"""Routes search text and clicked links to the right document source."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from typing import Callable
from urllib.parse import unquote, urlsplit

import requests

from .config import DEFAULT_SECTIONS
from .loaders import FetchResult, Viewport, fetch_url, is_markdown_path, read_local_file
from .manpages import ManPageSource
from .navigation import History, NavigationState
from .render import DocumentRenderer
from .stl import StlPages, base_href, strip_std_prefix

HOME_LOCATION = "about:gman"

_MAN_URL_RE = re.compile(r"man:(.+)\((.+)\)")
_STL_URL_RE = re.compile(r"stl:((?:std::)?[A-Za-z0-9_]+)")

Fetcher = Callable[..., FetchResult]


@dataclass(frozen=True)
class LoadResult:
    """Outcome of one navigation; falsy when nothing new was shown."""

    location: str
    ok: bool
    message: str = ""

    def __bool__(self) -> bool:
        return self.ok


def parse_man_url(url: str) -> tuple[str, str] | None:
    """Split `man:page(section)` into `(page, section)`."""
    match = _MAN_URL_RE.fullmatch(url)
    if match is None:
        return None
    return match.group(1), match.group(2)


def parse_stl_url(url: str) -> str | None:
    """Return the lookup term of `stl:[std::]term`, without `std::`."""
    match = _STL_URL_RE.fullmatch(url)
    if match is None:
        return None
    return strip_std_prefix(match.group(1))


def is_absolute_network_url(url: str) -> bool:
    return url.startswith(("http://", "https://"))


class Dispatcher:
    """Turns user input into documents shown in a viewport.

    Every `show_*` method returns a `LoadResult`; failures also reach the
    viewport as a status message.
    Successful loads are recorded in `history` unless `record` is False,
    which is how back/forward replay entries.
    """

    def __init__(
        self,
        viewport: Viewport,
        man_pages: ManPageSource,
        stl_pages: StlPages,
        navigation: NavigationState | None = None,
        history: History | None = None,
        renderer: DocumentRenderer | None = None,
        default_sections: str = DEFAULT_SECTIONS,
        session: requests.Session | None = None,
        timeout: float | None = None,
        fetcher: Fetcher = fetch_url,
    ) -> None:
        self.viewport = viewport
        self.man_pages = man_pages
        self.stl_pages = stl_pages
        self.navigation = navigation if navigation is not None else NavigationState()
        self.history = history if history is not None else History()
        self.renderer = renderer if renderer is not None else DocumentRenderer()
        self.default_sections = default_sections
        self.session = session
        self.timeout = timeout
        self._fetch = fetcher

    def search(self, text: str) -> LoadResult:
        """Handle text typed into the search box."""
        query = text.strip()
        if query.startswith("man:"):
            return self.open_man_url(query)
        if query.startswith("stl:"):
            return self.open_stl_url(query)
        if not query:
            return LoadResult(query, False)
        # No scheme: guess that it's a system call or library function.
        return self.show_man_page(self.default_sections, query)

    def follow_link(self, url: str, record: bool = True) -> LoadResult:
        """Handle a link clicked in the viewport."""
        if url.startswith("man:"):
            return self.open_man_url(url, record)
        if url.startswith("stl:"):
            return self.open_stl_url(url, record)
        if url == HOME_LOCATION:
            return self.home(record)
        if url.startswith("file://"):
            return self.show_file(url, record)
        if is_absolute_network_url(url):
            return self.show_url(url, record)
        return self.show_url(self.navigation.resolve(url), record)

    def open_man_url(self, url: str, record: bool = True) -> LoadResult:
        parsed = parse_man_url(url)
        if parsed is None:
            return self._fail(url, f"Not a man page reference: {url}", diagnostic=False)
        page, section = parsed
        return self.show_man_page(section, page, record)

    def open_stl_url(self, url: str, record: bool = True) -> LoadResult:
        term = parse_stl_url(url)
        if term is None:
            return self._fail(url, f"Not an STL reference: {url}", diagnostic=False)
        return self.show_stl_page(term, record)

    def show_man_page(self, section: str, page: str, record: bool = True) -> LoadResult:
        man_page = self.man_pages.fetch(section, page)
        # Output is shown even when empty; a failed lookup has no page of its own.
        self.viewport.show_html(man_page.html)
        if man_page.is_empty:
            message = f"No manual entry for {page} in section {section}"
            return self._fail(man_page.location, message, diagnostic=False)
        return self._succeed(man_page.location, record)

    def show_stl_page(self, term: str, record: bool = True) -> LoadResult:
        """Show the page for `term`, which callers pass without `std::`."""
        location = f"stl:{term}"
        try:
            text = self.stl_pages.load(term)
        except OSError as exc:
            return self._fail(location, f"Could not read STL page for {term}: {exc}")
        if text is None:
            index = self.stl_pages.index
            message = index.problem or f"No STL documentation for {term}"
            return self._fail(location, message, diagnostic=False)
        self.viewport.show_html(text, base_href(self.stl_pages.root))
        return self._succeed(location, record)

    def show_file(self, url: str, record: bool = True) -> LoadResult:
        # Links inside loaded pages arrive as file:///dir/page.html#anchor.
        path = unquote(urlsplit(url).path)
        try:
            text = read_local_file(path)
        except OSError as exc:
            return self._fail(url, f"Could not open {path}: {exc}")
        if is_markdown_path(path):
            text = self.renderer.render_document(text, path.rsplit("/", 1)[-1])
        self.viewport.show_html(text, url)
        return self._succeed(url, record)

    def show_url(self, url: str, record: bool = True) -> LoadResult:
        result = self._fetch(url, self.viewport, session=self.session, timeout=self.timeout)
        if not result.ok:
            return self._fail(url, f"Could not load {url}: {result.error}")
        self.navigation.current_url = url
        return self._succeed(url, record)

    def home(self, record: bool = True) -> LoadResult:
        self.viewport.show_html(self.renderer.welcome_page())
        return self._succeed(HOME_LOCATION, record)

    def back(self) -> LoadResult:
        return self._replay(self.history.peek_back(), self.history.back)

    def forward(self) -> LoadResult:
        return self._replay(self.history.peek_forward(), self.history.forward)

    def _replay(self, location: str | None, commit: Callable[[], str | None]) -> LoadResult:
        if location is None:
            return LoadResult("", False)
        result = self.follow_link(location, record=False)
        if result:
            commit()
        return result

    def _succeed(self, location: str, record: bool) -> LoadResult:
        if record:
            self.history.visit(location)
        return LoadResult(location, True)

    def _fail(self, location: str, message: str, diagnostic: bool = True) -> LoadResult:
        if diagnostic:
            print(f"gman: {message}", file=sys.stderr)
        self.viewport.notify(message)
        return LoadResult(location, False, message)
