"""Local file and HTTP loaders feeding the HTML viewport."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import requests

FETCH_CHUNK_SIZE = 8192
MARKDOWN_SUFFIXES = {".md", ".markdown"}


class HtmlStream(Protocol):
    def write(self, chunk: bytes) -> None: ...

    def close(self, encoding: str | None) -> None: ...


class Viewport(Protocol):
    """What the dispatcher needs from whatever displays documents."""

    def show_html(self, text: str, base_url: str | None = None) -> None: ...

    def begin_stream(self, base_url: str) -> HtmlStream: ...

    def notify(self, message: str) -> None: ...


@dataclass(frozen=True)
class FetchResult:
    url: str
    ok: bool
    error: str = ""
    status_code: int | None = None


def read_local_file(path: str | Path) -> str:
    return Path(path).read_text(encoding="utf-8", errors="replace")


def is_markdown_path(path: str | Path) -> bool:
    return Path(path).suffix.lower() in MARKDOWN_SUFFIXES


def fetch_url(
    url: str,
    viewport: Viewport,
    session: requests.Session | None = None,
    timeout: float | None = None,
) -> FetchResult:
    """GET `url` and stream the body into `viewport` as it arrives.

    Nothing is written to the viewport unless the server answered with a
    success status.
    """
    client = session if session is not None else requests
    try:
        with client.get(url, stream=True, timeout=timeout) as response:
            response.raise_for_status()
            stream = viewport.begin_stream(response.url or url)
            for chunk in response.iter_content(chunk_size=FETCH_CHUNK_SIZE):
                if chunk:
                    stream.write(chunk)
            stream.close(response.encoding)
            return FetchResult(url, True, status_code=response.status_code)
    except requests.RequestException as exc:
        status = exc.response.status_code if exc.response is not None else None
        return FetchResult(url, False, str(exc), status)
