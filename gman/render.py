"""Markdown to HTML for the welcome page and local markdown files."""

from __future__ import annotations

import html

from markdown_it import MarkdownIt

WELCOME_MARKDOWN = """\
# GMan

Documentation viewer for programmers.

Type a name in the search box and press Enter. Plain words are looked up
as man pages in sections 2 and 3, in that order.

| You type | You get |
|---|---|
| `printf` | the first `printf` page in sections 2 then 3 |
| `man:ls(1)` | the `ls` page from section 1 |
| `stl:vector` | the SGI STL reference page for `vector` |
| `stl:std::string` | the same page as `stl:basic_string` |

Try [open(2)](man:open(2)), [printf(3)](man:printf(3)) or
[std::map](stl:map).
"""

_PAGE_STYLE = """
    :root {
      color-scheme: light dark;
      --fg: #1f2937;
      --bg: #f9fafb;
      --code-bg: #e5e7eb;
      --border: #d1d5db;
      --link: #0b57d0;
    }
    @media (prefers-color-scheme: dark) {
      :root {
        --fg: #e5e7eb;
        --bg: #111827;
        --code-bg: #1f2937;
        --border: #374151;
        --link: #8ab4f8;
      }
    }
    body {
      margin: 24px auto;
      max-width: 900px;
      padding: 0 16px;
      font-family: "Noto Sans", "DejaVu Sans", sans-serif;
      line-height: 1.5;
      color: var(--fg);
      background: var(--bg);
    }
    a { color: var(--link); }
    code, pre { background: var(--code-bg); border-radius: 4px; }
    code { padding: 0 3px; }
    pre { padding: 8px 12px; overflow-x: auto; }
    table { border-collapse: collapse; }
    th, td { border: 1px solid var(--border); padding: 4px 10px; }
"""


class DocumentRenderer:
    """Converts markdown to a standalone HTML document."""

    def __init__(self) -> None:
        self._md = MarkdownIt("commonmark", {"html": True, "linkify": False}).enable("table")
        # commonmark's default validator rejects unknown schemes such as man:
        self._md.validateLink = lambda url: not url.strip().lower().startswith(("javascript:", "vbscript:"))

    def render_document(self, markdown_text: str, title: str) -> str:
        body = self._md.render(markdown_text)
        return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8"/>
  <title>{html.escape(title)}</title>
  <style>{_PAGE_STYLE}  </style>
</head>
<body>
{body}</body>
</html>
"""

    def welcome_page(self) -> str:
        return self.render_document(WELCOME_MARKDOWN, "GMan")
