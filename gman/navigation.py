"""Where the viewer is, where it has been, and which link is hovered."""

from __future__ import annotations

from typing import Callable


class NavigationState:
    """Holds the last network URL that loaded successfully."""

    def __init__(self, current_url: str = "") -> None:
        self.current_url = current_url

    def resolve(self, link: str) -> str:
        # Plain concatenation: "http://host/docs/" + "../a.html" stays
        # "http://host/docs/../a.html".
        return self.current_url + link


class History:
    """Back/forward stacks of locations the dispatcher can replay."""

    def __init__(self) -> None:
        self._back: list[str] = []
        self._forward: list[str] = []
        self.current: str | None = None

    def visit(self, location: str) -> None:
        if location == self.current:
            return
        if self.current is not None:
            self._back.append(self.current)
        self.current = location
        self._forward.clear()

    def can_go_back(self) -> bool:
        return bool(self._back)

    def can_go_forward(self) -> bool:
        return bool(self._forward)

    def peek_back(self) -> str | None:
        return self._back[-1] if self._back else None

    def peek_forward(self) -> str | None:
        return self._forward[-1] if self._forward else None

    def back(self) -> str | None:
        if not self._back:
            return None
        if self.current is not None:
            self._forward.append(self.current)
        self.current = self._back.pop()
        return self.current

    def forward(self) -> str | None:
        if not self._forward:
            return None
        if self.current is not None:
            self._back.append(self.current)
        self.current = self._forward.pop()
        return self.current


class LinkHint:
    """Shows at most one hovered URL at a time in a status area."""

    def __init__(self, show: Callable[[str], None], clear: Callable[[], None]) -> None:
        self._show = show
        self._clear = clear
        self.shown: str | None = None

    def hover(self, url: str | None) -> None:
        if self.shown is not None:
            self._clear()
            self.shown = None
        if url:
            self._show(url)
            self.shown = url
