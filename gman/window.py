"""Main window: search box, HTML viewport, menus and status bar."""

from __future__ import annotations

import requests
from PySide6.QtCore import QByteArray, Qt, QUrl
from PySide6.QtGui import QAction, QColor, QIcon, QKeySequence, QPainter, QPen, QPixmap
from PySide6.QtWebEngineCore import QWebEnginePage, QWebEngineSettings
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QStyle,
    QVBoxLayout,
    QWidget,
)

from . import __version__
from .config import GManConfig
from .dispatch import Dispatcher
from .manpages import ManPageSource
from .navigation import LinkHint
from .stl import StlPages
from .tools import find_formatter

STATUS_MESSAGE_TIMEOUT_MS = 5000
# QWebEngineView::setContent refuses documents above 2 MB.
SET_CONTENT_LIMIT = 2 * 1024 * 1024


def build_app_icon() -> QIcon:
    """Draw the window icon: a page with a magnifying glass."""
    pixmap = QPixmap(64, 64)
    pixmap.fill(Qt.GlobalColor.transparent)

    painter = QPainter(pixmap)
    painter.setRenderHint(QPainter.RenderHint.Antialiasing)
    painter.setPen(Qt.PenStyle.NoPen)
    painter.setBrush(QColor("#2f81f7"))
    painter.drawRoundedRect(8, 4, 40, 52, 6, 6)

    pen = QPen(QColor("#ffffff"))
    pen.setWidth(3)
    pen.setCapStyle(Qt.PenCapStyle.RoundCap)
    painter.setPen(pen)
    for y in (16, 24, 32):
        painter.drawLine(16, y, 40, y)

    pen = QPen(QColor("#f5d34f"))
    pen.setWidth(5)
    pen.setCapStyle(Qt.PenCapStyle.RoundCap)
    painter.setPen(pen)
    painter.setBrush(Qt.BrushStyle.NoBrush)
    painter.drawEllipse(30, 34, 16, 16)
    painter.drawLine(45, 49, 56, 60)
    painter.end()
    return QIcon(pixmap)


class DocumentPage(QWebEnginePage):
    """Hands clicked links to the window instead of letting the engine load them."""

    def __init__(self, window: GManWindow) -> None:
        super().__init__(window)
        self._window = window

    def acceptNavigationRequest(  # noqa: N802
        self,
        url: QUrl,
        nav_type: QWebEnginePage.NavigationType,
        is_main_frame: bool,
    ) -> bool:
        if nav_type == QWebEnginePage.NavigationType.NavigationTypeLinkClicked and is_main_frame:
            # In-page anchors still scroll normally.
            if url.hasFragment() and url.adjusted(QUrl.UrlFormattingOption.RemoveFragment) == self.url().adjusted(
                QUrl.UrlFormattingOption.RemoveFragment
            ):
                return True
            self._window.follow_link(url.toString())
            return False
        return super().acceptNavigationRequest(url, nav_type, is_main_frame)


class WebViewStream:
    """Collects streamed response bytes and hands them to the view on close.

    The web view only accepts whole documents, so small pages are buffered
    here. Once a page outgrows what `setContent` accepts, buffering stops
    and the view is pointed at the URL to load it natively.
    """

    def __init__(self, view: QWebEngineView, base_url: str, limit: int = SET_CONTENT_LIMIT) -> None:
        self._view = view
        self._base_url = base_url
        self._limit = limit
        self._data = bytearray()
        self.oversized = False

    def write(self, chunk: bytes) -> None:
        if self.oversized:
            return
        self._data.extend(chunk)
        if len(self._data) > self._limit:
            self.oversized = True
            self._data.clear()

    def close(self, encoding: str | None) -> None:
        if self.oversized:
            self._view.load(QUrl(self._base_url))
            return
        mime_type = f"text/html;charset={encoding or 'utf-8'}"
        self._view.setContent(QByteArray(bytes(self._data)), mime_type, QUrl(self._base_url))


class GManWindow(QMainWindow):
    def __init__(self, config: GManConfig, app_icon: QIcon):
        super().__init__()
        self.config = config

        self.setWindowTitle("GMan")
        self.setWindowIcon(app_icon)
        self.resize(800, 600)

        self.preview = QWebEngineView()
        self.page = DocumentPage(self)
        self.preview.setPage(self.page)
        # STL pages point at file: resources through their <base> tag.
        preview_settings = self.preview.settings()
        preview_settings.setAttribute(QWebEngineSettings.WebAttribute.LocalContentCanAccessFileUrls, True)
        preview_settings.setAttribute(QWebEngineSettings.WebAttribute.LocalContentCanAccessRemoteUrls, True)
        self.preview.titleChanged.connect(self._on_title_changed)

        self.link_hint = LinkHint(self.statusBar().showMessage, self.statusBar().clearMessage)
        self.page.linkHovered.connect(self.link_hint.hover)

        self.dispatcher = Dispatcher(
            self,
            ManPageSource(find_formatter(config.formatter)),
            StlPages(config.stl_root),
            default_sections=config.sections,
            session=requests.Session(),
            timeout=config.http_timeout,
        )

        style = self.style()
        self.back_btn = QPushButton(style.standardIcon(QStyle.StandardPixmap.SP_ArrowBack), "")
        self.back_btn.setToolTip("Back")
        self.back_btn.clicked.connect(self._go_back)
        self.forward_btn = QPushButton(style.standardIcon(QStyle.StandardPixmap.SP_ArrowForward), "")
        self.forward_btn.setToolTip("Forward")
        self.forward_btn.clicked.connect(self._go_forward)

        search_label = QLabel("Search:")
        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("printf, man:ls(1), stl:vector")
        self.search_input.returnPressed.connect(self._run_search)

        search_btn = QPushButton("!")
        search_btn.setToolTip("Look up the search text")
        search_btn.clicked.connect(self._run_search)

        top_bar = QHBoxLayout()
        top_bar.setContentsMargins(0, 0, 0, 0)
        top_bar.addWidget(self.back_btn)
        top_bar.addWidget(self.forward_btn)
        top_bar.addWidget(search_label)
        top_bar.addWidget(self.search_input, 1)
        top_bar.addWidget(search_btn)

        central = QWidget()
        layout = QVBoxLayout(central)
        layout.addLayout(top_bar)
        layout.addWidget(self.preview, 1)
        self.setCentralWidget(central)

        self._build_menus()
        self._update_history_buttons()
        self.statusBar().showMessage("Ready", 2000)
        self.search_input.setFocus()

    def _build_menus(self) -> None:
        file_menu = self.menuBar().addMenu("&File")
        quit_action = QAction("&Quit", self)
        quit_action.setShortcut(QKeySequence("Ctrl+Q"))
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

        edit_menu = self.menuBar().addMenu("&Edit")
        copy_action = QAction("&Copy", self)
        copy_action.setShortcut(QKeySequence.StandardKey.Copy)
        copy_action.triggered.connect(lambda: self.preview.triggerPageAction(QWebEnginePage.WebAction.Copy))
        edit_menu.addAction(copy_action)
        select_all_action = QAction("Select &All", self)
        select_all_action.setShortcut(QKeySequence.StandardKey.SelectAll)
        select_all_action.triggered.connect(
            lambda: self.preview.triggerPageAction(QWebEnginePage.WebAction.SelectAll)
        )
        edit_menu.addAction(select_all_action)

        go_menu = self.menuBar().addMenu("&Go")
        self.back_action = QAction("&Back", self)
        self.back_action.setShortcut(QKeySequence.StandardKey.Back)
        self.back_action.triggered.connect(self._go_back)
        go_menu.addAction(self.back_action)
        self.forward_action = QAction("&Forward", self)
        self.forward_action.setShortcut(QKeySequence.StandardKey.Forward)
        self.forward_action.triggered.connect(self._go_forward)
        go_menu.addAction(self.forward_action)
        home_action = QAction("&Home", self)
        home_action.setShortcut(QKeySequence("Alt+Home"))
        home_action.triggered.connect(self.show_home)
        go_menu.addAction(home_action)

        help_menu = self.menuBar().addMenu("&Help")
        about_action = QAction("&About GMan", self)
        about_action.triggered.connect(self._show_about)
        help_menu.addAction(about_action)

    # Viewport interface used by the dispatcher.

    def show_html(self, text: str, base_url: str | None = None) -> None:
        self.preview.setHtml(text, QUrl(base_url) if base_url else QUrl())

    def begin_stream(self, base_url: str) -> WebViewStream:
        return WebViewStream(self.preview, base_url)

    def notify(self, message: str) -> None:
        self.statusBar().showMessage(message, STATUS_MESSAGE_TIMEOUT_MS)

    # Event handlers.

    def run_query(self, text: str) -> None:
        self.search_input.setText(text)
        self._run_search()

    def show_home(self) -> None:
        self.dispatcher.home()
        self._update_history_buttons()

    def follow_link(self, url: str) -> None:
        self.dispatcher.follow_link(url)
        self._update_history_buttons()

    def _run_search(self) -> None:
        self.dispatcher.search(self.search_input.text())
        self._update_history_buttons()

    def _go_back(self) -> None:
        self.dispatcher.back()
        self._update_history_buttons()

    def _go_forward(self) -> None:
        self.dispatcher.forward()
        self._update_history_buttons()

    def _update_history_buttons(self) -> None:
        history = self.dispatcher.history
        self.back_btn.setEnabled(history.can_go_back())
        self.back_action.setEnabled(history.can_go_back())
        self.forward_btn.setEnabled(history.can_go_forward())
        self.forward_action.setEnabled(history.can_go_forward())

    def _on_title_changed(self, title: str) -> None:
        # setHtml pages without a <title> report their data: URL as the title.
        if title and not title.startswith(("data:", "about:")):
            self.setWindowTitle(f"{title} - GMan")
        else:
            self.setWindowTitle("GMan")

    def _show_about(self) -> None:
        QMessageBox.about(
            self,
            "About GMan",
            f"<b>GMan {__version__}</b><p>Documentation viewer for programmers.</p>"
            "<p>© 2007 Elliott Hughes</p>",
        )
