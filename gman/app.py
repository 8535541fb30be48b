"""Command-line entry point."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

from .config import load_config
from .window import GManWindow, build_app_icon


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gman",
        description="Browse man pages and STL reference documentation.",
    )
    parser.add_argument(
        "query",
        nargs="?",
        default=None,
        help="Page to show at start-up, e.g. printf, man:ls(1) or stl:vector.",
    )
    parser.add_argument("--stl-root", default=None, help="Directory holding the STL manual HTML files.")
    parser.add_argument("--formatter", default=None, help="Path to PolyglotMan (rman).")
    parser.add_argument("--sections", default=None, help="Colon-separated man sections for plain searches.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    config = load_config().with_overrides(
        stl_root=args.stl_root,
        formatter=args.formatter,
        sections=args.sections,
    )
    if args.stl_root is not None and not Path(args.stl_root).expanduser().is_dir():
        print(f"STL root is not a directory: {args.stl_root}", file=sys.stderr)
        return 2

    app = QApplication(sys.argv[:1])
    app.setApplicationName("gman")
    app.setDesktopFileName("gman")
    app_icon = build_app_icon()
    app.setWindowIcon(app_icon)

    window = GManWindow(config, app_icon)
    window.show()
    if args.query:
        window.run_query(args.query)
    else:
        window.show_home()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
