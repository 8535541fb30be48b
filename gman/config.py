"""Viewer settings: defaults, ~/.gman.cfg, and environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

CONFIG_FILE_NAME = ".gman.cfg"
DEFAULT_STL_ROOT = Path("/usr/share/doc/stl-manual/html")
DEFAULT_SECTIONS = "2:3"
DEFAULT_HTTP_TIMEOUT = 20.0


@dataclass(frozen=True)
class GManConfig:
    stl_root: Path = DEFAULT_STL_ROOT
    # None means "look for rman on PATH".
    formatter: str | None = None
    sections: str = DEFAULT_SECTIONS
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    def with_overrides(self, **changes) -> GManConfig:
        """Return a copy with every non-None keyword applied."""
        applied = {key: value for key, value in changes.items() if value is not None}
        if "stl_root" in applied:
            applied["stl_root"] = Path(applied["stl_root"]).expanduser()
        return replace(self, **applied)


def config_file_path() -> Path:
    return Path.home() / CONFIG_FILE_NAME


def _parse_config_text(raw: str) -> dict[str, str]:
    values: dict[str, str] = {}
    for line in raw.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        values[key.strip().lower()] = value.strip()
    return values


def load_config(path: Path | None = None, environ: dict[str, str] | None = None) -> GManConfig:
    """Resolve settings from the config file, then the environment.

    A missing, unreadable or malformed config file falls back to defaults;
    individual bad values are ignored rather than reported.
    """
    cfg_path = path if path is not None else config_file_path()
    env = os.environ if environ is None else environ
    values: dict[str, str] = {}
    try:
        if cfg_path.is_file():
            values = _parse_config_text(cfg_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError):
        values = {}

    config = GManConfig()
    stl_root = env.get("GMAN_STL_ROOT") or values.get("stl_root")
    formatter = env.get("GMAN_FORMATTER") or values.get("formatter")
    sections = values.get("sections")
    timeout: float | None = None
    try:
        if values.get("http_timeout"):
            timeout = float(values["http_timeout"])
            if timeout <= 0:
                timeout = None
    except ValueError:
        timeout = None

    return config.with_overrides(
        stl_root=stl_root or None,
        formatter=formatter or None,
        sections=sections or None,
        http_timeout=timeout,
    )
