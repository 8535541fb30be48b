"""gman: documentation viewer for man pages and the SGI STL reference."""

__version__ = "0.2.0"
