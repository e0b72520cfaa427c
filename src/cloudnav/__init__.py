"""CloudNav: a terminal bookmark manager with optional cloud sync."""

__version__ = "1.0.0"
