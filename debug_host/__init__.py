"""Debug adapter host: contributor registry, session manager, and service facade."""

from .version import __version__  # noqa: F401
