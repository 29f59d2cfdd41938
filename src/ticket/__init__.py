"""tk - plain-text ticket tracking with dependency-aware workflows."""

from ticket._version import version as __version__

__all__ = ["__version__"]
