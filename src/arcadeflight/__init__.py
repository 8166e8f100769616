"""arcadeflight - arcade-style flight simulator."""

from arcadeflight.version import __version__

__all__ = ["__version__"]
