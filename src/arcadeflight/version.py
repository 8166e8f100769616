"""Version information for arcadeflight."""

__version__ = "0.1.0"


def get_version() -> str:
    """Version string shown by --version and in the startup log."""
    return __version__
