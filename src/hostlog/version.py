"""hostlog version information."""

__version__ = "0.3.0"
