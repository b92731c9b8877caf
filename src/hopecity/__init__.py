"""Hope City site configuration service."""

__version__ = "0.1.0"
