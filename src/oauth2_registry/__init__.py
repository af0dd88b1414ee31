"""OAuth2 client registry backend."""

__version__ = "1.0.0"
