"""API middleware: CORS."""

from zkbank.api.middleware.cors import setup_cors

__all__ = ["setup_cors"]
