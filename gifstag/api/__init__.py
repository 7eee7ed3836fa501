"""HTTP API for building GIFs from uploaded images."""

from .app import api_router, create_api_app

__all__ = ["api_router", "create_api_app"]
