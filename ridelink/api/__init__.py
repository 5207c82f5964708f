"""HTTP interface - FastAPI application, routes and CORS policy."""

from .app import create_app

__all__ = ["create_app"]
