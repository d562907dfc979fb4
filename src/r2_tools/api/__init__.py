"""HTTP API for bucket browsing."""

from .app import app, create_app, get_object_store

__all__ = ["app", "create_app", "get_object_store"]
