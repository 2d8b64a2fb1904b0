"""ASGI application factory and dependencies for the menubot server."""

from menubot.server.app import app, create_app

__all__ = ["app", "create_app"]
