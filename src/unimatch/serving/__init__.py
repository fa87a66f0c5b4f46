from .app import build_app as build_app

__all__ = ["build_app"]
