"""Reference implementation of the auth endpoints the client talks to."""

from kotoba.server.app import create_app

__all__ = ["create_app"]
