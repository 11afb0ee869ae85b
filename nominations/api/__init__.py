"""HTTP surface for nomination sessions."""

from nominations.api.app import create_app

__all__ = ["create_app"]
