"""HTTP API for a UI layer."""

from pharosbet_core.api.app import create_app

__all__ = ["create_app"]
