"""Web API layer."""

from prayer_circle.api.app import create_app
from prayer_circle.api.dependencies import get_app_state

__all__ = ["create_app", "get_app_state"]
