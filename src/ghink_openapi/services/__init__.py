"""Typed callers for individual Open API services."""

from ghink_openapi.services import real_name, short_link

__all__ = ["real_name", "short_link"]
