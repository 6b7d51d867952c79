"""
Core module for application configuration and utilities.

The placement engine lives in ``placement_service.core.placement`` and is not
imported at package level to avoid circular imports with
``placement_service.models`` (which imports the placement types).
"""
from .config import settings

__all__ = ["settings"]
