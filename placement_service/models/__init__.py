"""
Database models package.
"""
from .base import Base, engine, get_db, SessionLocal
from .models import (
    User,
    Question,
    PlacementTest,
    PlacementTestQuestion,
)

__all__ = [
    "Base",
    "engine",
    "get_db",
    "SessionLocal",
    "User",
    "Question",
    "PlacementTest",
    "PlacementTestQuestion",
]
