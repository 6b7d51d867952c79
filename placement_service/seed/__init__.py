"""
Seed data for the question bank.
"""
from .questions import SEED_QUESTIONS

__all__ = ["SEED_QUESTIONS"]
