"""Database Metadata — SQLAlchemy declarative base shared by all models.

Invariants:
    - Engine and sessions live in infrastructure/database.py, never here
"""
