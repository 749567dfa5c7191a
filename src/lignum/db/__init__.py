# src/lignum/db/__init__.py
"""Database configuration and utilities."""

from .gateway import transaction
from .session import SessionLocal, get_db

__all__ = ["get_db", "SessionLocal", "transaction"]
