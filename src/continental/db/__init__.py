"""
Database module for Continental.

Provides SQLAlchemy ORM models for stored coefficient tables and session
management.

Usage:
    from continental.db import get_session, CountryCoefficientRecord

    with get_session() as session:
        rows = session.query(CountryCoefficientRecord).all()
"""

from continental.db.models import Base, ClubCoefficientRecord, CountryCoefficientRecord
from continental.db.session import SessionLocal, get_engine, get_session

__all__ = [
    # Base
    "Base",
    # Models
    "ClubCoefficientRecord",
    "CountryCoefficientRecord",
    # Session
    "get_session",
    "get_engine",
    "SessionLocal",
]
