"""
Models / base.py
Rôle:
- Base déclarative SQLAlchemy commune à toutes les tables du site.
- `utcnow()` : horodatage UTC *naïf* (SQLite ne conserve pas le fuseau; on reste homogène partout).
"""
from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)
