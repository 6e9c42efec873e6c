"""
Models / content.py
Rôle:
- Contenus éditables par l'admin (règles, commandes, bannissements, sponsors)
  et tickets de contact envoyés par les joueurs.

Notes:
- Les ids sont attribués par la base et ne changent jamais.
- `ContactMessage.status` suit le cycle `open` → `read` → `closed`.
"""
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from eulark.models.base import Base, utcnow

TICKET_OPEN = "open"
TICKET_READ = "read"
TICKET_CLOSED = "closed"


class Rule(Base):
    __tablename__ = "server_rules"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    category: Mapped[str] = mapped_column(String(64), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)


class Command(Base):
    __tablename__ = "server_commands"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    command: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)


class Ban(Base):
    __tablename__ = "banned_players"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    player_name: Mapped[str] = mapped_column(String(64), nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    duration: Mapped[str] = mapped_column(String(64), nullable=False)
    ban_date: Mapped[date] = mapped_column(Date, nullable=False)


class Sponsor(Base):
    __tablename__ = "sponsors"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)


class ContactMessage(Base):
    """Ticket joueur. `email` est toujours résolu côté serveur depuis la fiche joueur."""

    __tablename__ = "contact_messages"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    player_name: Mapped[str] = mapped_column(String(64), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=TICKET_OPEN)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
