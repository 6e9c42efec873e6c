"""
Models / accounts.py
Rôle:
- Tables du magasin d'identifiants : joueurs, administrateurs, inscriptions en attente
  de vérification et demandes de réinitialisation de mot de passe.

Contraintes:
- `players.player_name` et `players.email` uniques (la base tranche les courses à l'inscription).
- `players.score` jamais négatif.
- Une seule vérification en attente / une seule demande de reset par e-mail (clé primaire = email).
"""
from datetime import date, datetime
from typing import Optional

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from eulark.models.base import Base, utcnow


class Player(Base):
    """Joueur vérifié (créé uniquement après validation du code e-mail)."""

    __tablename__ = "players"
    __table_args__ = (CheckConstraint("score >= 0", name="ck_players_score_positive"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    player_name: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_checkin: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)


class AdminUser(Base):
    """Compte administrateur (provisionné hors du flux HTTP, cf. scripts/create_admin.py)."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)


class PendingVerification(Base):
    """Inscription en attente : données du futur joueur + code à 6 chiffres envoyé par e-mail."""

    __tablename__ = "pending_verifications"

    email: Mapped[str] = mapped_column(String(255), primary_key=True)
    player_name: Mapped[str] = mapped_column(String(64), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    verification_code: Mapped[str] = mapped_column(String(6), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class PasswordReset(Base):
    """Jeton de réinitialisation à usage unique."""

    __tablename__ = "password_resets"

    email: Mapped[str] = mapped_column(String(255), primary_key=True)
    token: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class SpecialPermission(Base):
    """Joueurs disposant d'un accès spécial (vérifié par /api/player/check-permission)."""

    __tablename__ = "special_permissions"

    player_id: Mapped[int] = mapped_column(
        ForeignKey("players.id", ondelete="CASCADE"), primary_key=True
    )
