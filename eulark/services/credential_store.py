"""
Service: credential_store.py
Rôle :
- Seul point d'accès aux tables d'identifiants : `players`, `users` (admins),
  `pending_verifications`, `password_resets`, `special_permissions`.
- Aucune règle métier : lectures, upserts, et quelques écritures atomiques (une transaction).

Concurrence :
- Pas de verrou applicatif. Les courses sont tranchées par la base :
  - unicité nom/e-mail → `IntegrityError` remontée à l'appelant (`promote_pending`),
  - jeton de reset consommé par un DELETE conditionnel (`consume_reset`),
  - check-in par UPDATE conditionnel (`checkin`).

Erreurs :
- Les exceptions SQLAlchemy sont propagées telles quelles; les services les traduisent
  (cf. `errors.store_guard`).
"""
from datetime import date, datetime
from typing import Any, Dict, Optional, Type

from sqlalchemy import delete, or_, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from eulark.models.accounts import (
    AdminUser,
    PasswordReset,
    PendingVerification,
    Player,
    SpecialPermission,
)
from eulark.models.base import Base
from .database import Database


def _upsert(session: Session, model: Type[Base], values: Dict[str, Any], key: str) -> None:
    """INSERT ... ON CONFLICT (key) DO UPDATE, avec repli `merge` pour les autres dialectes."""
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        stmt = postgresql.insert(model).values(**values)
    elif dialect == "sqlite":
        stmt = sqlite.insert(model).values(**values)
    else:
        session.merge(model(**values))
        return
    changes = {k: v for k, v in values.items() if k != key}
    session.execute(stmt.on_conflict_do_update(index_elements=[key], set_=changes))


class CredentialStore:
    def __init__(self, db: Database) -> None:
        self.db = db

    # ---------- Joueurs ----------

    def player_by_id(self, player_id: int) -> Optional[Player]:
        with self.db.session() as s:
            return s.get(Player, player_id)

    def player_by_email(self, email: str) -> Optional[Player]:
        with self.db.session() as s:
            return s.scalars(select(Player).where(Player.email == email)).first()

    def player_by_name(self, player_name: str) -> Optional[Player]:
        with self.db.session() as s:
            return s.scalars(select(Player).where(Player.player_name == player_name)).first()

    def player_by_identifier(self, identifier: str) -> Optional[Player]:
        """
        Nom de joueur (exact) OU e-mail (stocké en minuscules, comparé en minuscules).
        Si les deux désignent des joueurs différents, l'e-mail l'emporte.
        """
        email = identifier.lower()
        with self.db.session() as s:
            rows = s.scalars(
                select(Player).where(or_(Player.player_name == identifier, Player.email == email))
            ).all()
        for row in rows:
            if row.email == email:
                return row
        return rows[0] if rows else None

    # ---------- Vérifications en attente ----------

    def upsert_pending(
        self,
        *,
        email: str,
        player_name: str,
        password_hash: str,
        verification_code: str,
        expires_at: datetime,
    ) -> None:
        values = {
            "email": email,
            "player_name": player_name,
            "password_hash": password_hash,
            "verification_code": verification_code,
            "expires_at": expires_at,
        }
        with self.db.transaction() as s:
            _upsert(s, PendingVerification, values, "email")

    def pending(self, email: str) -> Optional[PendingVerification]:
        with self.db.session() as s:
            return s.get(PendingVerification, email)

    def delete_pending(self, email: str) -> None:
        with self.db.transaction() as s:
            s.execute(delete(PendingVerification).where(PendingVerification.email == email))

    def promote_pending(self, pending: PendingVerification) -> Player:
        """Crée le joueur et supprime la vérification dans la même transaction."""
        with self.db.transaction() as s:
            player = Player(
                player_name=pending.player_name,
                email=pending.email,
                password_hash=pending.password_hash,
                score=0,
            )
            s.add(player)
            s.execute(delete(PendingVerification).where(PendingVerification.email == pending.email))
            s.flush()
            return player

    # ---------- Réinitialisation de mot de passe ----------

    def upsert_reset(self, *, email: str, token: str, expires_at: datetime) -> None:
        with self.db.transaction() as s:
            _upsert(s, PasswordReset, {"email": email, "token": token, "expires_at": expires_at}, "email")

    def reset_by_token(self, token: str) -> Optional[PasswordReset]:
        with self.db.session() as s:
            return s.scalars(select(PasswordReset).where(PasswordReset.token == token)).first()

    def delete_reset(self, email: str) -> None:
        with self.db.transaction() as s:
            s.execute(delete(PasswordReset).where(PasswordReset.email == email))

    def consume_reset(self, token: str, password_hash: str) -> bool:
        """
        Consomme le jeton (DELETE conditionnel) puis met à jour le mot de passe.
        Renvoie False si le jeton a déjà été consommé entre-temps.
        """
        with self.db.transaction() as s:
            row = s.scalars(select(PasswordReset).where(PasswordReset.token == token)).first()
            if row is None:
                return False
            deleted = s.execute(delete(PasswordReset).where(PasswordReset.token == token))
            if deleted.rowcount != 1:
                return False
            s.execute(update(Player).where(Player.email == row.email).values(password_hash=password_hash))
            return True

    # ---------- Administrateurs ----------

    def admin_by_username(self, username: str) -> Optional[AdminUser]:
        with self.db.session() as s:
            return s.scalars(select(AdminUser).where(AdminUser.username == username)).first()

    def create_admin(self, username: str, password_hash: str) -> AdminUser:
        with self.db.transaction() as s:
            admin = AdminUser(username=username, password_hash=password_hash)
            s.add(admin)
            s.flush()
            return admin

    # ---------- Check-in & permissions ----------

    def checkin(self, player_id: int, today: date, points: int) -> Optional[int]:
        """
        UPDATE conditionnel : n'ajoute les points que si aucun check-in n'a eu lieu `today`.
        Renvoie le nouveau score, ou None si le joueur a déjà pointé (ou n'existe pas).
        """
        with self.db.transaction() as s:
            result = s.execute(
                update(Player)
                .where(
                    Player.id == player_id,
                    or_(Player.last_checkin.is_(None), Player.last_checkin != today),
                )
                .values(score=Player.score + points, last_checkin=today)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                return None
            return s.scalar(select(Player.score).where(Player.id == player_id))

    def has_special_permission(self, player_id: int) -> bool:
        with self.db.session() as s:
            return s.get(SpecialPermission, player_id) is not None

    def grant_special_permission(self, player_id: int) -> None:
        with self.db.transaction() as s:
            s.merge(SpecialPermission(player_id=player_id))
