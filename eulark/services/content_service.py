"""
Service: content_service.py
Rôle :
- CRUD générique sur les contenus publics du site : règles, commandes, bannissements, sponsors.
- Tickets de contact : création par un joueur authentifié, suivi/suppression par l'admin.

Contrat :
- `list_entries(kind)` : lecture publique, ordre stable (id, ou date décroissante puis id).
- `create` / `update` / `delete` : réservés à l'admin (garde au niveau des routes).
- Champs validés par un schéma Pydantic par type avant tout appel à la base;
  `update` fusionne le patch avec l'existant puis revalide l'ensemble.
- Erreurs base → `InternalError` générique, cause dans les logs.

Cycle d'un ticket : `open` → `read` → `closed` (ou suppression à tout moment).
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as SchemaError
from sqlalchemy import select

from eulark.models.base import Base
from eulark.models.content import (
    TICKET_CLOSED,
    TICKET_OPEN,
    TICKET_READ,
    Ban,
    Command,
    ContactMessage,
    Rule,
    Sponsor,
)
from .credential_store import CredentialStore
from .database import Database
from .errors import NotFound, ValidationError, store_guard


# ---------- Schémas de validation ----------

class _Fields(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class RuleFields(_Fields):
    category: str = Field(min_length=1, max_length=64)
    description: str = Field(min_length=1)


class CommandFields(_Fields):
    command: str = Field(min_length=1, max_length=128)
    description: str = Field(min_length=1)


class BanFields(_Fields):
    player_name: str = Field(min_length=1, max_length=64)
    reason: str = Field(min_length=1)
    duration: str = Field(min_length=1, max_length=64)
    ban_date: date


class SponsorFields(_Fields):
    name: str = Field(min_length=1, max_length=128)
    amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2)


@dataclass(frozen=True)
class ContentKind:
    model: Type[Base]
    schema: Type[_Fields]
    # (colonne, décroissant ?), toujours terminé par l'id pour un ordre total
    ordering: Tuple[Tuple[str, bool], ...]


CONTENT_KINDS: Dict[str, ContentKind] = {
    "rules": ContentKind(Rule, RuleFields, (("id", False),)),
    "commands": ContentKind(Command, CommandFields, (("id", False),)),
    "bans": ContentKind(Ban, BanFields, (("ban_date", True), ("id", True))),
    "sponsors": ContentKind(Sponsor, SponsorFields, (("created_at", True), ("id", True))),
}

TICKET_TRANSITIONS = {
    TICKET_OPEN: {TICKET_READ, TICKET_CLOSED},
    TICKET_READ: {TICKET_CLOSED},
    TICKET_CLOSED: set(),
}


def _first_error(exc: SchemaError) -> str:
    err = exc.errors()[0]
    field = ".".join(str(p) for p in err.get("loc", ())) or "body"
    return f"Invalid field '{field}': {err.get('msg', 'invalid value')}"


def serialize(row: Base) -> Dict[str, Any]:
    """Ligne ORM → dict JSON-compatible (dates ISO, montants en float)."""
    out: Dict[str, Any] = {}
    for col in row.__table__.columns:
        value = getattr(row, col.name)
        if isinstance(value, (datetime, date)):
            value = value.isoformat()
        elif isinstance(value, Decimal):
            value = float(value)
        out[col.name] = value
    return out


class ContentService:
    def __init__(
        self,
        db: Database,
        store: CredentialStore,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.db = db
        self.store = store
        self.log = logger or logging.getLogger(__name__)

    @staticmethod
    def _kind(kind: str) -> ContentKind:
        try:
            return CONTENT_KINDS[kind]
        except KeyError:
            raise NotFound(f"Unknown content type '{kind}'.")

    def _validate(self, ckind: ContentKind, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return ckind.schema.model_validate(data).model_dump()
        except SchemaError as exc:
            raise ValidationError(_first_error(exc))

    # ---------- Contenus publics ----------

    def list_entries(self, kind: str) -> List[Dict[str, Any]]:
        ckind = self._kind(kind)
        order = [
            getattr(ckind.model, col).desc() if desc else getattr(ckind.model, col).asc()
            for col, desc in ckind.ordering
        ]
        with store_guard(self.log, f"list_{kind}"):
            with self.db.session() as s:
                rows = s.scalars(select(ckind.model).order_by(*order)).all()
                return [serialize(r) for r in rows]

    def create(self, kind: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        ckind = self._kind(kind)
        values = self._validate(ckind, fields or {})
        with store_guard(self.log, f"create_{kind}"):
            with self.db.transaction() as s:
                row = ckind.model(**values)
                s.add(row)
                s.flush()
                data = serialize(row)
        self.log.info("Content created", extra={"content_kind": kind, "content_id": data["id"]})
        return data

    def update(self, kind: str, entry_id: int, fields: Dict[str, Any]) -> Dict[str, Any]:
        ckind = self._kind(kind)
        patch = {k: v for k, v in (fields or {}).items() if k in ckind.schema.model_fields}
        if not patch:
            raise ValidationError("No updatable field provided.")
        with store_guard(self.log, f"update_{kind}"):
            with self.db.transaction() as s:
                row = s.get(ckind.model, entry_id)
                if row is None:
                    raise NotFound()
                current = {name: getattr(row, name) for name in ckind.schema.model_fields}
                values = self._validate(ckind, {**current, **patch})
                for name, value in values.items():
                    setattr(row, name, value)
                s.flush()
                return serialize(row)

    def delete(self, kind: str, entry_id: int) -> None:
        ckind = self._kind(kind)
        with store_guard(self.log, f"delete_{kind}"):
            with self.db.transaction() as s:
                row = s.get(ckind.model, entry_id)
                if row is None:
                    raise NotFound()
                s.delete(row)
        self.log.info("Content deleted", extra={"content_kind": kind, "content_id": entry_id})

    # ---------- Tickets ----------

    def create_ticket(self, player_id: int, message: Optional[str]) -> Dict[str, Any]:
        """L'e-mail et le nom viennent de la fiche joueur, jamais du client."""
        message = (message or "").strip()
        if not message:
            raise ValidationError("Message must not be empty.")
        with store_guard(self.log, "create_ticket"):
            player = self.store.player_by_id(player_id)
            if player is None:
                raise NotFound("Player not found.")
            with self.db.transaction() as s:
                row = ContactMessage(
                    player_name=player.player_name,
                    email=player.email,
                    message=message,
                    status=TICKET_OPEN,
                )
                s.add(row)
                s.flush()
                data = serialize(row)
        self.log.info("Ticket created", extra={"player_id": player_id, "ticket_id": data["id"]})
        return data

    def list_messages(self) -> List[Dict[str, Any]]:
        with store_guard(self.log, "list_messages"):
            with self.db.session() as s:
                rows = s.scalars(
                    select(ContactMessage).order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc())
                ).all()
                return [serialize(r) for r in rows]

    def update_message_status(self, message_id: int, status: Optional[str]) -> Dict[str, Any]:
        status = (status or "").strip().lower()
        if status not in TICKET_TRANSITIONS:
            raise ValidationError("Status must be one of: open, read, closed.")
        with store_guard(self.log, "update_message_status"):
            with self.db.transaction() as s:
                row = s.get(ContactMessage, message_id)
                if row is None:
                    raise NotFound("Message not found.")
                if status != row.status:
                    if status not in TICKET_TRANSITIONS[row.status]:
                        raise ValidationError(f"Cannot move ticket from '{row.status}' to '{status}'.")
                    row.status = status
                s.flush()
                return serialize(row)

    def delete_message(self, message_id: int) -> None:
        with store_guard(self.log, "delete_message"):
            with self.db.transaction() as s:
                row = s.get(ContactMessage, message_id)
                if row is None:
                    raise NotFound("Message not found.")
                s.delete(row)
