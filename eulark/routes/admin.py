"""
Module routes/admin.py
Rôle:
- Endpoints admin de gestion des contenus (règles, commandes, bannissements, sponsors)
  et des tickets joueurs.

Sécurité:
- `Depends(admin_required)` sur CHAQUE route (pas sur le router, pour laisser passer les
  préflights OPTIONS) : 403 sans jeton, 401 jeton invalide, 403 jeton non-admin.

Ordre de déclaration:
- Les routes `/messages` sont déclarées AVANT les routes génériques `/{kind}`.
- Ce router doit être monté APRÈS `auth_admin` (sinon POST /api/admin/login tomberait
  sur la route générique protégée).
"""
from enum import Enum
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel

from eulark.deps.auth import admin_required
from eulark.deps.services import get_content_service
from eulark.services.content_service import ContentService

router = APIRouter(prefix="/api/admin", tags=["admin"])


class ContentKindName(str, Enum):
    rules = "rules"
    commands = "commands"
    bans = "bans"
    sponsors = "sponsors"


class MessageStatusIn(BaseModel):
    status: Optional[str] = None


# ---------- Tickets ----------

@router.get("/messages", dependencies=[Depends(admin_required)])
def list_messages(content: ContentService = Depends(get_content_service)):
    """Tickets, les plus récents d'abord."""
    return content.list_messages()

@router.patch("/messages/{message_id}", dependencies=[Depends(admin_required)])
def update_message(
    message_id: int,
    data: MessageStatusIn,
    content: ContentService = Depends(get_content_service),
):
    """Fait avancer le ticket : open → read → closed."""
    return content.update_message_status(message_id, data.status)

@router.delete("/messages/{message_id}", dependencies=[Depends(admin_required)])
def delete_message(message_id: int, content: ContentService = Depends(get_content_service)):
    content.delete_message(message_id)
    return {"message": "Message deleted."}


# ---------- Contenus ----------

@router.post("/{kind}", status_code=201, dependencies=[Depends(admin_required)])
def create_entry(
    kind: ContentKindName,
    payload: Dict[str, Any] = Body(...),
    content: ContentService = Depends(get_content_service),
):
    return content.create(kind.value, payload)

@router.patch("/{kind}/{entry_id}", dependencies=[Depends(admin_required)])
def update_entry(
    kind: ContentKindName,
    entry_id: int,
    payload: Dict[str, Any] = Body(...),
    content: ContentService = Depends(get_content_service),
):
    """Mise à jour partielle : seuls les champs fournis changent, l'ensemble est revalidé."""
    return content.update(kind.value, entry_id, payload)

@router.delete("/{kind}/{entry_id}", dependencies=[Depends(admin_required)])
def delete_entry(
    kind: ContentKindName,
    entry_id: int,
    content: ContentService = Depends(get_content_service),
):
    content.delete(kind.value, entry_id)
    return {"message": "Entry deleted."}
