"""
Module routes/player.py
Rôle:
- Routes réservées aux joueurs connectés : ticket de contact, statut, check-in quotidien,
  permission spéciale.

Sécurité:
- `Depends(player_required)` sur chaque route; l'identité vient UNIQUEMENT du jeton
  (`claims.subject_id`), jamais du corps de la requête.
"""
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from eulark.deps.auth import player_required
from eulark.deps.services import get_content_service, get_player_service
from eulark.services.content_service import ContentService
from eulark.services.player_service import PlayerService
from eulark.services.tokens import TokenClaims

router = APIRouter(prefix="/api", tags=["player"])

class ContactIn(BaseModel):
    # un éventuel champ "email" envoyé par le client est ignoré
    message: Optional[str] = None

@router.post("/contact", status_code=201)
def submit_ticket(
    data: ContactIn,
    claims: TokenClaims = Depends(player_required),
    content: ContentService = Depends(get_content_service),
):
    """Crée un ticket `open`; nom et e-mail résolus depuis la fiche du joueur."""
    ticket = content.create_ticket(claims.subject_id, data.message)
    return {"message": "Message sent.", "data": ticket}

@router.get("/player/status")
def player_status(
    claims: TokenClaims = Depends(player_required),
    players: PlayerService = Depends(get_player_service),
):
    return players.status(claims.subject_id)

@router.post("/player/checkin")
def player_checkin(
    claims: TokenClaims = Depends(player_required),
    players: PlayerService = Depends(get_player_service),
):
    """400 si le joueur a déjà pointé aujourd'hui (UTC)."""
    return players.checkin(claims.subject_id)

@router.get("/player/check-permission")
def check_permission(
    claims: TokenClaims = Depends(player_required),
    players: PlayerService = Depends(get_player_service),
):
    return {"hasPermission": players.has_special_permission(claims.subject_id)}
