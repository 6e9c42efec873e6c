"""
Module routes/public.py
Rôle:
- Listes publiques du site (sans authentification) : règles, commandes, bannissements, sponsors.
- Statut du serveur de jeu (proxy vers mcsrvstat.us).

Robustesse:
- 500 générique si la base est indisponible (détail dans les logs serveur).
- /api/server-status ne lève jamais : `ok: false` + message d'erreur si le service tiers échoue.
"""
from fastapi import APIRouter, Depends

from eulark.deps.services import get_content_service, get_status_client
from eulark.services.content_service import ContentService
from eulark.services.server_status import ServerStatusClient, ServerStatusError

router = APIRouter(prefix="/api", tags=["public"])

@router.get("/rules")
def list_rules(content: ContentService = Depends(get_content_service)):
    return content.list_entries("rules")

@router.get("/commands")
def list_commands(content: ContentService = Depends(get_content_service)):
    return content.list_entries("commands")

@router.get("/bans")
def list_bans(content: ContentService = Depends(get_content_service)):
    """Bannissements, les plus récents d'abord."""
    return content.list_entries("bans")

@router.get("/sponsors")
def list_sponsors(content: ContentService = Depends(get_content_service)):
    return content.list_entries("sponsors")

@router.get("/server-status")
def server_status(client: ServerStatusClient = Depends(get_status_client)):
    try:
        return {"ok": True, **client.fetch()}
    except ServerStatusError as e:
        return {"ok": False, "address": client.address, "online": False, "error": str(e)}
