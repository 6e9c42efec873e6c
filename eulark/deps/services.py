"""
Conteneur de services
=====================

- `build_services(settings)` construit une fois, au démarrage, tous les services à partir
  de la configuration (base, jetons, mailer, statut serveur) : pas d'état global implicite.
- Le conteneur est posé sur `app.state.services`; les routes le récupèrent via les
  dépendances FastAPI ci-dessous (`Depends(get_auth_service)`...).
- Les tests injectent leurs propres collaborateurs (mailer factice, client de statut stub).
"""
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Optional

from fastapi import Request

from eulark.config.settings import Settings
from eulark.services.auth_service import AuthService
from eulark.services.content_service import ContentService
from eulark.services.credential_store import CredentialStore
from eulark.services.database import Database
from eulark.services.mailer import ResendMailer
from eulark.services.player_service import PlayerService
from eulark.services.server_status import ServerStatusClient
from eulark.services.tokens import TokenService


@dataclass
class Services:
    settings: Settings
    db: Database
    store: CredentialStore
    tokens: TokenService
    auth: AuthService
    content: ContentService
    players: PlayerService
    server_status: ServerStatusClient


def build_services(
    settings: Settings,
    *,
    mailer: Optional[Any] = None,
    status_client: Optional[ServerStatusClient] = None,
) -> Services:
    db = Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    store = CredentialStore(db)
    tokens = TokenService(
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        player_ttl=timedelta(hours=settings.PLAYER_TOKEN_TTL_HOURS),
        admin_ttl=timedelta(hours=settings.ADMIN_TOKEN_TTL_HOURS),
    )
    mailer = mailer or ResendMailer(
        settings.RESEND_API_KEY,
        settings.MAIL_FROM,
        endpoint=settings.RESEND_ENDPOINT,
    )
    return Services(
        settings=settings,
        db=db,
        store=store,
        tokens=tokens,
        auth=AuthService(store, tokens, mailer, settings),
        content=ContentService(db, store),
        players=PlayerService(store, checkin_points=settings.CHECKIN_POINTS),
        server_status=status_client or ServerStatusClient(settings.MC_STATUS_ENDPOINT, settings.MC_SERVER_ADDRESS),
    )


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_auth_service(request: Request) -> AuthService:
    return get_services(request).auth


def get_content_service(request: Request) -> ContentService:
    return get_services(request).content


def get_player_service(request: Request) -> PlayerService:
    return get_services(request).players


def get_token_service(request: Request) -> TokenService:
    return get_services(request).tokens


def get_status_client(request: Request) -> ServerStatusClient:
    return get_services(request).server_status
