"""
Dépendances d'authentification (garde d'accès)
===============================================

Objectif
--------
Fournir les *dependencies* FastAPI qui protègent les routes à partir du header
`Authorization: Bearer <jeton>` :
- `player_required` : jeton valide d'un **joueur** (les jetons admin sont refusés, car les
  routes joueur n'opèrent que sur `claims.subject_id`, qui désigne alors un compte admin),
- `admin_required`  : jeton valide portant `is_admin`.

Comportement & codes retour
---------------------------
- 403 si aucun jeton (`Unauthenticated`),
- 401 si jeton illisible, mal signé ou expiré (`InvalidToken`, message unique),
- 403 si jeton valide mais privilège insuffisant (`Forbidden`).

Notes
-----
- `HTTPBearer(auto_error=False)` pour rendre nos propres 401/403.
- Protection posée PAR ROUTE (pas sur le router entier) pour ne pas bloquer les préflights OPTIONS.
"""
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from eulark.services.errors import Forbidden, Unauthenticated
from eulark.services.tokens import TokenClaims, TokenService
from .services import get_token_service

bearer = HTTPBearer(auto_error=False)


def current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    tokens: TokenService = Depends(get_token_service),
) -> TokenClaims:
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()
    return tokens.verify(credentials.credentials)


def player_required(claims: TokenClaims = Depends(current_claims)) -> TokenClaims:
    if claims.is_admin:
        raise Forbidden("Player account required.")
    return claims


def admin_required(claims: TokenClaims = Depends(current_claims)) -> TokenClaims:
    if not claims.is_admin:
        raise Forbidden("Admin privileges required.")
    return claims
