"""
Routes d'authentification administrateur
========================================

- POST /api/admin/login : vérifie `username/password` contre la table `users` et renvoie un
  jeton Bearer marqué `is_admin` (durée ≈ 8 h).

Remarques
---------
- Pas de session côté serveur : la déconnexion consiste à oublier le jeton côté front.
- Les comptes admin sont créés hors HTTP (`python -m eulark.scripts.create_admin`).
"""
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from eulark.deps.services import get_auth_service
from eulark.services.auth_service import AuthService

router = APIRouter(prefix="/api/admin", tags=["auth"])

class AdminLoginIn(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None

@router.post("/login")
def admin_login(p: AdminLoginIn, auth: AuthService = Depends(get_auth_service)):
    """Réponse: `{message, token}`. 401 si identifiants invalides (message unique)."""
    return auth.admin_login(p.username, p.password)
