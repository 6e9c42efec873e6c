"""
Module routes/auth.py

Rôle:
- Inscription des joueurs en deux temps (code envoyé par e-mail puis vérification),
  connexion, mot de passe oublié et réinitialisation.

Intégrations:
- `AuthService` (via `Depends(get_auth_service)`) : toute la logique; les routes ne font que
  déballer le corps JSON et renvoyer le résultat.

Notes:
- Les champs des corps sont optionnels côté Pydantic : l'absence d'un champ doit produire
  un 400 métier, pas un 422 de validation FastAPI.
- `player_name` est accepté comme alias de `name` (anciens formulaires du site).
"""
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import AliasChoices, BaseModel, Field

from eulark.deps.services import get_auth_service
from eulark.services.auth_service import AuthService

router = APIRouter(prefix="/api", tags=["auth"])

# ---------- Modèles ----------

class RegisterIn(BaseModel):
    name: Optional[str] = Field(default=None, validation_alias=AliasChoices("name", "player_name"))
    email: Optional[str] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = None

class VerifyEmailIn(BaseModel):
    email: Optional[str] = None
    code: Optional[str] = None

class LoginIn(BaseModel):
    identifier: Optional[str] = None
    password: Optional[str] = None

class ForgotPasswordIn(BaseModel):
    email: Optional[str] = None

class ResetPasswordIn(BaseModel):
    token: Optional[str] = None
    password: Optional[str] = None
    confirm: Optional[str] = Field(default=None, validation_alias=AliasChoices("confirm", "confirm_password"))

# ---------- Routes ----------

@router.post("/register")
def register(data: RegisterIn, auth: AuthService = Depends(get_auth_service)):
    """
    Étape 1 : enregistre une vérification en attente et envoie un code à 6 chiffres.
    - 400 champ manquant / confirmation différente,
    - 409 e-mail (ou nom) déjà utilisé par un joueur vérifié.
    """
    return auth.register(data.name, data.email, data.password, data.confirm_password)

@router.post("/verify-email", status_code=201)
def verify_email(data: VerifyEmailIn, auth: AuthService = Depends(get_auth_service)):
    """
    Étape 2 : valide le code et crée le joueur.
    - 404 aucune inscription en attente, 400 code expiré/invalide, 409 nom/e-mail pris entre-temps.
    """
    return auth.verify_email(data.email, data.code)

@router.post("/login")
def login(data: LoginIn, auth: AuthService = Depends(get_auth_service)):
    """Connexion par nom de joueur OU e-mail. 401 générique en cas d'échec."""
    return auth.login(data.identifier, data.password)

@router.post("/forgot-password")
def forgot_password(data: ForgotPasswordIn, auth: AuthService = Depends(get_auth_service)):
    return auth.forgot_password(data.email)

@router.post("/reset-password")
def reset_password(data: ResetPasswordIn, auth: AuthService = Depends(get_auth_service)):
    return auth.reset_password(data.token, data.password, data.confirm)
