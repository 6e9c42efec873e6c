"""
Configuration de l'application (Settings)
=========================================

Rôle
----
- Centraliser les paramètres du site (nom, host/port, secrets, base, e-mail, serveur de jeu…).
- Les valeurs par défaut conviennent pour un environnement de dev local.
- Les variables peuvent être surchargées via un fichier `.env` ou l'environnement.

Intégrations
------------
- `pydantic-settings` charge automatiquement les variables d'env et `.env`.
- `main.create_app()` lit `settings` une seule fois puis le transmet aux services
  (`build_services(settings)`) : aucun service ne relit la config globale.

Bonnes pratiques
----------------
- *Ne commitez pas* une valeur réelle de `JWT_SECRET` ni de `RESEND_API_KEY`. Utilisez `.env`.
- `DATABASE_URL` pointe par défaut vers un fichier SQLite local (`<repo>/eulark/data/eulark.db`);
  en prod, une URL PostgreSQL (`postgresql+psycopg://...`) convient sans changement de code.

Exemple de `.env`
-----------------
APP_NAME="Eulark Site (Staging)"
JWT_SECRET="mettre-une-valeur-secrète-en-prod"
DATABASE_URL="postgresql+psycopg://eulark:secret@db/eulark"
RESEND_API_KEY="re_xxx"
MAIL_FROM="Eulark <message@example.org>"
SITE_URL="https://eulark.example.org"
MC_SERVER_ADDRESS="play.example.org"
"""
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict
import os


_DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data")


class Settings(BaseSettings):
    # Nom du service (apparaît dans /health)
    APP_NAME: str = "Eulark Site"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Frontends autorisés (CORS)
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Base relationnelle (tables joueurs, admins, vérifications, contenus…)
    DATA_DIR: str = _DATA_DIR
    DATABASE_URL: str = "sqlite:///" + os.path.join(_DATA_DIR, "eulark.db")
    DATABASE_ECHO: bool = False

    # Jetons Bearer signés
    # ⚠️ Remplacez en production via .env
    JWT_SECRET: str = "changeme-super-secret"
    JWT_ALGORITHM: str = "HS256"
    PLAYER_TOKEN_TTL_HOURS: int = 24
    ADMIN_TOKEN_TTL_HOURS: int = 8

    # Hash des mots de passe (coût bcrypt figé à la création du hash)
    BCRYPT_ROUNDS: int = 10

    # Fenêtres de validité
    VERIFICATION_CODE_TTL_MINUTES: int = 15
    PASSWORD_RESET_TTL_MINUTES: int = 60

    # E-mails transactionnels (API Resend)
    RESEND_API_KEY: str = ""
    RESEND_ENDPOINT: str = "https://api.resend.com/emails"
    MAIL_FROM: str = "Eulark <message@betteryuan.cn>"
    SITE_URL: str = "http://localhost:3000"

    # Statut du serveur de jeu (service tiers mcsrvstat.us)
    MC_SERVER_ADDRESS: str = "eulark.air114.top"
    MC_STATUS_ENDPOINT: str = "https://api.mcsrvstat.us/3"

    # Points accordés au check-in quotidien
    CHECKIN_POINTS: int = 10

    # Paramétrage pydantic-settings :
    # - lit le fichier .env (UTF-8) si présent
    # - ignore les clés supplémentaires pour éviter les erreurs
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


# Instance par défaut, utilisée par `main.app`
settings = Settings()
