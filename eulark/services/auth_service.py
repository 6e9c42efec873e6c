"""
Service: auth_service.py
Rôle :
- Inscription en deux temps (demande → code e-mail → joueur créé), connexion joueur/admin,
  mot de passe oublié / réinitialisation, provisionnement d'un admin (CLI).

Intégrations :
- `CredentialStore` : persistance (vérifications en attente, joueurs, admins, resets).
- `TokenService`    : jetons Bearer signés renvoyés à la connexion.
- Mailer (`ResendMailer` ou équivalent) : `send_verification_code`, `send_password_reset`.
- `Settings`        : coût bcrypt, durées de validité, URL publique du site.

Sécurité :
- Connexion : même réponse `InvalidCredentials` que l'identifiant soit inconnu ou le mot de
  passe faux (pas d'énumération). Un hash bcrypt est tout de même vérifié dans le premier cas.
- Mot de passe oublié : même message que l'e-mail existe ou non; un échec d'envoi est journalisé
  mais ne change pas la réponse.
- Codes à 6 chiffres et jetons de reset tirés via `secrets` (CSPRNG), comparés à temps constant.
"""
import logging
import secrets
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional

from sqlalchemy.exc import IntegrityError

from eulark.config.settings import Settings
from eulark.models.base import utcnow
from .credential_store import CredentialStore
from .errors import (
    Conflict,
    Expired,
    InternalError,
    InvalidCode,
    InvalidCredentials,
    InvalidOrExpiredToken,
    NotFound,
    ValidationError,
    store_guard,
)
from .mailer import MailerError
from .passwords import hash_password, verify_password
from .tokens import TokenService

FORGOT_PASSWORD_MESSAGE = "If this email is registered, a reset link has been sent."


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


# bcrypt ne prend en compte que les 72 premiers octets (et bcrypt>=5 lève au-delà).
MAX_PASSWORD_BYTES = 72


def _check_password_length(password: str) -> None:
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")


def generate_verification_code() -> str:
    """Code numérique à 6 chiffres (100000–999999)."""
    return str(100000 + secrets.randbelow(900000))


class AuthService:
    def __init__(
        self,
        store: CredentialStore,
        tokens: TokenService,
        mailer: Any,
        settings: Settings,
        *,
        clock: Callable[[], datetime] = utcnow,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.store = store
        self.tokens = tokens
        self.mailer = mailer
        self.settings = settings
        self.clock = clock
        self.log = logger or logging.getLogger(__name__)
        # hash de référence : rend le temps de réponse homogène quand l'identifiant est inconnu
        self._dummy_hash = hash_password(secrets.token_hex(8), rounds=settings.BCRYPT_ROUNDS)

    # ---------- Inscription ----------

    def register(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        confirm_password: Optional[str] = None,
    ) -> Dict[str, str]:
        name, email = _clean(name), _clean(email).lower()
        if not name or not email or not password:
            raise ValidationError("Player name, email and password are required.")
        if confirm_password is not None and confirm_password != password:
            raise ValidationError("Passwords do not match.")
        _check_password_length(password)

        with store_guard(self.log, "register"):
            if self.store.player_by_email(email):
                raise Conflict("Email already registered.")
            if self.store.player_by_name(name):
                raise Conflict("Player name already taken.")

            code = generate_verification_code()
            self.store.upsert_pending(
                email=email,
                player_name=name,
                password_hash=hash_password(password, rounds=self.settings.BCRYPT_ROUNDS),
                verification_code=code,
                expires_at=self.clock() + timedelta(minutes=self.settings.VERIFICATION_CODE_TTL_MINUTES),
            )

        try:
            self.mailer.send_verification_code(email, name, code)
        except MailerError as exc:
            self.log.exception("Verification email failed", extra={"email": email})
            raise InternalError("Could not send verification email.") from exc

        self.log.info("Registration pending", extra={"email": email, "player_name": name})
        return {"message": "Verification email sent, please check your inbox."}

    def verify_email(self, email: Optional[str], code: Optional[str]) -> Dict[str, Any]:
        email, code = _clean(email).lower(), _clean(code)
        if not email or not code:
            raise ValidationError("Email and verification code are required.")

        with store_guard(self.log, "verify_email"):
            pending = self.store.pending(email)
            if pending is None:
                raise NotFound("No pending verification, please register again.")
            if pending.expires_at < self.clock():
                self.store.delete_pending(email)
                raise Expired()
            if not secrets.compare_digest(pending.verification_code, code):
                raise InvalidCode()
            try:
                player = self.store.promote_pending(pending)
            except IntegrityError:
                raise Conflict("Player name or email already registered.")

        self.log.info("Player registered", extra={"player_id": player.id, "player_name": player.player_name})
        return {"message": "Registration complete.", "player": {"id": player.id, "player_name": player.player_name}}

    # ---------- Connexion ----------

    def login(self, identifier: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        identifier = _clean(identifier)
        if not identifier or not password:
            raise ValidationError("Player name/email and password are required.")

        with store_guard(self.log, "login"):
            player = self.store.player_by_identifier(identifier)
        if player is None:
            verify_password(password, self._dummy_hash)
            raise InvalidCredentials()
        if not verify_password(password, player.password_hash):
            raise InvalidCredentials()

        token = self.tokens.issue_player_token(player.id, player.player_name)
        return {
            "message": "Login successful.",
            "token": token,
            "user": {"id": player.id, "username": player.player_name},
        }

    def admin_login(self, username: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        username = _clean(username)
        if not username or not password:
            raise ValidationError("Username and password are required.")

        with store_guard(self.log, "admin_login"):
            admin = self.store.admin_by_username(username)
        if admin is None:
            verify_password(password, self._dummy_hash)
            raise InvalidCredentials()
        if not verify_password(password, admin.password_hash):
            raise InvalidCredentials()

        self.log.info("Admin login", extra={"admin_id": admin.id})
        return {"message": "Login successful.", "token": self.tokens.issue_admin_token(admin.id, admin.username)}

    def provision_admin(self, username: str, password: str) -> Dict[str, Any]:
        username = _clean(username)
        if not username or not password:
            raise ValidationError("Username and password are required.")
        _check_password_length(password)
        with store_guard(self.log, "provision_admin"):
            try:
                admin = self.store.create_admin(
                    username, hash_password(password, rounds=self.settings.BCRYPT_ROUNDS)
                )
            except IntegrityError:
                raise Conflict("Admin username already taken.")
        return {"id": admin.id, "username": admin.username}

    # ---------- Mot de passe oublié ----------

    def forgot_password(self, email: Optional[str]) -> Dict[str, str]:
        email = _clean(email).lower()
        if not email:
            return {"message": FORGOT_PASSWORD_MESSAGE}

        with store_guard(self.log, "forgot_password"):
            player = self.store.player_by_email(email)
            if player is None:
                return {"message": FORGOT_PASSWORD_MESSAGE}
            token = secrets.token_urlsafe(32)
            self.store.upsert_reset(
                email=email,
                token=token,
                expires_at=self.clock() + timedelta(minutes=self.settings.PASSWORD_RESET_TTL_MINUTES),
            )

        link = f"{self.settings.SITE_URL.rstrip('/')}/reset-password.html?token={token}"
        try:
            self.mailer.send_password_reset(email, link)
        except MailerError:
            self.log.exception("Password reset email failed", extra={"player_id": player.id})
        return {"message": FORGOT_PASSWORD_MESSAGE}

    def reset_password(
        self,
        token: Optional[str],
        password: Optional[str],
        confirm: Optional[str],
    ) -> Dict[str, str]:
        token = _clean(token)
        if not token or not password or not confirm:
            raise ValidationError("Token, password and confirmation are required.")
        _check_password_length(password)

        with store_guard(self.log, "reset_password"):
            reset = self.store.reset_by_token(token)
            if reset is None:
                raise InvalidOrExpiredToken()
            if reset.expires_at < self.clock():
                self.store.delete_reset(reset.email)
                raise InvalidOrExpiredToken()
            if password != confirm:
                raise ValidationError("Passwords do not match.")
            new_hash = hash_password(password, rounds=self.settings.BCRYPT_ROUNDS)
            if not self.store.consume_reset(token, new_hash):
                raise InvalidOrExpiredToken()

        self.log.info("Password reset", extra={"email": reset.email})
        return {"message": "Password updated, you can now log in."}
