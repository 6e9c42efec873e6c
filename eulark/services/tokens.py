"""
Service: tokens.py
- Émission et vérification des jetons Bearer signés (JWT HS256, PyJWT).

Jetons:
- joueur : `sub`, `id`, `player_name`, `iat`, `exp` (≈ 1 jour),
- admin  : `sub`, `id`, `username`, `is_admin: true`, `iat`, `exp` (≈ 8 h).

Sécurité:
- Sans état côté serveur : aucun enregistrement de session, donc pas de révocation avant `exp`.
  La "déconnexion" consiste à supprimer le jeton côté client.
- Toute erreur de décodage (format, signature, expiration, claim manquant) donne la même
  `InvalidToken`, sans préciser la vérification qui a échoué.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

import jwt

from .errors import InvalidToken


@dataclass(frozen=True)
class TokenClaims:
    subject_id: int
    name: str
    is_admin: bool
    expires_at: datetime


def _aware_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        player_ttl: timedelta = timedelta(hours=24),
        admin_ttl: timedelta = timedelta(hours=8),
        clock: Callable[[], datetime] = _aware_now,
    ) -> None:
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm
        self.player_ttl = player_ttl
        self.admin_ttl = admin_ttl
        self._clock = clock

    def _encode(self, claims: Dict[str, Any], ttl: timedelta) -> str:
        now = self._clock()
        payload = dict(claims, iat=now, exp=now + ttl)
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def issue_player_token(self, player_id: int, player_name: str) -> str:
        return self._encode(
            {"sub": str(player_id), "id": player_id, "player_name": player_name},
            self.player_ttl,
        )

    def issue_admin_token(self, admin_id: int, username: str) -> str:
        return self._encode(
            {"sub": str(admin_id), "id": admin_id, "username": username, "is_admin": True},
            self.admin_ttl,
        )

    def verify(self, token: Optional[str]) -> TokenClaims:
        if not token:
            raise InvalidToken()
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
            is_admin = payload.get("is_admin") is True
            name = payload.get("username") if is_admin else payload.get("player_name")
            return TokenClaims(
                subject_id=int(payload["sub"]),
                name=str(name or ""),
                is_admin=is_admin,
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (jwt.PyJWTError, KeyError, TypeError, ValueError) as exc:
            raise InvalidToken() from exc
