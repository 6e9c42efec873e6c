"""
Service: errors.py
- Taxonomie des erreurs métier levées par les services (auth, contenus, joueur).
- Chaque erreur porte son `status_code` HTTP et un `detail` public; `main.py` les sérialise
  en `{"detail": ...}` comme une `HTTPException` FastAPI.

Règle:
- Le `detail` est destiné au client : jamais de message de base ou de trace interne dedans.
  Les causes techniques sont journalisées côté serveur (`logger.exception`).
"""
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError


class ServiceError(RuntimeError):
    status_code = 500
    default_detail = "Internal server error."

    def __init__(self, detail: Optional[str] = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(ServiceError):
    status_code = 400
    default_detail = "Invalid input."


class Expired(ServiceError):
    status_code = 400
    default_detail = "Verification code expired, please register again."


class InvalidCode(ServiceError):
    status_code = 400
    default_detail = "Invalid verification code."


class InvalidOrExpiredToken(ServiceError):
    status_code = 400
    default_detail = "Reset link is invalid or has expired."


class AlreadyCheckedIn(ServiceError):
    status_code = 400
    default_detail = "Already checked in today."


class InvalidToken(ServiceError):
    status_code = 401
    default_detail = "Invalid or expired token."


class InvalidCredentials(ServiceError):
    status_code = 401
    default_detail = "Invalid credentials."


class Unauthenticated(ServiceError):
    status_code = 403
    default_detail = "No token provided."


class Forbidden(ServiceError):
    status_code = 403
    default_detail = "Insufficient privileges."


class NotFound(ServiceError):
    status_code = 404
    default_detail = "Not found."


class Conflict(ServiceError):
    status_code = 409
    default_detail = "Already exists."


class InternalError(ServiceError):
    status_code = 500


@contextmanager
def store_guard(logger: logging.Logger, action: str) -> Iterator[None]:
    """
    Convertit toute erreur SQLAlchemy non gérée en `InternalError` générique.
    La cause complète (trace incluse) part dans les logs avec `action` en contexte.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Store failure", extra={"store_action": action})
        raise InternalError() from exc
