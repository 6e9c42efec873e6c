"""
Service: database.py
Rôle :
- Créer l'engine SQLAlchemy et la fabrique de sessions à partir d'une URL.
- Fournir deux gestionnaires de contexte :
  - `session()`     : lecture seule (aucun commit),
  - `transaction()` : écriture atomique (commit si succès, rollback sur toute exception).

Notes :
- SQLite (dev/tests) : `check_same_thread=False` car FastAPI exécute les routes `def`
  dans son pool de threads; chaque requête ouvre sa propre session.
- Aucune logique métier ici : les contraintes (unicité, score ≥ 0) vivent dans le schéma.
"""
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from eulark.models.base import Base


class Database:
    def __init__(self, url: str, *, echo: bool = False) -> None:
        self.url = url
        connect_args = {}
        parsed = make_url(url)
        if parsed.get_backend_name() == "sqlite":
            connect_args["check_same_thread"] = False
            if parsed.database and parsed.database != ":memory:":
                Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
        self.engine: Engine = create_engine(url, echo=echo, future=True, connect_args=connect_args)
        self._factory = sessionmaker(bind=self.engine, expire_on_commit=False)

    def create_schema(self) -> None:
        """Crée les tables manquantes (idempotent)."""
        # import des modèles pour peupler Base.metadata
        import eulark.models.accounts  # noqa: F401
        import eulark.models.content  # noqa: F401

        Base.metadata.create_all(self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        s = self._factory()
        try:
            yield s
        finally:
            s.close()

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        s = self._factory()
        try:
            yield s
            s.commit()
        except Exception:
            s.rollback()
            raise
        finally:
            s.close()

    def dispose(self) -> None:
        self.engine.dispose()
