"""
Configuration du logging standard.

Les modules utilisent `logging.getLogger(__name__)` et passent le contexte via `extra={...}`;
le format ci-dessous ne fait qu'ajouter horodatage, niveau et nom du logger.
"""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure le logger racine (idempotent : ne rajoute pas de handler s'il en existe déjà)."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    else:
        root.setLevel(level.upper())
