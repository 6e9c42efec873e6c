"""
Service: server_status.py
- Interroge l'API publique mcsrvstat.us pour connaître l'état du serveur de jeu
  (en ligne, joueurs connectés, version, MOTD).

Notes:
- Appel GET simple, sans retry (le front rafraîchit périodiquement).
- Les erreurs réseau/format sont encapsulées dans `ServerStatusError`.
"""
import logging
from typing import Any, Dict, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT: Tuple[float, float] = (3.0, 10.0)  # connect, read


class ServerStatusError(RuntimeError):
    """Statut du serveur indisponible (service tiers injoignable ou réponse invalide)."""


class ServerStatusClient:
    def __init__(
        self,
        endpoint: str,
        address: str,
        *,
        session: Optional[requests.Session] = None,
        timeout: Tuple[float, float] = DEFAULT_TIMEOUT,
    ) -> None:
        self.url = f"{endpoint.rstrip('/')}/{address}"
        self.address = address
        self.session = session or requests.Session()
        self.timeout = timeout

    def fetch(self) -> Dict[str, Any]:
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Server status lookup failed", extra={"status_url": self.url})
            raise ServerStatusError("Server status lookup failed") from exc

        online = bool(data.get("online"))
        players = data.get("players") or {}
        motd = (data.get("motd") or {}).get("clean") or []
        return {
            "address": self.address,
            "online": online,
            "players_online": int(players.get("online", 0)) if online else 0,
            "players_max": int(players.get("max", 0)) if online else 0,
            "version": data.get("version") if online else None,
            "motd": " ".join(motd) if online else "",
        }
