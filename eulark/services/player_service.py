"""
Service: player_service.py
- Statut d'un joueur (score, dernier check-in, éligibilité du jour), check-in quotidien,
  et vérification de la permission spéciale.

Toutes les opérations ne portent que sur `player_id` issu du jeton : un joueur ne peut
ni lire ni modifier la fiche d'un autre.

Check-in :
- Un seul UPDATE conditionnel (`last_checkin` différent d'aujourd'hui) : deux requêtes
  simultanées ne peuvent pas créditer deux fois la même journée.
"""
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from eulark.models.base import utcnow
from .credential_store import CredentialStore
from .errors import AlreadyCheckedIn, NotFound, store_guard


class PlayerService:
    def __init__(
        self,
        store: CredentialStore,
        *,
        checkin_points: int = 10,
        clock: Callable[[], datetime] = utcnow,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.store = store
        self.checkin_points = checkin_points
        self.clock = clock
        self.log = logger or logging.getLogger(__name__)

    def status(self, player_id: int) -> Dict[str, Any]:
        with store_guard(self.log, "player_status"):
            player = self.store.player_by_id(player_id)
        if player is None:
            raise NotFound("Player not found.")
        today = self.clock().date()
        return {
            "player_name": player.player_name,
            "score": player.score,
            "last_checkin": player.last_checkin.isoformat() if player.last_checkin else None,
            "can_checkin": player.last_checkin != today,
        }

    def checkin(self, player_id: int) -> Dict[str, Any]:
        today = self.clock().date()
        with store_guard(self.log, "player_checkin"):
            score = self.store.checkin(player_id, today, self.checkin_points)
            if score is None:
                if self.store.player_by_id(player_id) is None:
                    raise NotFound("Player not found.")
                raise AlreadyCheckedIn()
        self.log.info("Player checkin", extra={"player_id": player_id, "score": score})
        return {"message": "Check-in successful.", "score": score, "points": self.checkin_points}

    def has_special_permission(self, player_id: int) -> bool:
        with store_guard(self.log, "check_permission"):
            return self.store.has_special_permission(player_id)
