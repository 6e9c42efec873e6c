"""
Module routes/health.py
Rôle:
- Endpoints de santé (service OK + ping base).
"""
import time

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from eulark.deps.services import Services, get_services

router = APIRouter(prefix="/health", tags=["health"])

@router.get("")
async def health(services: Services = Depends(get_services)):
    """Renvoie un OK minimal avec le nom de service configuré."""
    return {"ok": True, "service": services.settings.APP_NAME}

@router.get("/db")
def health_db(services: Services = Depends(get_services)):
    """Vérifie la base avec un `SELECT 1` et mesure la latence."""
    t0 = time.perf_counter()
    try:
        with services.db.session() as s:
            s.execute(text("SELECT 1"))
        return {"ok": True, "latency_s": round(time.perf_counter() - t0, 3)}
    except SQLAlchemyError as e:
        return {
            "ok": False,
            "latency_s": round(time.perf_counter() - t0, 3),
            "error": type(e).__name__,
        }
