"""
Application FastAPI — Point d'entrée
====================================

Rôle
----
- `create_app(settings)` instancie l'app, configure logging + CORS, construit les services
  (une seule fois, à partir de la config) et monte tous les routeurs.
- Traduit les erreurs métier (`ServiceError`) en réponses `{"detail": ...}` avec leur code HTTP.
- Crée les tables manquantes et liste les routes au démarrage.

Notes
-----
- Les importations des routeurs sont explicites pour éviter les surprises d’auto-discovery.
- ⚠️ Le middleware CORS doit être ajouté AVANT les include_router.
- ⚠️ `auth_admin` est monté AVANT `admin` : POST /api/admin/login ne doit pas tomber sur
  la route générique protégée POST /api/admin/{kind}.
- Lancement : `uvicorn eulark.main:app --host 0.0.0.0 --port 3000`.
"""
import logging
from contextlib import asynccontextmanager
from typing import Any, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from eulark.routes.auth import router as auth_router
from eulark.routes.auth_admin import router as auth_admin_router
from eulark.routes.admin import router as admin_router
from eulark.routes.public import router as public_router
from eulark.routes.player import router as player_router
from eulark.routes.health import router as health_router

from eulark.config.log_config import configure_logging
from eulark.config.settings import Settings, settings as default_settings
from eulark.deps.services import build_services
from eulark.services.errors import ServiceError
from eulark.services.server_status import ServerStatusClient

logger = logging.getLogger(__name__)


def _describe_routes(app: FastAPI) -> List[str]:
    """"METHODES chemin" pour chaque route; certains objets routes n'exposent pas `path` (routers inclus), on les ignore."""
    out = []
    for r in app.routes:
        path = getattr(r, "path", None)
        if path is None:
            continue
        out.append(f"{sorted(getattr(r, 'methods', None) or [])} {path}")
    return out


def create_app(
    settings: Optional[Settings] = None,
    *,
    mailer: Optional[Any] = None,
    status_client: Optional[ServerStatusClient] = None,
) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    services = build_services(settings, mailer=mailer, status_client=status_client)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Démarrage : crée les tables manquantes puis liste les routes (diagnostic)."""
        services.db.create_schema()
        logger.info("Registered routes: %s", ", ".join(_describe_routes(app)))
        yield
        services.db.dispose()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.services = services

    # ===========================
    # CORS
    # ===========================
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],   # ← dont Authorization
    )

    # ===========================
    # Erreurs
    # ===========================
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        loc = ".".join(str(p) for p in errors[0].get("loc", ())) if errors else "body"
        return JSONResponse(status_code=400, content={"detail": f"Invalid request: {loc}"})

    # ===========================
    # Montage des routers
    # ===========================
    app.include_router(health_router)
    app.include_router(public_router)
    app.include_router(auth_router)
    app.include_router(auth_admin_router)
    app.include_router(admin_router)
    app.include_router(player_router)

    @app.get("/")
    async def root():
        """Ping basique : permet de vérifier que l'app tourne."""
        return {"ok": True, "service": "eulark-site"}

    return app


app = create_app()
