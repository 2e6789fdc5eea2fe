"""
Point d'entrée principal de l'API GhostClass.
Démarrage : uvicorn ghostclass.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import ghostclass.models  # noqa: F401  (enregistre tous les modèles dans Base.metadata)
from ghostclass.routers import attendance, notifications, tracking, user_settings

logger = logging.getLogger(__name__)

app = FastAPI(
    title="GhostClass API",
    description="Suivi de présence Ezygo : réconciliation du tracker et calculateur d'absences",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

# CORS : autorise tous les ports localhost en développement (à restreindre en production).
app.add_middleware(
    CORSMiddleware,
    allow_origins=[],
    allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?",
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)


app.include_router(attendance.router)
app.include_router(tracking.router)
app.include_router(user_settings.router)
app.include_router(notifications.router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Intercepte toutes les exceptions non gérées pour que la réponse 500
    passe par CORSMiddleware et ne divulgue aucun détail interne.
    """
    logger.error("Exception non gérée : %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Une erreur interne est survenue."},
    )


@app.get("/api/health", tags=["Santé"])
def health_check():
    """Vérifie que l'API est opérationnelle."""
    return {"status": "ok", "service": "GhostClass API", "version": "0.1.0"}
