"""Agregador de rotas — registra todos os routers por canal.

Este módulo é responsável por criar o router principal da API
e incluir todos os sub-routers de cada canal.

Uso:
    from api.routes import create_api_router

    app = FastAPI()
    app.include_router(create_api_router())
"""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.health.router import router as health_router
from api.routes.lark.router import router as lark_router


def create_api_router() -> APIRouter:
    """Cria router principal com todos os sub-routers registrados.

    Returns:
        APIRouter configurado com todos os endpoints.
    """
    api_router = APIRouter()

    # Health checks (sem prefixo para /health e /ready na raiz)
    api_router.include_router(health_router, tags=["health"])

    api_router.include_router(
        lark_router,
        prefix="/webhook/lark",
        tags=["lark"],
    )

    return api_router
