"""
FastAPI routes for the lexicon server.

Thin wrappers around :class:`~lexevo.service.LexiconService`:
- GET /api/state     full snapshot plus peer status
- GET /api/evolve    advance one generation
- GET /api/sentence  sample a sentence
- GET /api/history   recent events, extinctions, shifts and all compounds
- GET /health
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lexevo.service import LexiconService


def create_app(service: LexiconService) -> FastAPI:
    app = FastAPI(title="Lexicon Live API", version="1.0.0")
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/api/state")
    async def get_state() -> dict[str, Any]:
        return service.state_payload()

    @app.get("/api/evolve")
    async def evolve() -> dict[str, Any]:
        result = await service.evolve()
        return result.to_payload()

    @app.get("/api/sentence")
    async def sentence() -> dict[str, Any]:
        return service.sentence().model_dump(mode="json")

    @app.get("/api/history")
    async def history() -> dict[str, Any]:
        return service.history()

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return service.health()

    return app
