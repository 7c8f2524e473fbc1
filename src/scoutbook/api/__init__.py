"""REST API for browsing and editing player stats."""

from __future__ import annotations

import logging
from typing import Any, List, Literal, Optional

from fastapi import Body, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from scoutbook.api.schemas import DescriptionResponse, Player, PlayerPatch
from scoutbook.config import Settings
from scoutbook.errors import (
    GenerationFailed,
    GenerationUnavailable,
    PlayerNotFound,
    UpstreamUnavailable,
)
from scoutbook.ingest import UpstreamFetcher
from scoutbook.llm import TextGenerator
from scoutbook.persistence import OverrideStore
from scoutbook.services import build_services, sort_players


logger = logging.getLogger(__name__)


def _first_validation_message(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid data"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "Invalid data")
    return f"{location}: {message}" if location else message


def create_app(
    settings: Settings | None = None,
    *,
    fetcher: UpstreamFetcher | None = None,
    store: OverrideStore | None = None,
    generator: TextGenerator | None = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    app = FastAPI(title="scoutbook")
    services = build_services(settings, fetcher=fetcher, store=store, generator=generator)
    app.state.settings = settings
    app.state.services = services
    players = services.players
    descriptions = services.descriptions

    @app.exception_handler(PlayerNotFound)
    async def player_not_found(request: Request, exc: PlayerNotFound) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": "Player not found"})

    @app.exception_handler(UpstreamUnavailable)
    async def upstream_unavailable(request: Request, exc: UpstreamUnavailable) -> JSONResponse:
        logger.warning("Upstream unavailable while serving %s: %s", request.url.path, exc)
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    @app.exception_handler(GenerationUnavailable)
    async def generation_unavailable(request: Request, exc: GenerationUnavailable) -> JSONResponse:
        status_code = 502 if isinstance(exc, GenerationFailed) else 500
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/players", response_model=List[Player])
    async def list_players(
        sort: Optional[str] = None,
        direction: Literal["asc", "desc"] = "asc",
    ):
        result = await players.get_all()
        if sort:
            try:
                result = sort_players(result, sort, direction)
            except ValueError as exc:
                raise HTTPException(status_code=400, detail=str(exc)) from exc
        return result

    @app.get("/players/{player_id}", response_model=Player)
    async def get_player(player_id: str):
        player = await players.get_by_id(player_id)
        if player is None:
            raise HTTPException(status_code=404, detail="Player not found")
        return player

    @app.patch("/players/{player_id}", response_model=Player)
    async def update_player(player_id: str, body: Any = Body(...)):
        if not isinstance(body, dict):
            raise HTTPException(status_code=400, detail="Validation failed: expected a JSON object")
        try:
            patch = PlayerPatch.model_validate(body)
        except ValidationError as exc:
            raise HTTPException(
                status_code=400,
                detail=f"Validation failed: {_first_validation_message(exc)}",
            ) from exc
        return await players.update(player_id, patch)

    @app.post("/players/{player_id}/description", response_model=DescriptionResponse)
    async def player_description(player_id: str):
        result = await descriptions.get_or_generate(player_id)
        return DescriptionResponse(description=result.description, cached=result.cached)

    return app
