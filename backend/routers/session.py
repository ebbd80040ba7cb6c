"""HTTP endpoints: health, session state, debug info, static catalog and commands."""

import logging
import time
from typing import Any

import orjson
from fastapi import APIRouter, Response

from angler.catalog import ENCHANT_POOL, SPECIES_CATALOG
from angler.config.shop import ENCHANT_ROLL_PRICE
from angler.shop import BOATS, SKINS, rod_upgrade_price
from backend.models import (
    CatalogResponse,
    CommandRequest,
    CommandResponse,
    EnchantData,
    HealthResponse,
    ShopItemData,
    SpeciesData,
)
from backend.session_runner import SessionRunner

logger = logging.getLogger(__name__)


def orjson_response(content: Any, status_code: int = 200) -> Response:
    return Response(content=orjson.dumps(content), media_type="application/json", status_code=status_code)


def build_catalog(rod_level: int) -> CatalogResponse:
    return CatalogResponse(
        species=[SpeciesData(**s.to_dict()) for s in SPECIES_CATALOG],
        enchants=[
            EnchantData(id=e.id, display_name=e.display_name, rarity_weight=e.rarity_weight)
            for e in ENCHANT_POOL
        ],
        boats=[ShopItemData(id=b.id, display_name=b.display_name, price=b.price) for b in BOATS],
        rod_skins=[ShopItemData(id=s.id, display_name=s.display_name, price=s.price) for s in SKINS],
        rod_upgrade_price=rod_upgrade_price(rod_level),
        enchant_roll_price=ENCHANT_ROLL_PRICE,
    )


def setup_router(runner: SessionRunner, server_start_time: float) -> APIRouter:
    """Create the session router bound to a running session."""
    router = APIRouter()

    @router.get("/health")
    async def health() -> Response:
        body = HealthResponse(
            frame=runner.session.frame,
            phase=runner.session.phase.value,
            uptime_seconds=time.time() - server_start_time,
            connected_clients=len(runner.connected_clients),
        )
        return orjson_response(body.model_dump())

    @router.get("/api/state")
    async def get_state() -> Response:
        return orjson_response(runner.get_state())

    @router.get("/api/debug")
    async def get_debug() -> Response:
        return orjson_response(runner.session.get_debug_info())

    @router.get("/api/catalog")
    async def get_catalog() -> Response:
        catalog = build_catalog(runner.session.profile.rod_level)
        return orjson_response(catalog.model_dump())

    @router.post("/api/command")
    async def post_command(request: CommandRequest) -> Response:
        result = runner.handle_command(request.command, request.data)
        body = CommandResponse(**result, state=runner.get_state())
        status_code = 200 if runner.is_known_command(request.command) else 400
        return orjson_response(body.model_dump(), status_code=status_code)

    return router
