"""Read-only market analytics API over an EngineRegistry."""
from typing import Any, Dict, List
import logging

try:
    from fastapi import APIRouter, HTTPException, Path, Query, Request
except ImportError as exc:  # pragma: no cover - optional dependency
    raise ImportError(
        "FastAPI is required for yieldstate.api.markets_api; install fastapi to use these endpoints"
    ) from exc

from yieldstate.registry import EngineRegistry

logger = logging.getLogger(__name__)

router = APIRouter()


def get_registry(request: Request) -> EngineRegistry:
    registry = getattr(request.app.state, "registry", None)
    if registry is None:
        raise HTTPException(status_code=503, detail="No engine registry attached")
    return registry


@router.get("/api/v1/markets")
def get_markets(request: Request) -> Dict[str, Dict[str, Any]]:
    """Latest analytics keyed by market and asset."""
    return get_registry(request).markets()


@router.get("/api/v1/markets/{market_id}/{asset}")
def get_market(
    request: Request,
    market_id: str = Path(..., description="Market identifier"),
    asset: str = Path(..., description="Asset symbol"),
):
    record = get_registry(request).latest(market_id, asset)
    if record is None:
        raise HTTPException(status_code=404, detail="No analytics for market/asset")
    return record.to_dict()


@router.get("/api/v1/markets/{market_id}/{asset}/history")
def get_market_history(
    request: Request,
    market_id: str = Path(..., description="Market identifier"),
    asset: str = Path(..., description="Asset symbol"),
    limit: int = Query(500, ge=1, le=5000),
) -> List[Dict[str, Any]]:
    registry = get_registry(request)
    if (market_id, asset) not in registry:
        raise HTTPException(status_code=404, detail="No analytics for market/asset")
    return [record.to_dict() for record in registry.history(market_id, asset, limit)]


@router.get("/health")
def health(request: Request):
    registry = getattr(request.app.state, "registry", None)
    return {"ok": True, "markets": len(registry) if registry is not None else 0}


def attach_to_app(app, registry: EngineRegistry) -> None:
    """Bind a registry and include market routes on an existing FastAPI app."""
    app.state.registry = registry
    app.include_router(router)
    logger.info("Attached market routes (%d markets registered)", len(registry))
