# api/v1/foods.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.v1.deps import get_food_client
from core.models import Food
from services.edamam import (
    EdamamClient,
    FoodSearchConfigError,
    FoodSearchError,
    FoodSearchRateLimitError,
)

router = APIRouter()


# ───────────────────────── helpers ──────────────────────────
def _to_http(exc: FoodSearchError) -> HTTPException:
    """Config → 503, quota → 429, anything else (incl. bad keys) → 502."""
    if isinstance(exc, FoodSearchConfigError):
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    elif isinstance(exc, FoodSearchRateLimitError):
        code = status.HTTP_429_TOO_MANY_REQUESTS
    else:
        code = status.HTTP_502_BAD_GATEWAY
    return HTTPException(status_code=code, detail=str(exc))


# ───────────────────────── text search ──────────────────────
@router.get("/search", response_model=list[Food])
async def search_foods(
    q: str = Query(..., min_length=1, description="free-text food query"),
    client: EdamamClient = Depends(get_food_client),
) -> list[Food]:
    try:
        return await client.search_food(q)
    except FoodSearchError as exc:
        raise _to_http(exc) from exc


# ───────────────────────── barcode ──────────────────────────
@router.get("/barcode/{code}", response_model=Food)
async def food_by_barcode(
    code: str,
    client: EdamamClient = Depends(get_food_client),
) -> Food:
    try:
        food = await client.search_food_by_barcode(code)
    except FoodSearchError as exc:
        raise _to_http(exc) from exc
    if food is None:
        raise HTTPException(status_code=404, detail="No food for this barcode")
    return food
