# tests/test_edamam.py
from __future__ import annotations

import httpx
import pytest

from services.edamam import (
    EdamamClient,
    FoodSearchAuthError,
    FoodSearchConfigError,
    FoodSearchError,
    FoodSearchRateLimitError,
)

pytestmark = pytest.mark.asyncio


def _food(i: int | str, label: str | None = None) -> dict:
    return {
        "food": {
            "foodId": f"food_{i}",
            "label": label or f"food {i}",
            "image": None,
            "nutrients": {"ENERC_KCAL": 100, "PROCNT": 1, "FAT": 2, "CHOCDF": 3, "FIBTG": 4},
        }
    }


def _client(handler) -> EdamamClient:
    return EdamamClient(
        "app-id",
        "app-key",
        base_url="https://edamam.test/api/food-database/v2",
        transport=httpx.MockTransport(handler),
    )


# ── text search ─────────────────────────────────────────────────────
async def test_search_returns_parsed_then_ten_hints():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"parsed": [_food("p", "apple")], "hints": [_food(i) for i in range(15)]},
        )

    foods = await _client(handler).search_food("green apple")

    assert [f.food_id for f in foods] == ["food_p"] + [f"food_{i}" for i in range(10)]
    assert foods[0].nutrients.energy_kcal == 100
    req = seen[0]
    assert req.url.path == "/api/food-database/v2/parser"
    assert req.url.params["ingr"] == "green apple"
    assert req.url.params["app_id"] == "app-id"
    assert req.url.params["app_key"] == "app-key"


async def test_search_without_results():
    foods = await _client(lambda r: httpx.Response(200, json={"text": "x"})).search_food("zzz")
    assert foods == []


async def test_search_skips_malformed_entries():
    body = {"parsed": [{"food": {"label": "no id"}}], "hints": [_food(1), {"measures": []}]}
    foods = await _client(lambda r: httpx.Response(200, json=body)).search_food("x")
    assert [f.food_id for f in foods] == ["food_1"]


async def test_missing_keys_raise_before_any_request():
    def handler(request):  # pragma: no cover - must not be reached
        raise AssertionError("no request expected")

    client = EdamamClient(None, "key", transport=httpx.MockTransport(handler))
    with pytest.raises(FoodSearchConfigError):
        await client.search_food("apple")
    with pytest.raises(FoodSearchConfigError):
        await client.search_food_by_barcode("123")


@pytest.mark.parametrize(
    "status, exc",
    [(401, FoodSearchAuthError), (403, FoodSearchRateLimitError), (429, FoodSearchRateLimitError)],
)
async def test_credential_and_quota_errors(status, exc):
    client = _client(lambda r: httpx.Response(status))
    with pytest.raises(exc):
        await client.search_food("apple")
    with pytest.raises(exc):
        await client.search_food_by_barcode("123")


async def test_search_other_http_error():
    with pytest.raises(FoodSearchError, match="500"):
        await _client(lambda r: httpx.Response(500)).search_food("apple")


async def test_search_network_error():
    def handler(request):
        raise httpx.ConnectError("boom", request=request)

    with pytest.raises(FoodSearchError):
        await _client(handler).search_food("apple")


# ── barcode ─────────────────────────────────────────────────────────
async def test_barcode_prefers_parsed():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"parsed": [_food("p")], "hints": [_food("h")]})

    food = await _client(handler).search_food_by_barcode("3017620422003")
    assert food is not None and food.food_id == "food_p"
    assert seen[0].url.params["upc"] == "3017620422003"


async def test_barcode_falls_back_to_first_hint():
    body = {"parsed": [], "hints": [_food("h1"), _food("h2")]}
    food = await _client(lambda r: httpx.Response(200, json=body)).search_food_by_barcode("1")
    assert food is not None and food.food_id == "food_h1"


async def test_barcode_not_found_cases():
    assert await _client(lambda r: httpx.Response(404)).search_food_by_barcode("1") is None
    assert await _client(lambda r: httpx.Response(200, json={})).search_food_by_barcode("1") is None

    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    assert await _client(handler).search_food_by_barcode("1") is None


# ── bodies that are JSON but not an object ──────────────────────────
@pytest.mark.parametrize("body", [[], [{"food": {}}], "oops", 42, None])
async def test_search_rejects_non_object_body(body):
    with pytest.raises(FoodSearchError, match="unexpected body"):
        await _client(lambda r: httpx.Response(200, json=body)).search_food("apple")


@pytest.mark.parametrize("body", [[], [{"food": {}}], "oops", 42, None])
async def test_barcode_non_object_body_is_not_found(body):
    client = _client(lambda r: httpx.Response(200, json=body))
    assert await client.search_food_by_barcode("123") is None
