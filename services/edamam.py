"""
services/edamam.py
────────────────────────────────────────────────────────────────────────
Async client for Edamam's food-database `parser` endpoint.

* text search    → parsed foods first, then up to 10 hints
* barcode lookup → first parsed food, else first hint, else None

Callers need to tell a missing-credentials problem from a quota / auth
problem, so each gets its own exception type.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable

import httpx
from pydantic import ValidationError

from config import settings
from core.models import Food

_LOG = logging.getLogger(__name__)

MAX_HINTS = 10


# ───────────── errors ─────────────
class FoodSearchError(RuntimeError):
    """Food provider failure (bad status, unreachable, unreadable body)."""


class FoodSearchConfigError(FoodSearchError):
    """EDAMAM_APP_ID / EDAMAM_APP_KEY not configured."""


class FoodSearchAuthError(FoodSearchError):
    """Credentials rejected by the provider (HTTP 401)."""


class FoodSearchRateLimitError(FoodSearchError):
    """Plan quota reached (Edamam answers 403; 429 treated the same)."""


# ───────────── client ─────────────
class EdamamClient:
    def __init__(
        self,
        app_id: str | None,
        app_key: str | None,
        *,
        base_url: str = "https://api.edamam.com/api/food-database/v2",
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.app_id = app_id
        self.app_key = app_key
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, transport: httpx.AsyncBaseTransport | None = None) -> "EdamamClient":
        return cls(
            settings.edamam_app_id,
            settings.edamam_app_key,
            base_url=settings.edamam_base_url,
            timeout=settings.edamam_timeout,
            transport=transport,
        )

    # --------------- plumbing ----------------------------------------
    def _check_keys(self) -> None:
        if not (self.app_id and self.app_key):
            raise FoodSearchConfigError(
                "Edamam API keys are not configured; set EDAMAM_APP_ID and EDAMAM_APP_KEY"
            )

    async def _parser(self, **params: str) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self._transport
        ) as http:
            return await http.get(
                "/parser",
                params={"app_id": self.app_id, "app_key": self.app_key, **params},
            )

    @staticmethod
    def _raise_for_credentials(resp: httpx.Response) -> None:
        if resp.status_code == 401:
            raise FoodSearchAuthError("Edamam rejected the API keys")
        if resp.status_code in (403, 429):
            raise FoodSearchRateLimitError("Edamam API limit reached")

    @staticmethod
    def _foods(entries: Iterable[dict[str, Any]]) -> list[Food]:
        out: list[Food] = []
        for entry in entries:
            try:
                out.append(Food.model_validate(entry["food"]))
            except (KeyError, TypeError, ValidationError) as exc:
                _LOG.warning("skipping malformed Edamam entry: %s", exc)
        return out

    # --------------- public ------------------------------------------
    async def search_food(self, query: str) -> list[Food]:
        """Foods matching free text `query` (may be empty)."""
        self._check_keys()
        try:
            resp = await self._parser(ingr=query)
        except httpx.HTTPError as exc:
            _LOG.error("Edamam search failed: %s", exc)
            raise FoodSearchError(f"Edamam unreachable: {exc}") from exc

        if not resp.is_success:
            self._raise_for_credentials(resp)
            raise FoodSearchError(f"Edamam API error: {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise FoodSearchError("Edamam returned a non-JSON body") from exc
        if not isinstance(data, dict):
            raise FoodSearchError("Edamam returned an unexpected body")

        foods = self._foods(data.get("parsed") or [])
        foods += self._foods((data.get("hints") or [])[:MAX_HINTS])
        _LOG.debug("Edamam search %r → %d foods", query, len(foods))
        return foods

    async def search_food_by_barcode(self, barcode: str) -> Food | None:
        """Food for a UPC/EAN code, or None when the provider has no match.

        Missing keys, rejected keys and quota errors still raise; any other
        failure is logged and reported as "not found".
        """
        self._check_keys()
        try:
            resp = await self._parser(upc=barcode)
        except httpx.HTTPError as exc:
            _LOG.error("Edamam barcode lookup failed: %s", exc)
            return None

        if not resp.is_success:
            self._raise_for_credentials(resp)
            _LOG.info("barcode %s not found (%s)", barcode, resp.status_code)
            return None

        try:
            data = resp.json()
        except ValueError:
            _LOG.error("Edamam returned a non-JSON body for barcode %s", barcode)
            return None
        if not isinstance(data, dict):
            _LOG.error("Edamam returned an unexpected body for barcode %s", barcode)
            return None

        for key in ("parsed", "hints"):
            found = self._foods((data.get(key) or [])[:1])
            if found:
                return found[0]
        return None
