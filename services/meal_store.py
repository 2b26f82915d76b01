"""
services/meal_store.py
────────────────────────────────────────────────────────────────────────
Local meal persistence.

One `MealStore` per application, built by whoever composes the app
(`main.py` lifespan, the seed script, tests) and passed around:

    store = MealStore(settings.database_url)
    await store.initialize()
    meal = await store.save_meal(cart.items)

Error policy differs by direction:

* writes (`save_meal`, `delete_meal`) log and re-raise storage errors
* reads  (`get_meals`, `get_meal_by_id`) log and degrade to [] / None;
  `fetch_meals` / `fetch_meal` expose the failure as a `ReadResult`
  for callers that need to tell "empty" from "failed"
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Generic, Iterable, Sequence, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from core.models import Food, LineItem, Meal, MealTotals, Nutrients
from core.nutrition_calc import compute_totals
from services.db import FoodRow, MealRow, create_engine, create_schema, session_factory

_LOG = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

T = TypeVar("T")


class StoreNotInitializedError(RuntimeError):
    """A data operation was issued before `MealStore.initialize()`."""


@dataclass(frozen=True)
class ReadResult(Generic[T]):
    value: T
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ───────── row ⇄ model helpers ──────────────────────────────────────
def _food_row(meal_id: str, item: LineItem) -> FoodRow:
    food, n = item.food, item.food.nutrients
    return FoodRow(
        meal_id=meal_id,
        food_id=food.food_id,
        label=food.label,
        image=food.image or None,
        calories=n.energy_kcal or 0,
        proteins=n.protein_g or 0,
        fats=n.fat_g or 0,
        carbs=n.carbs_g or 0,
        quantity=item.quantity,
    )


def _line_item(row: FoodRow) -> LineItem:
    return LineItem(
        food=Food(
            food_id=row.food_id,
            label=row.label,
            image=row.image,
            nutrients=Nutrients(
                energy_kcal=row.calories,
                protein_g=row.proteins,
                fat_g=row.fats,
                carbs_g=row.carbs,
            ),
        ),
        quantity=row.quantity,
    )


def _meal(row: MealRow, foods: Sequence[FoodRow]) -> Meal:
    return Meal(
        id=row.id,
        date=row.date,
        foods=[_line_item(f) for f in foods],
        totals=MealTotals(
            calories=row.total_calories,
            proteins=row.total_proteins,
            fats=row.total_fats,
            carbs=row.total_carbs,
        ),
    )


# ───────── store ─────────────────────────────────────────────────────
class MealStore:
    def __init__(
        self,
        database_url: str,
        *,
        clock: Callable[[], datetime] | None = None,
        echo: bool = False,
    ) -> None:
        self.database_url = database_url
        self._clock = clock or _utcnow
        self._echo = echo
        self._engine: AsyncEngine | None = None
        self._sessions: async_sessionmaker[AsyncSession] | None = None
        self._init_lock = asyncio.Lock()

    # --------------- lifecycle ---------------------------------------
    @property
    def initialized(self) -> bool:
        return self._sessions is not None

    async def initialize(self) -> None:
        """Open the database (once) and bring the schema up to date."""
        async with self._init_lock:
            eng = self._engine or create_engine(self.database_url, echo=self._echo)
            try:
                async with eng.begin() as conn:
                    await conn.run_sync(create_schema)
            except Exception:
                _LOG.exception("database initialisation failed (%s)", self.database_url)
                if self._engine is None:
                    await eng.dispose()
                raise
            self._engine = eng
            self._sessions = session_factory(eng)
        _LOG.debug("meal store ready at %s", self.database_url)

    async def close(self) -> None:
        async with self._init_lock:
            if self._engine is not None:
                await self._engine.dispose()
            self._engine = None
            self._sessions = None

    def _require(self) -> async_sessionmaker[AsyncSession]:
        if self._sessions is None:
            raise StoreNotInitializedError("MealStore.initialize() has not been awaited")
        return self._sessions

    # --------------- write path --------------------------------------
    def _new_identity(self) -> tuple[str, str]:
        created = self._clock()
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        created = created.astimezone(timezone.utc)
        millis = (created - _EPOCH) // timedelta(milliseconds=1)
        stamp = created.isoformat(timespec="milliseconds").replace("+00:00", "Z")
        return str(millis), stamp

    async def save_meal(self, line_items: Iterable[LineItem]) -> Meal:
        """Persist a meal and its line items in one transaction.

        Neither emptiness nor quantity sign is checked here; the caller owns
        that validation.
        """
        sessions = self._require()
        items = list(line_items)
        totals = compute_totals(items)
        meal_id, stamp = self._new_identity()

        meal_row = MealRow(
            id=meal_id,
            date=stamp,
            total_calories=totals.calories,
            total_proteins=totals.proteins,
            total_fats=totals.fats,
            total_carbs=totals.carbs,
        )
        food_rows = [_food_row(meal_id, item) for item in items]

        try:
            async with sessions() as db:
                async with db.begin():
                    db.add(meal_row)
                    await db.flush()
                    db.add_all(food_rows)
        except Exception:
            _LOG.exception("failed to save meal %s", meal_id)
            raise

        _LOG.info("saved meal %s (%d items, %.1f kcal)", meal_id, len(items), totals.calories)
        return _meal(meal_row, food_rows)

    async def delete_meal(self, meal_id: str) -> bool:
        """Remove a meal and every food row it owns.

        Food rows are deleted explicitly so nothing depends on the engine
        honouring ON DELETE CASCADE. Returns whether the meal existed.
        """
        sessions = self._require()
        try:
            async with sessions() as db:
                async with db.begin():
                    await db.execute(delete(FoodRow).where(FoodRow.meal_id == meal_id))
                    res = await db.execute(delete(MealRow).where(MealRow.id == meal_id))
        except Exception:
            _LOG.exception("failed to delete meal %s", meal_id)
            raise

        removed = (res.rowcount or 0) > 0
        _LOG.info("delete meal %s → %s", meal_id, "removed" if removed else "not found")
        return removed

    # --------------- read path ---------------------------------------
    @staticmethod
    async def _foods_for(db: AsyncSession, meal_id: str) -> Sequence[FoodRow]:
        res = await db.execute(
            select(FoodRow).where(FoodRow.meal_id == meal_id).order_by(FoodRow.id)
        )
        return res.scalars().all()

    async def fetch_meals(self) -> ReadResult[list[Meal]]:
        sessions = self._require()
        try:
            async with sessions() as db:
                rows = (
                    await db.execute(select(MealRow).order_by(MealRow.date.desc()))
                ).scalars().all()
                meals = [_meal(r, await self._foods_for(db, r.id)) for r in rows]
        except Exception as exc:
            _LOG.error("loading meals failed: %s", exc, exc_info=True)
            return ReadResult([], exc)
        return ReadResult(meals)

    async def fetch_meal(self, meal_id: str) -> ReadResult[Meal | None]:
        sessions = self._require()
        try:
            async with sessions() as db:
                row = await db.get(MealRow, meal_id)
                if row is None:
                    return ReadResult(None)
                meal = _meal(row, await self._foods_for(db, meal_id))
        except Exception as exc:
            _LOG.error("loading meal %s failed: %s", meal_id, exc, exc_info=True)
            return ReadResult(None, exc)
        return ReadResult(meal)

    async def get_meals(self) -> list[Meal]:
        """All meals, newest first; [] when the store cannot be read."""
        return (await self.fetch_meals()).value

    async def get_meal_by_id(self, meal_id: str) -> Meal | None:
        return (await self.fetch_meal(meal_id)).value
