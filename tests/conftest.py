# tests/conftest.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from core.models import Food, LineItem, Nutrients
from services.meal_store import MealStore


class FakeClock:
    """Deterministic clock: every call is one minute after the previous."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(minutes=1)):
        self.now = start or datetime(2024, 5, 1, 12, 0, 0, 123000, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now += self.step
        return current


# ── foods used across the suite ─────────────────────────────────────
CHICKEN = Food(
    food_id="food_chicken",
    label="chicken",
    image="https://img.example/chicken.jpg",
    nutrients=Nutrients(energy_kcal=165, protein_g=31, fat_g=3.6, carbs_g=0),
)
RICE = Food(
    food_id="food_rice",
    label="rice",
    nutrients=Nutrients(energy_kcal=130, protein_g=2.7, fat_g=0.3, carbs_g=28),
)
APPLE = Food(
    food_id="food_apple",
    label="apple",
    nutrients=Nutrients(energy_kcal=52, carbs_g=14),   # protein / fat absent
)


@pytest.fixture
def chicken_and_rice() -> list[LineItem]:
    return [LineItem(food=CHICKEN, quantity=2), LineItem(food=RICE, quantity=1)]


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'nutrition.db'}"


@pytest_asyncio.fixture
async def store(db_url):
    s = MealStore(db_url, clock=FakeClock())
    await s.initialize()
    yield s
    await s.close()
