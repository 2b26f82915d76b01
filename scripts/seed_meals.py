"""
Seed meals into the local meal store from a JSON file.

Usage
-----

    python -m scripts.seed_meals path/to/meals.json
    python -m scripts.seed_meals meals.json --db sqlite+aiosqlite:///./demo.db

File format: a list of meals, each a list of line items

    [
      [
        {"food": {"foodId": "food_a", "label": "Chicken",
                  "nutrients": {"ENERC_KCAL": 165, "PROCNT": 31}},
         "quantity": 2}
      ]
    ]

Repeated foods inside one meal are merged the same way the add-meal cart
merges them (quantities summed, first position kept).
"""
from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path
from typing import Any, List

from dotenv import load_dotenv

from core.cart import Cart
from core.models import Food, Meal

load_dotenv()

from config import settings  # noqa: E402  (after .env is loaded)
from services.meal_store import MealStore  # noqa: E402


def build_cart(raw_items: list[dict[str, Any]]) -> Cart:
    cart = Cart()
    for raw in raw_items:
        food = Food.model_validate(raw["food"])
        qty = int(raw.get("quantity", 1))
        cart.add(food)
        cart.update_quantity(food.food_id, qty - 1)
    return cart


async def _seed(database_url: str, meals: list[list[dict[str, Any]]]) -> List[Meal]:
    store = MealStore(database_url)
    await store.initialize()
    saved: List[Meal] = []
    try:
        for raw_items in meals:
            cart = build_cart(raw_items)
            if not cart:
                print("· skip empty meal")
                continue
            saved.append(await store.save_meal(cart.items))
            # ids are millisecond timestamps
            await asyncio.sleep(0.002)
    finally:
        await store.close()
    return saved


def _load_json(path: Path) -> list[list[dict[str, Any]]]:
    data = json.loads(path.read_text())
    if not isinstance(data, list) or not all(isinstance(m, list) for m in data):
        raise ValueError("JSON file must contain a list of meals (lists of line items)")
    return data


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("file", type=Path, help="JSON file with meals to seed")
    parser.add_argument(
        "--db",
        default=settings.database_url,
        help="SQLAlchemy URL of the meal database (default: DATABASE_URL)",
    )
    args = parser.parse_args(argv)

    saved = asyncio.run(_seed(args.db, _load_json(args.file)))
    for meal in saved:
        print(f"✓ {meal.id}  {meal.totals.calories:.0f} kcal  {', '.join(meal.main_foods())}")
    print(f"✓ inserted {len(saved)} meals into {args.db}")


if __name__ == "__main__":
    main()
