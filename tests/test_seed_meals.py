# tests/test_seed_meals.py
from __future__ import annotations

import asyncio
import json

import pytest

from scripts.seed_meals import build_cart, main
from services.meal_store import MealStore

from conftest import CHICKEN, RICE


def _raw(food, qty):
    return {"food": food.model_dump(by_alias=True), "quantity": qty}


def test_build_cart_merges_repeated_foods():
    cart = build_cart([_raw(CHICKEN, 1), _raw(RICE, 1), _raw(CHICKEN, 1)])
    assert [(i.food.food_id, i.quantity) for i in cart.items] == [
        ("food_chicken", 2),
        ("food_rice", 1),
    ]


def test_build_cart_honours_quantity():
    cart = build_cart([_raw(RICE, 3)])
    assert cart.items[0].quantity == 3


def test_main_seeds_the_store(tmp_path, db_url, capsys):
    meals_file = tmp_path / "meals.json"
    meals_file.write_text(json.dumps([[_raw(CHICKEN, 2), _raw(RICE, 1)], [], [_raw(RICE, 2)]]))

    main([str(meals_file), "--db", db_url])

    out = capsys.readouterr().out
    assert "inserted 2 meals" in out
    assert "skip empty meal" in out

    async def _load():
        store = MealStore(db_url)
        await store.initialize()
        try:
            return await store.get_meals()
        finally:
            await store.close()

    meals = asyncio.run(_load())
    assert len(meals) == 2
    assert sorted(m.totals.calories for m in meals) == pytest.approx([260, 460])


def test_rejects_wrong_file_shape(tmp_path, db_url):
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"meals": []}))
    with pytest.raises(ValueError):
        main([str(bad), "--db", db_url])
