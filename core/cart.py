"""
core/cart.py
────────────────────────────────────────────────────────────────────────
In-progress meal ("cart") before it is handed to the Meal Store.

* adding a food already in the cart bumps its quantity instead of
  creating a second line
* quantities never go below zero; a line that reaches zero is dropped
* insertion order is preserved and becomes the saved line-item order
"""

from __future__ import annotations

from core.models import Food, LineItem, MealTotals
from core.nutrition_calc import compute_totals


class Cart:
    def __init__(self) -> None:
        self._lines: list[LineItem] = []

    # ─────────────────────────── mutation ───────────────────────────
    def add(self, food: Food) -> None:
        for i, line in enumerate(self._lines):
            if line.food.food_id == food.food_id:
                self._lines[i] = line.model_copy(update={"quantity": line.quantity + 1})
                return
        self._lines.append(LineItem(food=food, quantity=1))

    def update_quantity(self, food_id: str, change: int) -> None:
        updated: list[LineItem] = []
        for line in self._lines:
            if line.food.food_id == food_id:
                line = line.model_copy(update={"quantity": max(0, line.quantity + change)})
            if line.quantity > 0:
                updated.append(line)
        self._lines = updated

    def remove(self, food_id: str) -> None:
        self._lines = [line for line in self._lines if line.food.food_id != food_id]

    def clear(self) -> None:
        self._lines = []

    # ─────────────────────────── views ──────────────────────────────
    @property
    def items(self) -> list[LineItem]:
        return list(self._lines)

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self._lines)

    @property
    def totals(self) -> MealTotals:
        return compute_totals(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __bool__(self) -> bool:
        return bool(self._lines)
