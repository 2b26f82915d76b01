from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from core.models.food import Food


class LineItem(BaseModel):
    food: Food
    quantity: int = 1   # multiplier on the per-unit nutrients


class MealTotals(BaseModel):
    calories: float = 0.0
    proteins: float = 0.0
    fats: float = 0.0
    carbs: float = 0.0


class Meal(BaseModel):
    id: str
    date: datetime
    foods: list[LineItem] = []
    totals: MealTotals = MealTotals()

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.foods)

    def main_foods(self, limit: int = 3) -> list[str]:
        """Labels of the first `limit` line items, for list previews."""
        return [item.food.label for item in self.foods[:limit]]
