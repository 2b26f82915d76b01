from __future__ import annotations
from datetime import datetime

from pydantic import BaseModel, Field

from core.models import Food, LineItem, Meal


class LineItemIn(BaseModel):
    food: Food
    quantity: int = Field(1, ge=1)


class MealCreate(BaseModel):
    items: list[LineItemIn] = Field(..., min_length=1, description="at least one food")

    def line_items(self) -> list[LineItem]:
        return [LineItem(food=i.food, quantity=i.quantity) for i in self.items]


class MealOut(BaseModel):
    id: str
    date: datetime
    foods: list[LineItem]
    total_calories: float
    total_proteins: float
    total_fats: float
    total_carbs: float
    total_items: int
    main_foods: list[str]

    @classmethod
    def from_meal(cls, meal: Meal) -> "MealOut":
        return cls(
            id=meal.id,
            date=meal.date,
            foods=meal.foods,
            total_calories=meal.totals.calories,
            total_proteins=meal.totals.proteins,
            total_fats=meal.totals.fats,
            total_carbs=meal.totals.carbs,
            total_items=meal.total_items,
            main_foods=meal.main_foods(),
        )
