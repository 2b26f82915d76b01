from .food import Food, Nutrients
from .meal import LineItem, Meal, MealTotals

__all__ = ["Food", "Nutrients", "LineItem", "Meal", "MealTotals"]
