"""Re-export individual schema modules for easy imports."""

from .meal import LineItemIn, MealCreate, MealOut

__all__ = [
    "LineItemIn",
    "MealCreate",
    "MealOut",
]
