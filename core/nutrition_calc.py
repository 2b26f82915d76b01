"""
core/nutrition_calc.py
────────────────────────────────────────────────────────────────────────
Meal-level macro aggregation.

A meal stores its four totals redundantly; they are computed exactly once,
here, when the meal is saved:

    total[n] = Σ (per-unit value of n, or 0 if absent) × quantity
"""

from __future__ import annotations

import logging
from typing import Iterable

from core.models import LineItem, MealTotals, Nutrients

Logger = logging.getLogger(__name__)


def _or_zero(value: float | None) -> float:
    return value or 0.0


def line_contribution(item: LineItem) -> MealTotals:
    """Macros contributed by one line item (per-unit × quantity)."""
    n: Nutrients = item.food.nutrients
    q = item.quantity
    return MealTotals(
        calories=_or_zero(n.energy_kcal) * q,
        proteins=_or_zero(n.protein_g) * q,
        fats=_or_zero(n.fat_g) * q,
        carbs=_or_zero(n.carbs_g) * q,
    )


def compute_totals(items: Iterable[LineItem]) -> MealTotals:
    calories = 0.0
    proteins = 0.0
    fats = 0.0
    carbs = 0.0
    count = 0
    for item in items:
        part = line_contribution(item)
        calories += part.calories
        proteins += part.proteins
        fats += part.fats
        carbs += part.carbs
        count += 1
    Logger.debug("aggregated %d line items → %.1f kcal", count, calories)
    return MealTotals(calories=calories, proteins=proteins, fats=fats, carbs=carbs)
