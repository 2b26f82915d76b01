from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Nutrients(BaseModel):
    """Per-unit macros, keyed by Edamam nutrient codes on the wire."""

    energy_kcal: float | None = Field(None, alias="ENERC_KCAL")
    protein_g: float | None = Field(None, alias="PROCNT")
    fat_g: float | None = Field(None, alias="FAT")
    carbs_g: float | None = Field(None, alias="CHOCDF")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Food(BaseModel):
    food_id: str = Field(..., alias="foodId")
    label: str
    image: str | None = None
    nutrients: Nutrients = Nutrients()

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)
