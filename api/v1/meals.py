# api/v1/meals.py
from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException, Response, status

from api.v1.deps import get_store
from api.v1.schemas import MealCreate, MealOut
from services.meal_store import MealStore

router = APIRouter()


@router.post(
    "",
    response_model=MealOut,
    status_code=status.HTTP_201_CREATED,
    summary="Save a meal from a list of foods and quantities",
)
async def create_meal(
    body: MealCreate,
    store: MealStore = Depends(get_store),
) -> MealOut:
    try:
        meal = await store.save_meal(body.line_items())
    except Exception as exc:
        # already logged by the store
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not save the meal, please try again",
        ) from exc
    return MealOut.from_meal(meal)


@router.get(
    "",
    response_model=list[MealOut],
    status_code=status.HTTP_200_OK,
    summary="List saved meals, most recent first",
)
async def list_meals(store: MealStore = Depends(get_store)) -> list[MealOut]:
    return [MealOut.from_meal(m) for m in await store.get_meals()]


@router.get("/{meal_id}", response_model=MealOut)
async def fetch_meal(meal_id: str, store: MealStore = Depends(get_store)) -> MealOut:
    meal = await store.get_meal_by_id(meal_id)
    if meal is None:
        raise HTTPException(status_code=404, detail="Meal not found")
    return MealOut.from_meal(meal)


@router.delete(
    "/{meal_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a meal and its foods",
)
async def delete_meal(meal_id: str, store: MealStore = Depends(get_store)) -> Response:
    if not await store.delete_meal(meal_id):
        raise HTTPException(status_code=404, detail="Meal not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
