# api/v1/router.py
from fastapi import APIRouter, Depends

from . import foods, meals
from .deps import current_user

api_router = APIRouter(dependencies=[Depends(current_user)])

api_router.include_router(meals.router, prefix="/meals", tags=["Meals"])
api_router.include_router(foods.router, prefix="/foods", tags=["Foods"])
