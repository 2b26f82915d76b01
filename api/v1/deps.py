# api/v1/deps.py
from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from services.auth import InvalidTokenError, verify_token
from services.edamam import EdamamClient
from services.meal_store import MealStore

_bearer = HTTPBearer(auto_error=False)


def get_store(request: Request) -> MealStore:
    """The single MealStore built in the app lifespan."""
    return request.app.state.meal_store


def get_food_client(request: Request) -> EdamamClient:
    return request.app.state.food_client


def current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> str:
    if creds is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return verify_token(creds.credentials)
    except InvalidTokenError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid session: {exc}",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
