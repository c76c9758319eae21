from __future__ import annotations

from fastapi import HTTPException, Request

from .recipes.catalog import RecipeNotFoundError
from .recipes.models import Recipe
from .state import AppState


def get_state(request: Request) -> AppState:
    """Return the application state attached by ``create_app``."""
    return request.app.state.recipebox


def require_recipe(recipe_id: str, request: Request) -> Recipe:
    """Raise 404 if *recipe_id* is not in the catalog."""
    try:
        return get_state(request).catalog.get(recipe_id)
    except RecipeNotFoundError:
        raise HTTPException(status_code=404, detail="Recipe not found") from None
