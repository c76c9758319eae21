from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..config import DEFAULT_APP_CONFIG
from .models import Recipe

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Raised when the recipe catalog file cannot be read or parsed."""


class RecipeNotFoundError(LookupError):
    def __init__(self, recipe_id: str) -> None:
        super().__init__(f"Recipe not found: {recipe_id}")
        self.recipe_id = recipe_id


def _normalize_rating(rating: Any) -> float:
    try:
        value = float(rating)
    except (TypeError, ValueError):
        return 0.0
    # Clamp to [0, 5]
    return max(0.0, min(5.0, value))


def _normalize_record(record: dict[str, Any]) -> dict[str, Any]:
    record = dict(record)
    record["rating"] = _normalize_rating(record.get("rating"))

    # Dietary filtering assumes every vegan recipe is also vegetarian
    if record.get("vegan") and not record.get("vegetarian"):
        logger.warning(
            "Recipe %s is flagged vegan but not vegetarian; marking it vegetarian",
            record.get("id"),
        )
        record["vegetarian"] = True

    return record


def load_catalog(path: Path) -> list[Recipe]:
    """Read and validate the recipe catalog stored at *path*."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise CatalogError(f"Could not read recipe catalog at {path}: {exc}") from exc

    if not isinstance(raw, list):
        raise CatalogError(f"Recipe catalog at {path} must be a JSON array")

    recipes: list[Recipe] = []
    seen: set[str] = set()
    for record in raw:
        try:
            recipe = Recipe.model_validate(_normalize_record(record))
        except (TypeError, ValidationError) as exc:
            raise CatalogError(f"Invalid recipe record in {path}: {exc}") from exc
        if recipe.id in seen:
            raise CatalogError(f"Duplicate recipe id {recipe.id!r} in {path}")
        seen.add(recipe.id)
        recipes.append(recipe)

    logger.info("Loaded %d recipes from %s", len(recipes), path)
    return recipes


class RecipeCatalog:
    """Read-only, in-memory recipe collection for one application instance."""

    def __init__(self, recipes: list[Recipe]) -> None:
        self._recipes = list(recipes)
        self._by_id = {r.id: r for r in self._recipes}

    @classmethod
    def from_path(cls, path: Path = DEFAULT_APP_CONFIG.catalog_path) -> RecipeCatalog:
        return cls(load_catalog(path))

    @property
    def recipes(self) -> list[Recipe]:
        return list(self._recipes)

    def get(self, recipe_id: str) -> Recipe:
        try:
            return self._by_id[recipe_id]
        except KeyError:
            raise RecipeNotFoundError(recipe_id) from None

    def __contains__(self, recipe_id: object) -> bool:
        return recipe_id in self._by_id

    def __len__(self) -> int:
        return len(self._recipes)
