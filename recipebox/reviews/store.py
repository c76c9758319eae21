from __future__ import annotations

import logging
import uuid
from datetime import date

from pydantic import TypeAdapter, ValidationError

from ..recipes.models import Recipe, Review, ReviewStatus
from ..storage.kv import JsonFileStore, StorageError

logger = logging.getLogger(__name__)

_REVIEW_MAP = TypeAdapter(dict[str, list[Review]])

CURRENT_USER_ID = "current-user"
DEFAULT_USER_NAME = "You"


class ReviewStore:
    """Per-recipe review lists, persisted as one JSON blob."""

    def __init__(
        self,
        storage: JsonFileStore,
        seed_recipes: list[Recipe] | None = None,
        key: str = "user_reviews",
    ) -> None:
        self._storage = storage
        self._key = key
        self._seed_recipes = seed_recipes or []
        self._reviews: dict[str, list[Review]] = {}
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def load(self) -> None:
        """Read stored reviews, falling back to the catalog's sample reviews."""
        stored = None
        try:
            stored = self._storage.get_item(self._key)
            if stored is not None:
                self._reviews = _REVIEW_MAP.validate_python(stored)
        except (StorageError, ValidationError):
            logger.warning("Failed to load reviews", exc_info=True)
            stored = None

        if stored is None:
            self._reviews = {r.id: list(r.reviews) for r in self._seed_recipes}

        self._loaded = True

    def _save(self) -> None:
        if not self._loaded:
            logger.debug("Skipping reviews write before initial load")
            return
        try:
            self._storage.set_item(self._key, _REVIEW_MAP.dump_python(self._reviews, mode="json"))
        except StorageError:
            logger.warning("Failed to save reviews", exc_info=True)

    def add_review(
        self,
        recipe_id: str,
        rating: float,
        comment: str,
        user_name: str | None = None,
        status: ReviewStatus = ReviewStatus.approved,
    ) -> Review:
        review = Review(
            id=f"review-{uuid.uuid4().hex[:12]}",
            user_id=CURRENT_USER_ID,
            user_name=user_name or DEFAULT_USER_NAME,
            rating=rating,
            comment=comment,
            date=date.today().isoformat(),
            status=status,
        )
        # Newest first
        self._reviews[recipe_id] = [review, *self._reviews.get(recipe_id, [])]
        self._save()
        return review

    def get_recipe_reviews(self, recipe_id: str) -> list[Review]:
        return list(self._reviews.get(recipe_id, []))

    def get_average_rating(self, recipe_id: str) -> float:
        reviews = self._reviews.get(recipe_id, [])
        if not reviews:
            return 0.0
        return sum(r.rating for r in reviews) / len(reviews)

    def reset(self) -> None:
        self._reviews = {}
        self._save()
