from __future__ import annotations

import logging
import time

from ..analytics.store import record_search
from ..preferences.models import PreferenceChange, UserPreferences
from ..preferences.reconciler import FilterSession
from ..preferences.store import PreferencesStore
from .catalog import RecipeCatalog
from .evaluator import filter_recipes
from .favorites import get_favorite_count
from .models import FilterOptions, Recipe, RecipeSummary

logger = logging.getLogger(__name__)

# Preference changes that can alter the visible list
_RESULT_AFFECTING = {PreferenceChange.favorites}


class RecipeBrowser:
    """Recipe list consumer.

    Re-runs the evaluator whenever the session filters or the favorites
    change, so ``results`` always reflects the latest state.
    """

    def __init__(
        self,
        catalog: RecipeCatalog,
        filters: FilterSession,
        preferences: PreferencesStore,
    ) -> None:
        self._catalog = catalog
        self._filters = filters
        self._preferences = preferences
        self._favorites_only = False
        self._tracking = False
        self._results: list[Recipe] = []
        filters.subscribe(self._on_filters_changed)
        preferences.subscribe(self._on_preferences_changed)
        self.refresh()

    @property
    def results(self) -> list[Recipe]:
        return list(self._results)

    def enable_tracking(self) -> None:
        """Record every later refresh as a search event."""
        self._tracking = True

    @property
    def favorites_only(self) -> bool:
        return self._favorites_only

    def set_favorites_only(self, enabled: bool) -> None:
        if enabled != self._favorites_only:
            self._favorites_only = enabled
            self.refresh()

    def _on_filters_changed(self, filters: FilterOptions) -> None:
        self.refresh()

    def _on_preferences_changed(self, change: PreferenceChange, preferences: UserPreferences) -> None:
        # Profile-derived filter changes arrive through the filter session
        if change in _RESULT_AFFECTING:
            self.refresh()

    def refresh(self) -> list[Recipe]:
        start_time = time.time()
        filters = self._filters.filters
        favorites = self._preferences.preferences.favorite_recipes

        results = filter_recipes(self._catalog.recipes, filters, favorites)
        if self._favorites_only:
            favorite_ids = set(favorites)
            results = [r for r in results if r.id in favorite_ids]
        self._results = results

        elapsed_ms = round((time.time() - start_time) * 1000, 1)
        if self._tracking:
            record_search(filters, len(results), elapsed_ms, self._favorites_only)
        logger.debug("Recomputed recipe list: %d results in %sms", len(results), elapsed_ms)
        return self.results

    def summarize(self, recipe: Recipe) -> RecipeSummary:
        favorites = self._preferences.preferences.favorite_recipes
        return RecipeSummary(
            id=recipe.id,
            name=recipe.name,
            description=recipe.description,
            image=recipe.image,
            prep_time=recipe.prep_time,
            rating=recipe.rating,
            review_count=recipe.review_count,
            vegan=recipe.vegan,
            vegetarian=recipe.vegetarian,
            favorite_count=get_favorite_count(recipe.id, favorites),
            is_favorite=recipe.id in favorites,
        )
