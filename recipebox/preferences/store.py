from __future__ import annotations

import logging
from collections.abc import Callable

from pydantic import ValidationError

from ..storage.kv import JsonFileStore, StorageError
from .models import PreferenceChange, UserPreferences

logger = logging.getLogger(__name__)

PreferenceListener = Callable[[PreferenceChange, UserPreferences], None]


class PreferencesStore:
    """Single owner of the user's preferences.

    Every mutation goes through a setter, is written through to storage and is
    then published to subscribers. Writes are suppressed until ``load()`` has
    run so that defaults never overwrite data that has not been read yet.
    """

    def __init__(self, storage: JsonFileStore, key: str = "user_preferences") -> None:
        self._storage = storage
        self._key = key
        self._preferences = UserPreferences()
        self._loaded = False
        self._listeners: list[PreferenceListener] = []

    @property
    def preferences(self) -> UserPreferences:
        return self._preferences.model_copy(deep=True)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def subscribe(self, listener: PreferenceListener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unsubscribes it."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def load(self) -> UserPreferences:
        try:
            stored = self._storage.get_item(self._key)
            if stored:
                merged = {**UserPreferences().model_dump(), **stored}
                self._preferences = UserPreferences.model_validate(merged)
        except (StorageError, TypeError, ValidationError):
            logger.warning("Failed to load preferences, using defaults", exc_info=True)
        finally:
            self._loaded = True

        self._notify(PreferenceChange.loaded)
        return self.preferences

    # ── Internal ─────────────────────────────────────────────────────────

    def _save(self) -> None:
        if not self._loaded:
            logger.debug("Skipping preferences write before initial load")
            return
        try:
            self._storage.set_item(self._key, self._preferences.model_dump(mode="json"))
        except StorageError:
            logger.warning("Failed to save preferences", exc_info=True)

    def _notify(self, change: PreferenceChange) -> None:
        snapshot = self.preferences
        for listener in list(self._listeners):
            listener(change, snapshot)

    def _commit(self, change: PreferenceChange, **updates) -> None:
        self._preferences = self._preferences.model_copy(update=updates)
        self._save()
        self._notify(change)

    # ── Setters ──────────────────────────────────────────────────────────

    def set_unit_type(self, unit_type: str) -> None:
        self._commit(PreferenceChange.unit_type, unit_type=unit_type)

    def set_is_vegan(self, is_vegan: bool) -> None:
        self._commit(PreferenceChange.vegan, is_vegan=is_vegan)

    def set_user_name(self, user_name: str) -> None:
        self._commit(PreferenceChange.user_name, user_name=user_name)

    def toggle_nutritional_info(self) -> None:
        self._commit(
            PreferenceChange.nutritional_info,
            show_nutritional_info=not self._preferences.show_nutritional_info,
        )

    def add_allergy(self, allergy: str) -> None:
        if allergy in self._preferences.allergies:
            return
        self._commit(
            PreferenceChange.allergies,
            allergies=[*self._preferences.allergies, allergy],
        )

    def remove_allergy(self, allergy: str) -> None:
        self._commit(
            PreferenceChange.allergies,
            allergies=[a for a in self._preferences.allergies if a != allergy],
        )

    def add_excluded_ingredient(self, ingredient: str) -> None:
        if ingredient in self._preferences.excluded_ingredients:
            return
        self._commit(
            PreferenceChange.excluded_ingredients,
            excluded_ingredients=[*self._preferences.excluded_ingredients, ingredient],
        )

    def remove_excluded_ingredient(self, ingredient: str) -> None:
        self._commit(
            PreferenceChange.excluded_ingredients,
            excluded_ingredients=[
                i for i in self._preferences.excluded_ingredients if i != ingredient
            ],
        )

    def toggle_favorite(self, recipe_id: str) -> bool:
        """Flip the favorite state of *recipe_id* and return the new state."""
        favorites = self._preferences.favorite_recipes
        if recipe_id in favorites:
            updated = [f for f in favorites if f != recipe_id]
        else:
            updated = [*favorites, recipe_id]
        self._commit(PreferenceChange.favorites, favorite_recipes=updated)
        return recipe_id in updated

    def is_favorite(self, recipe_id: str) -> bool:
        return recipe_id in self._preferences.favorite_recipes

    def reset(self) -> None:
        self._preferences = UserPreferences()
        self._save()
        self._notify(PreferenceChange.reset)
