"""
Preference-to-filter reconciliation.

FilterSession owns the working FilterOptions of a browsing session and keeps
the profile-derived fields (allergens, excluded ingredients, vegan flag) in
line with the user's saved preferences, while letting ad-hoc selections live
alongside them.

Profile sync replaces the allergen and excluded-ingredient lists outright; an
allergen picked in the filter UI that is not a saved allergy is dropped on the
next sync.
"""
from __future__ import annotations

import logging
from collections.abc import Callable

from ..recipes.models import DietaryFilter, FilterOptions
from .models import PreferenceChange, UserPreferences
from .store import PreferencesStore

logger = logging.getLogger(__name__)

FilterListener = Callable[[FilterOptions], None]

# Not considered by the populated-field check of is_filter_active
_UNCOUNTED_FIELDS = {"allergens", "dietary", "search_query"}


def _profile_list(values: list[str]) -> list[str] | None:
    return list(values) if values else None


def baseline_filters(preferences: UserPreferences) -> FilterOptions:
    """Filters implied by the profile alone."""
    filters = FilterOptions(
        allergens=_profile_list(preferences.allergies),
        exclude_ingredients=_profile_list(preferences.excluded_ingredients),
    )
    if preferences.is_vegan:
        filters.dietary = DietaryFilter(vegan=True)
    return filters


def active_filter_count(filters: FilterOptions, preferences: UserPreferences) -> int:
    """Number of manually chosen filter facets, ignoring profile-implied ones."""
    count = 0
    count += len(filters.meal_time or [])
    count += len(filters.cuisine_type or [])
    count += len(filters.dish_type or [])

    count += sum(1 for a in filters.allergens or [] if a not in preferences.allergies)
    count += len(filters.include_ingredients or [])
    count += sum(
        1
        for i in filters.exclude_ingredients or []
        if i not in preferences.excluded_ingredients
    )

    if filters.dietary is not None:
        if filters.dietary.vegan and not preferences.is_vegan:
            count += 1
        if filters.dietary.vegetarian:
            count += 1

    if filters.max_prep_time is not None:
        count += 1
    if filters.sort_by and filters.sort_by != "none":
        count += 1
    return count


def is_filter_active(filters: FilterOptions, preferences: UserPreferences) -> bool:
    if active_filter_count(filters, preferences) > 0:
        return True
    populated = filters.model_dump(exclude_none=True, exclude=_UNCOUNTED_FIELDS)
    return any(value not in ([], "") for value in populated.values())


class FilterSession:
    def __init__(self, preferences: PreferencesStore) -> None:
        self._store = preferences
        self._filters = baseline_filters(preferences.preferences)
        self._listeners: list[FilterListener] = []
        self._unsubscribe = preferences.subscribe(self._on_preferences_changed)

    @property
    def filters(self) -> FilterOptions:
        return self._filters.model_copy(deep=True)

    def subscribe(self, listener: FilterListener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def close(self) -> None:
        self._unsubscribe()

    def _publish(self, filters: FilterOptions) -> None:
        self._filters = filters
        snapshot = self.filters
        for listener in list(self._listeners):
            listener(snapshot)

    def _on_preferences_changed(self, change: PreferenceChange, preferences: UserPreferences) -> None:
        if change in (PreferenceChange.allergies, PreferenceChange.excluded_ingredients):
            self.sync()
        elif change in (PreferenceChange.loaded, PreferenceChange.vegan):
            self.initialize()
        elif change is PreferenceChange.reset:
            self.clear()

    # ── Reconciler operations ────────────────────────────────────────────

    def initialize(self) -> None:
        """Merge the profile baseline into the current filters.

        The vegan flag is switched on for vegan profiles and otherwise left as
        the user set it. Once the profile stops being vegan, an inherited vegan
        flag belongs to the user and counts as a manual filter.
        """
        prefs = self._store.preferences
        filters = self.filters
        filters.allergens = _profile_list(prefs.allergies)
        filters.exclude_ingredients = _profile_list(prefs.excluded_ingredients)
        if prefs.is_vegan:
            dietary = filters.dietary or DietaryFilter()
            filters.dietary = dietary.model_copy(update={"vegan": True})
        logger.debug("Initialized filters from preferences")
        self._publish(filters)

    def sync(self) -> None:
        """Re-derive allergens and excluded ingredients from the profile."""
        prefs = self._store.preferences
        filters = self.filters
        filters.allergens = _profile_list(prefs.allergies)
        filters.exclude_ingredients = _profile_list(prefs.excluded_ingredients)
        logger.debug("Synced profile allergens into filters")
        self._publish(filters)

    def clear(self) -> None:
        """Drop manual selections and the search query, keeping profile filters."""
        self._publish(baseline_filters(self._store.preferences))

    def apply(self, filters: FilterOptions) -> None:
        """Replace the working filters, re-adding profile-derived values."""
        prefs = self._store.preferences
        merged = filters.model_copy(deep=True)
        merged.allergens = _merge_missing(merged.allergens, prefs.allergies)
        merged.exclude_ingredients = _merge_missing(
            merged.exclude_ingredients, prefs.excluded_ingredients,
        )
        if prefs.is_vegan:
            dietary = merged.dietary or DietaryFilter()
            merged.dietary = dietary.model_copy(update={"vegan": True})
        self._publish(merged)

    def set_search_query(self, query: str) -> None:
        filters = self.filters
        filters.search_query = query if query.strip() else None
        self._publish(filters)

    def active_filter_count(self) -> int:
        return active_filter_count(self._filters, self._store.preferences)

    def is_filter_active(self) -> bool:
        return is_filter_active(self._filters, self._store.preferences)


def _merge_missing(current: list[str] | None, profile: list[str]) -> list[str] | None:
    merged = list(current or [])
    merged.extend(v for v in profile if v not in merged)
    return merged or None
