from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import DEFAULT_APP_CONFIG, AppConfig
from .preferences.reconciler import FilterSession
from .preferences.store import PreferencesStore
from .recipes.browser import RecipeBrowser
from .recipes.catalog import RecipeCatalog
from .reviews.store import ReviewStore
from .storage.kv import JsonFileStore

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Everything one application instance owns, wired together."""

    config: AppConfig
    catalog: RecipeCatalog
    preferences: PreferencesStore
    reviews: ReviewStore
    filters: FilterSession
    browser: RecipeBrowser


def build_state(config: AppConfig = DEFAULT_APP_CONFIG, load: bool = True) -> AppState:
    """Create the stores and the filter session, then load persisted data.

    Subscribers are registered before loading so the initial load is
    reconciled into the filters like any other preference change. Search
    tracking starts only after that, so startup refreshes are not recorded.
    """
    catalog = RecipeCatalog.from_path(config.catalog_path)
    storage = JsonFileStore(config.storage_dir)

    preferences = PreferencesStore(storage, key=config.preferences_key)
    reviews = ReviewStore(storage, seed_recipes=catalog.recipes, key=config.reviews_key)
    filters = FilterSession(preferences)
    browser = RecipeBrowser(catalog, filters, preferences)

    if load:
        preferences.load()
        reviews.load()
        logger.info("Loaded preferences and reviews from %s", config.storage_dir)
    browser.enable_tracking()

    return AppState(
        config=config,
        catalog=catalog,
        preferences=preferences,
        reviews=reviews,
        filters=filters,
        browser=browser,
    )
