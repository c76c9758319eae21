from __future__ import annotations

import logging

from fastapi import Depends, FastAPI

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events
from .config import DEFAULT_APP_CONFIG, AppConfig
from .dependencies import get_state, require_recipe
from .preferences.models import (
    PreferenceItemRequest,
    UnitTypeRequest,
    UserNameRequest,
    UserPreferences,
    VeganRequest,
)
from .recipes.evaluator import filter_recipes
from .recipes.models import (
    AvailableFilters,
    FilterOptions,
    FilterStateResponse,
    Recipe,
    RecipeListResponse,
    Review,
    ReviewRequest,
    SearchQueryRequest,
)
from .recipes.options import get_filter_options
from .state import AppState, build_state


def _filter_state(state: AppState) -> FilterStateResponse:
    return FilterStateResponse(
        filters=state.filters.filters,
        active_filter_count=state.filters.active_filter_count(),
        filter_active=state.filters.is_filter_active(),
    )


def _recipe_list(state: AppState, recipes: list[Recipe]) -> RecipeListResponse:
    return RecipeListResponse(
        recipes=[state.browser.summarize(r) for r in recipes],
        total=len(recipes),
        active_filter_count=state.filters.active_filter_count(),
        filter_active=state.filters.is_filter_active(),
        favorites_only=state.browser.favorites_only,
    )


def create_app(config: AppConfig = DEFAULT_APP_CONFIG) -> FastAPI:
    logging.getLogger("recipebox").setLevel(config.log_level.upper())

    app = FastAPI(title="RecipeBox API", version="1.0.0")
    app.state.recipebox = build_state(config)

    # ── Public endpoints ─────────────────────────────────────────────────

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/metadata", response_model=AvailableFilters)
    def metadata(state: AppState = Depends(get_state)) -> AvailableFilters:
        return get_filter_options(state.catalog.recipes)

    # ── Recipes ──────────────────────────────────────────────────────────

    @app.get("/recipes", response_model=RecipeListResponse)
    def recipes(
        favorites_only: bool | None = None,
        state: AppState = Depends(get_state),
    ) -> RecipeListResponse:
        if favorites_only is not None:
            state.browser.set_favorites_only(favorites_only)
        return _recipe_list(state, state.browser.results)

    @app.post("/recipes/search", response_model=RecipeListResponse)
    def search(
        body: FilterOptions,
        state: AppState = Depends(get_state),
    ) -> RecipeListResponse:
        favorites = state.preferences.preferences.favorite_recipes
        matches = filter_recipes(state.catalog.recipes, body, favorites)
        return _recipe_list(state, matches)

    @app.get("/recipes/{recipe_id}", response_model=Recipe)
    def recipe_detail(recipe: Recipe = Depends(require_recipe)) -> Recipe:
        return recipe

    @app.get("/recipes/{recipe_id}/reviews", response_model=list[Review])
    def recipe_reviews(
        recipe: Recipe = Depends(require_recipe),
        state: AppState = Depends(get_state),
    ) -> list[Review]:
        return state.reviews.get_recipe_reviews(recipe.id)

    @app.post("/recipes/{recipe_id}/reviews", response_model=Review, status_code=201)
    def add_review(
        body: ReviewRequest,
        recipe: Recipe = Depends(require_recipe),
        state: AppState = Depends(get_state),
    ) -> Review:
        return state.reviews.add_review(
            recipe.id,
            body.rating,
            body.comment,
            user_name=state.preferences.preferences.user_name,
            status=body.status,
        )

    # ── Filters ──────────────────────────────────────────────────────────

    @app.get("/filters", response_model=FilterStateResponse)
    def get_filters(state: AppState = Depends(get_state)) -> FilterStateResponse:
        return _filter_state(state)

    @app.put("/filters", response_model=FilterStateResponse)
    def apply_filters(
        body: FilterOptions,
        state: AppState = Depends(get_state),
    ) -> FilterStateResponse:
        state.filters.apply(body)
        return _filter_state(state)

    @app.post("/filters/clear", response_model=FilterStateResponse)
    def clear_filters(state: AppState = Depends(get_state)) -> FilterStateResponse:
        state.filters.clear()
        state.browser.set_favorites_only(False)
        return _filter_state(state)

    @app.put("/filters/search", response_model=FilterStateResponse)
    def set_search_query(
        body: SearchQueryRequest,
        state: AppState = Depends(get_state),
    ) -> FilterStateResponse:
        state.filters.set_search_query(body.query)
        return _filter_state(state)

    # ── Preferences ──────────────────────────────────────────────────────

    @app.get("/preferences", response_model=UserPreferences)
    def get_preferences(state: AppState = Depends(get_state)) -> UserPreferences:
        return state.preferences.preferences

    @app.put("/preferences/unit-type", response_model=UserPreferences)
    def set_unit_type(
        body: UnitTypeRequest,
        state: AppState = Depends(get_state),
    ) -> UserPreferences:
        state.preferences.set_unit_type(body.unit_type)
        return state.preferences.preferences

    @app.put("/preferences/vegan", response_model=UserPreferences)
    def set_vegan(
        body: VeganRequest,
        state: AppState = Depends(get_state),
    ) -> UserPreferences:
        state.preferences.set_is_vegan(body.is_vegan)
        return state.preferences.preferences

    @app.put("/preferences/user-name", response_model=UserPreferences)
    def set_user_name(
        body: UserNameRequest,
        state: AppState = Depends(get_state),
    ) -> UserPreferences:
        state.preferences.set_user_name(body.user_name.strip())
        return state.preferences.preferences

    @app.post("/preferences/nutritional-info/toggle", response_model=UserPreferences)
    def toggle_nutritional_info(state: AppState = Depends(get_state)) -> UserPreferences:
        state.preferences.toggle_nutritional_info()
        return state.preferences.preferences

    @app.post("/preferences/allergies", response_model=UserPreferences)
    def add_allergy(
        body: PreferenceItemRequest,
        state: AppState = Depends(get_state),
    ) -> UserPreferences:
        state.preferences.add_allergy(body.value.strip())
        return state.preferences.preferences

    @app.delete("/preferences/allergies/{allergy}", response_model=UserPreferences)
    def remove_allergy(
        allergy: str,
        state: AppState = Depends(get_state),
    ) -> UserPreferences:
        state.preferences.remove_allergy(allergy)
        return state.preferences.preferences

    @app.post("/preferences/excluded-ingredients", response_model=UserPreferences)
    def add_excluded_ingredient(
        body: PreferenceItemRequest,
        state: AppState = Depends(get_state),
    ) -> UserPreferences:
        state.preferences.add_excluded_ingredient(body.value.strip())
        return state.preferences.preferences

    @app.delete("/preferences/excluded-ingredients/{ingredient}", response_model=UserPreferences)
    def remove_excluded_ingredient(
        ingredient: str,
        state: AppState = Depends(get_state),
    ) -> UserPreferences:
        state.preferences.remove_excluded_ingredient(ingredient)
        return state.preferences.preferences

    @app.post("/preferences/favorites/{recipe_id}/toggle")
    def toggle_favorite(
        recipe: Recipe = Depends(require_recipe),
        state: AppState = Depends(get_state),
    ) -> dict:
        is_favorite = state.preferences.toggle_favorite(recipe.id)
        return {
            "recipe_id": recipe.id,
            "is_favorite": is_favorite,
            "favorite_count": state.browser.summarize(recipe).favorite_count,
        }

    @app.post("/preferences/reset", response_model=UserPreferences)
    def reset_preferences(state: AppState = Depends(get_state)) -> UserPreferences:
        state.preferences.reset()
        state.reviews.reset()
        return state.preferences.preferences

    # ── Analytics ────────────────────────────────────────────────────────

    @app.get("/analytics")
    def analytics() -> dict:
        return compute_analytics(get_events())

    return app


app = create_app()
