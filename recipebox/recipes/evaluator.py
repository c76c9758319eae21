"""
Recipe filter evaluator.

Structural predicates narrow the candidate frame one at a time (a recipe that
fails a predicate is never looked at by the later ones), then the optional
free-text relevance pass and sort reorder what is left.
"""
from __future__ import annotations

from collections.abc import Collection

import pandas as pd

from .favorites import get_favorite_count
from .models import FilterOptions, Recipe
from .search import rank_by_relevance

_SORT_COLUMNS = {
    "rating": "rating",
    "favorites": "favorite_count",
    "prep_time": "prep_time",
}


def recipes_frame(recipes: list[Recipe]) -> pd.DataFrame:
    """Flatten recipes into a frame indexed by catalog position."""
    rows = [
        {
            "id": r.id,
            "name": r.name,
            "description": r.description,
            "prep_time": r.prep_time,
            "rating": r.rating,
            "vegan": r.vegan,
            "vegetarian": r.vegetarian,
            "meal_time": [m.value for m in r.meal_time],
            "cuisine_type": list(r.cuisine_type),
            "dish_type": list(r.dish_type),
            "allergens": list(r.allergens),
            "ingredient_names": [ing.name for ing in r.ingredients],
            "tags": list(r.tags),
        }
        for r in recipes
    ]
    return pd.DataFrame(rows, index=pd.RangeIndex(len(rows)))


def _mask(column: pd.Series, func, **kwargs) -> pd.Series:
    """Row-wise predicate over a list-valued column, always as a bool Series."""
    return column.apply(func, **kwargs).astype(bool)


def _any_in(values: list[str], wanted: set[str]) -> bool:
    return bool(wanted.intersection(values))


def _any_contains(names: list[str], terms: list[str]) -> bool:
    lowered = [n.lower() for n in names]
    return any(term in name for term in terms for name in lowered)


def _apply_structural(candidates: pd.DataFrame, filters: FilterOptions) -> pd.DataFrame:
    if filters.meal_time:
        wanted = set(filters.meal_time)
        candidates = candidates.loc[_mask(candidates["meal_time"], _any_in, wanted=wanted)]

    if filters.max_prep_time is not None:
        candidates = candidates.loc[candidates["prep_time"] <= filters.max_prep_time]

    if filters.cuisine_type:
        wanted = set(filters.cuisine_type)
        candidates = candidates.loc[_mask(candidates["cuisine_type"], _any_in, wanted=wanted)]

    if filters.dish_type:
        wanted = set(filters.dish_type)
        candidates = candidates.loc[_mask(candidates["dish_type"], _any_in, wanted=wanted)]

    # Exclusion filters: drop on any overlap
    if filters.allergens:
        blocked = set(filters.allergens)
        candidates = candidates.loc[~_mask(candidates["allergens"], _any_in, wanted=blocked)]

    if filters.exclude_ingredients:
        terms = [t.lower() for t in filters.exclude_ingredients if t]
        if terms:
            candidates = candidates.loc[
                ~_mask(candidates["ingredient_names"], _any_contains, terms=terms)
            ]

    dietary = filters.dietary
    if dietary is not None:
        if dietary.vegan and dietary.vegetarian:
            # Either flag is enough when both are requested
            candidates = candidates.loc[candidates["vegan"] | candidates["vegetarian"]]
        elif dietary.vegan:
            candidates = candidates.loc[candidates["vegan"]]
        elif dietary.vegetarian:
            candidates = candidates.loc[candidates["vegetarian"]]

    if filters.include_ingredients:
        terms = [t.lower() for t in filters.include_ingredients if t]
        if terms:
            candidates = candidates.loc[
                _mask(candidates["ingredient_names"], _any_contains, terms=terms)
            ]

    return candidates


def _apply_sort(
    candidates: pd.DataFrame,
    filters: FilterOptions,
    favorite_recipes: Collection[str],
) -> pd.DataFrame:
    column = _SORT_COLUMNS.get(filters.sort_by or "none")
    if column is None or candidates.empty:
        return candidates

    if column == "favorite_count":
        candidates = candidates.copy()
        candidates["favorite_count"] = candidates["id"].apply(
            get_favorite_count, favorite_recipes=favorite_recipes,
        )

    ascending = filters.sort_direction == "asc"
    return candidates.sort_values(column, ascending=ascending, kind="stable")


def filter_recipes(
    catalog: list[Recipe],
    filters: FilterOptions | None,
    favorite_recipes: Collection[str] = (),
) -> list[Recipe]:
    """Return the recipes of *catalog* that satisfy *filters*.

    Without a search query or sort option the catalog order is kept. Neither
    argument is modified.
    """
    if not catalog:
        return []
    if filters is None:
        return list(catalog)

    candidates = _apply_structural(recipes_frame(catalog), filters)

    if filters.search_query and filters.search_query.strip():
        candidates = rank_by_relevance(candidates, filters.search_query)

    candidates = _apply_sort(candidates, filters, favorite_recipes)

    return [catalog[i] for i in candidates.index]
