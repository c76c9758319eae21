from __future__ import annotations

import pandas as pd

from .evaluator import recipes_frame
from .models import AvailableFilters, Recipe

PREP_TIME_CHOICES: list[int] = [15, 30, 45, 60]


def _unique_sorted(column: pd.Series) -> list[str]:
    values = column.explode().dropna()
    return sorted(set(values.tolist()))


def get_filter_options(catalog: list[Recipe]) -> AvailableFilters:
    """Collect every selectable filter value present in *catalog*."""
    if not catalog:
        return AvailableFilters(
            meal_times=[],
            cuisine_types=[],
            dish_types=[],
            allergens=[],
            ingredients=[],
            prep_times=list(PREP_TIME_CHOICES),
        )

    df = recipes_frame(catalog)
    return AvailableFilters(
        meal_times=_unique_sorted(df["meal_time"]),
        cuisine_types=_unique_sorted(df["cuisine_type"]),
        dish_types=_unique_sorted(df["dish_type"]),
        allergens=_unique_sorted(df["allergens"]),
        ingredients=_unique_sorted(df["ingredient_names"]),
        prep_times=list(PREP_TIME_CHOICES),
    )
