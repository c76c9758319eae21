from __future__ import annotations

import time
from typing import Any

from ..recipes.models import FilterOptions

_MAX_EVENTS = 10_000

_events: list[dict[str, Any]] = []


def record_event(event_type: str, data: dict[str, Any]) -> None:
    _events.append({
        "type": event_type,
        "timestamp": time.time(),
        **data,
    })
    # Oldest events go first once the log is full
    if len(_events) > _MAX_EVENTS:
        del _events[: len(_events) - _MAX_EVENTS]


def record_search(
    filters: FilterOptions,
    results_returned: int,
    response_time_ms: float,
    favorites_only: bool = False,
) -> None:
    record_event("search", {
        "meal_time": filters.meal_time or [],
        "cuisines": filters.cuisine_type or [],
        "dish_types": filters.dish_type or [],
        "allergens": filters.allergens or [],
        "include_ingredients": filters.include_ingredients or [],
        "exclude_ingredients": filters.exclude_ingredients or [],
        "dietary": filters.dietary.model_dump(exclude_none=True) if filters.dietary else {},
        "max_prep_time": filters.max_prep_time,
        "search_query": filters.search_query,
        "sort_by": filters.sort_by,
        "favorites_only": favorites_only,
        "results_returned": results_returned,
        "response_time_ms": response_time_ms,
    })


def get_events() -> list[dict[str, Any]]:
    return _events


def clear_events() -> None:
    _events.clear()
