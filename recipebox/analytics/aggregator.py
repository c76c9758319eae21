from __future__ import annotations

from collections import Counter
from typing import Any


def _top(counter: Counter[str], n: int = 10) -> list[dict[str, Any]]:
    return [{"name": name, "count": count} for name, count in counter.most_common(n)]


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    searches = [e for e in events if e["type"] == "search"]
    total = len(searches)

    # Average response time
    times = [s["response_time_ms"] for s in searches if "response_time_ms" in s]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    cuisine_counter: Counter[str] = Counter()
    meal_time_counter: Counter[str] = Counter()
    query_counter: Counter[str] = Counter()
    for s in searches:
        cuisine_counter.update(s.get("cuisines") or [])
        meal_time_counter.update(s.get("meal_time") or [])
        query = (s.get("search_query") or "").strip().lower()
        if query:
            query_counter[query] += 1

    # Filter usage rates
    filter_counts = {
        "meal_time": 0,
        "cuisine": 0,
        "dish_type": 0,
        "allergens": 0,
        "ingredients": 0,
        "dietary": 0,
        "max_prep_time": 0,
        "search": 0,
        "sort": 0,
        "favorites_only": 0,
    }
    for s in searches:
        if s.get("meal_time"):
            filter_counts["meal_time"] += 1
        if s.get("cuisines"):
            filter_counts["cuisine"] += 1
        if s.get("dish_types"):
            filter_counts["dish_type"] += 1
        if s.get("allergens"):
            filter_counts["allergens"] += 1
        if s.get("include_ingredients") or s.get("exclude_ingredients"):
            filter_counts["ingredients"] += 1
        if s.get("dietary"):
            filter_counts["dietary"] += 1
        if s.get("max_prep_time") is not None:
            filter_counts["max_prep_time"] += 1
        if s.get("search_query"):
            filter_counts["search"] += 1
        if s.get("sort_by") and s["sort_by"] != "none":
            filter_counts["sort"] += 1
        if s.get("favorites_only"):
            filter_counts["favorites_only"] += 1
    filter_usage = {
        k: round(v / total * 100, 1) if total else 0.0
        for k, v in filter_counts.items()
    }

    empty_results = sum(1 for s in searches if s.get("results_returned") == 0)

    return {
        "total_searches": total,
        "avg_response_time_ms": avg_time,
        "top_cuisines": _top(cuisine_counter),
        "top_meal_times": _top(meal_time_counter),
        "top_queries": _top(query_counter),
        "filter_usage": filter_usage,
        "empty_result_rate": round(empty_results / total * 100, 1) if total else 0.0,
    }
