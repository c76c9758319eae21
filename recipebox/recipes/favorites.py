from __future__ import annotations

import re
from collections.abc import Collection

_NON_DIGITS = re.compile(r"\D")
_BASE_MODULUS = 96
_BASE_OFFSET = 5


def _base_favorite_count(recipe_id: str) -> int:
    """Stable pseudo-popularity derived from the digits of the recipe id."""
    digits = _NON_DIGITS.sub("", recipe_id)
    numeric_id = int(digits) if digits else 0
    return numeric_id % _BASE_MODULUS + _BASE_OFFSET


def get_favorite_count(recipe_id: str, favorite_recipes: Collection[str] = ()) -> int:
    count = _base_favorite_count(recipe_id)
    if recipe_id in favorite_recipes:
        count += 1
    return count
