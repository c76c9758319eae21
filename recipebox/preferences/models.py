from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

UnitType = Literal["metric", "imperial"]


class UserPreferences(BaseModel):
    unit_type: UnitType = "metric"
    allergies: list[str] = Field(default_factory=list)
    excluded_ingredients: list[str] = Field(default_factory=list)
    favorite_recipes: list[str] = Field(default_factory=list)
    is_vegan: bool = False
    user_name: str | None = None
    show_nutritional_info: bool = False


class PreferenceChange(str, Enum):
    """What part of the preferences a notification is about."""

    loaded = "loaded"
    unit_type = "unit_type"
    allergies = "allergies"
    excluded_ingredients = "excluded_ingredients"
    favorites = "favorites"
    vegan = "vegan"
    user_name = "user_name"
    nutritional_info = "nutritional_info"
    reset = "reset"


class UnitTypeRequest(BaseModel):
    unit_type: UnitType


class VeganRequest(BaseModel):
    is_vegan: bool


class UserNameRequest(BaseModel):
    user_name: str = Field(..., min_length=1, max_length=50)


class PreferenceItemRequest(BaseModel):
    value: str = Field(..., min_length=1, max_length=100)
