from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

SortOption = Literal["rating", "favorites", "prep_time", "none"]
SortDirection = Literal["asc", "desc"]


class MealTime(str, Enum):
    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"
    snack = "snack"
    dessert = "dessert"


class ReviewStatus(str, Enum):
    approved = "approved"
    pending_review = "pending_review"


class Review(BaseModel):
    id: str
    user_id: str
    user_name: str
    rating: float = Field(..., ge=0.0, le=5.0)
    comment: str
    date: str
    status: ReviewStatus = ReviewStatus.approved


class Ingredient(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    quantity: str
    unit: str | None = None


class NutritionalInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    calories: float
    fiber: float
    protein: float | None = None
    carbs: float | None = None
    fat: float | None = None


class Recipe(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    description: str = ""
    image: str | None = None
    prep_time: int = Field(..., gt=0, description="Minutes")
    rating: float = 0.0
    review_count: int = 0
    reviews: list[Review] = Field(default_factory=list)
    serving_size: int = Field(default=1, ge=1)
    vegan: bool = False
    vegetarian: bool = False
    meal_time: list[MealTime] = Field(default_factory=list)
    cuisine_type: list[str] = Field(default_factory=list)
    dish_type: list[str] = Field(default_factory=list)
    allergens: list[str] = Field(default_factory=list)
    nutritional_info: NutritionalInfo | None = None
    ingredients: list[Ingredient] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class DietaryFilter(BaseModel):
    vegan: bool | None = None
    vegetarian: bool | None = None


class FilterOptions(BaseModel):
    """Matching criteria for one browsing session. Absent fields impose no constraint."""

    meal_time: list[str] | None = None
    max_prep_time: int | None = None
    cuisine_type: list[str] | None = None
    dish_type: list[str] | None = None
    allergens: list[str] | None = None
    include_ingredients: list[str] | None = None
    exclude_ingredients: list[str] | None = None
    dietary: DietaryFilter | None = None
    search_query: str | None = None
    sort_by: SortOption | None = None
    sort_direction: SortDirection | None = None


class AvailableFilters(BaseModel):
    meal_times: list[str]
    cuisine_types: list[str]
    dish_types: list[str]
    allergens: list[str]
    ingredients: list[str]
    prep_times: list[int]


class RecipeSummary(BaseModel):
    id: str
    name: str
    description: str
    image: str | None
    prep_time: int
    rating: float
    review_count: int
    vegan: bool
    vegetarian: bool
    favorite_count: int
    is_favorite: bool


class RecipeListResponse(BaseModel):
    recipes: list[RecipeSummary]
    total: int
    active_filter_count: int
    filter_active: bool
    favorites_only: bool


class FilterStateResponse(BaseModel):
    filters: FilterOptions
    active_filter_count: int
    filter_active: bool


class SearchQueryRequest(BaseModel):
    query: str = Field(default="", max_length=200)


class ReviewRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(..., min_length=1, max_length=1000)
    status: ReviewStatus = ReviewStatus.approved
