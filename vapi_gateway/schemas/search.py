"""
Pydantic schemas for the property search endpoint.

Numeric criteria are range-checked by the search service before these
models are built, so every bad field is reported at once.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SearchCriteria(BaseModel):
    """Filters for POST /api/search. Every field is optional."""
    minPrice: float | None = None
    maxPrice: float | None = None
    bedrooms: float | None = None
    bathrooms: float | None = None
    city: str | None = None
    state: str | None = None
    propertyType: str | None = None

    model_config = ConfigDict(extra="ignore")


class SearchRequest(BaseModel):
    # Left untyped so a missing or non-object value maps to 400, not 422
    criteria: Any = Field(default=None, description="Search filters")


class SearchResponse(BaseModel):
    success: bool = True
    properties: list[dict[str, Any]]
    count: int
