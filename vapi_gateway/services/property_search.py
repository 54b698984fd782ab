"""
Property search over the relational datastore.

Design decisions:
- Criteria are validated field by field so the caller sees every problem
  in one response
- At most 100 rows are returned
- A missing DATABASE_URL disables search (503) without affecting calls
"""

import math
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from vapi_gateway.core.exceptions import (
    DatastoreQueryError,
    DatastoreUnavailableError,
    ValidationError,
)
from vapi_gateway.repositories.property_repository import PropertyRepository
from vapi_gateway.schemas.search import SearchCriteria, SearchResponse

logger = structlog.get_logger(__name__)

# field -> (error message, minimum, maximum)
NUMERIC_RULES: dict[str, tuple[str, float, float | None]] = {
    "minPrice": ("Invalid minimum price", 0, None),
    "maxPrice": ("Invalid maximum price", 0, None),
    "bedrooms": ("Invalid number of bedrooms", 0, 10),
    "bathrooms": ("Invalid number of bathrooms", 0, 20),
}


def validate_criteria(raw: Any) -> SearchCriteria:
    """
    Check raw criteria and build a SearchCriteria.

    Raises:
        ValidationError: Criteria missing, not an object, or out of range
            (details lists one message per bad field)
    """
    if not isinstance(raw, dict):
        raise ValidationError("Invalid search criteria")

    errors = []
    for field, (message, minimum, maximum) in NUMERIC_RULES.items():
        value = raw.get(field)
        if value is None:
            continue
        try:
            number = float(value)
        except (TypeError, ValueError):
            errors.append(message)
            continue
        if math.isnan(number) or number < minimum or (maximum is not None and number > maximum):
            errors.append(message)

    if errors:
        raise ValidationError("Validation failed", details=errors)

    try:
        return SearchCriteria.model_validate(raw)
    except PydanticValidationError as e:
        raise ValidationError(
            "Validation failed",
            details=[f"Invalid {err['loc'][0]}" for err in e.errors()]
        ) from e


class PropertySearchService:
    def __init__(self, session_factory: sessionmaker[Session] | None):
        self.session_factory = session_factory

    @property
    def available(self) -> bool:
        return self.session_factory is not None

    def search(self, raw_criteria: Any) -> SearchResponse:
        if self.session_factory is None:
            raise DatastoreUnavailableError()

        criteria = validate_criteria(raw_criteria)

        try:
            with self.session_factory() as db:
                properties = PropertyRepository(db).search(criteria)
                rows = [prop.to_dict() for prop in properties]
        except SQLAlchemyError as e:
            logger.error("property_search_failed", error=str(e))
            raise DatastoreQueryError() from e

        logger.info("property_search_completed", count=len(rows))
        return SearchResponse(properties=rows, count=len(rows))
