from typing import List

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from vapi_gateway.models.entities.properties import Property
from vapi_gateway.repositories.base_repository import BaseRepository
from vapi_gateway.schemas.search import SearchCriteria

logger = structlog.get_logger(__name__)

MAX_RESULTS = 100


class PropertyRepository(BaseRepository[Property]):
    def __init__(self, db: Session):
        super().__init__(db, Property)

    def search(self, criteria: SearchCriteria, limit: int = MAX_RESULTS) -> List[Property]:
        query = select(Property)

        if criteria.minPrice is not None:
            query = query.where(Property.price >= criteria.minPrice)
        if criteria.maxPrice is not None:
            query = query.where(Property.price <= criteria.maxPrice)
        if criteria.bedrooms is not None:
            query = query.where(Property.bedrooms == criteria.bedrooms)
        if criteria.bathrooms is not None:
            query = query.where(Property.bathrooms == criteria.bathrooms)
        if criteria.city:
            query = query.where(Property.city.ilike(f"%{criteria.city}%"))
        if criteria.state:
            query = query.where(Property.state.ilike(f"%{criteria.state}%"))
        if criteria.propertyType:
            query = query.where(Property.property_type == criteria.propertyType)

        return list(self.db.scalars(query.limit(limit)))
