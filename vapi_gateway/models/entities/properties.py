from sqlalchemy import Column, Float, Integer, String

from vapi_gateway.models.base import Base


class Property(Base):
    __tablename__ = 'properties'
    id = Column(Integer, primary_key=True, index=True)
    address = Column(String)
    city = Column(String, index=True)
    state = Column(String, index=True)
    price = Column(Float, index=True)
    bedrooms = Column(Integer)
    bathrooms = Column(Float)
    property_type = Column(String)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "price": self.price,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "property_type": self.property_type,
        }
