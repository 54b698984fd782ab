from vapi_gateway.repositories.property_repository import PropertyRepository

__all__ = ["PropertyRepository"]
