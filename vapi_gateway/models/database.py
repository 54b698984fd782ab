import structlog

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from vapi_gateway.models.base import Base
from vapi_gateway.models.entities import properties  # noqa: F401  registers the table

logger = structlog.get_logger(__name__)


def create_tables(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)

    inspector = inspect(engine)
    logger.info("database_tables", tables=inspector.get_table_names())
