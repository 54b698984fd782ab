from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def create_db_engine(database_url: str) -> Engine:
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True)

    if database_url in ("sqlite://", "sqlite:///:memory:"):
        # One shared connection, otherwise every session sees an empty database
        return create_engine(
            database_url,
            connect_args={'check_same_thread': False},
            poolclass=StaticPool,
        )
    return create_engine(database_url, connect_args={'check_same_thread': False})


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
