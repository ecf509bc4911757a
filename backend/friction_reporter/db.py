from __future__ import annotations
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool


Base = declarative_base()


def create_db_engine(database_url: str) -> Engine:
	if database_url.startswith("sqlite"):
		kwargs = {"connect_args": {"check_same_thread": False}}
		# In-memory databases must share one connection or every session sees an empty schema
		if ":memory:" in database_url or database_url in ("sqlite://", "sqlite+pysqlite://"):
			kwargs["poolclass"] = StaticPool
		return create_engine(database_url, future=True, **kwargs)
	return create_engine(database_url, future=True)


def create_session_factory(engine: Engine) -> sessionmaker:
	return sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)


def init_schema(engine: Engine) -> None:
	# Import for side effect: registers the tables on Base.metadata
	from . import models  # noqa: F401

	Base.metadata.create_all(bind=engine)
