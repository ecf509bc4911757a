from __future__ import annotations
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, ContextManager, Iterator, List, Optional, Protocol

from fastapi import Request
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from . import models
from .schemas import FrictionReport, FrictionReportIn, Institution, Metric


class StoreError(Exception):
	"""A read or write against the remote data store failed."""


class Store(Protocol):
	def list_institutions(self) -> List[Institution]: ...

	def get_institution(self, institution_id: str) -> Optional[Institution]: ...

	def list_metrics(self, institution_id: str) -> List[Metric]: ...

	def insert_report(self, report: FrictionReportIn) -> FrictionReport: ...

	def update_institution_score(self, institution_id: str, score: float, updated_at: datetime) -> None: ...

	def update_metric_value(self, metric_id: str, value: str) -> None: ...


StoreFactory = Callable[[], ContextManager[Store]]


class SqlStore:
	"""Store backed by a SQLAlchemy session. Each write commits on its own."""

	def __init__(self, db: Session) -> None:
		self.db = db

	def list_institutions(self) -> List[Institution]:
		try:
			rows = self.db.scalars(select(models.Institution).order_by(models.Institution.name)).all()
		except SQLAlchemyError as e:
			raise StoreError(str(e)) from e
		return [Institution.model_validate(r) for r in rows]

	def get_institution(self, institution_id: str) -> Optional[Institution]:
		try:
			row = self.db.get(models.Institution, institution_id)
		except SQLAlchemyError as e:
			raise StoreError(str(e)) from e
		return Institution.model_validate(row) if row is not None else None

	def list_metrics(self, institution_id: str) -> List[Metric]:
		try:
			rows = self.db.scalars(
				select(models.Metric).where(models.Metric.institution_id == institution_id)
			).all()
		except SQLAlchemyError as e:
			raise StoreError(str(e)) from e
		return [Metric.model_validate(r) for r in rows]

	def insert_report(self, report: FrictionReportIn) -> FrictionReport:
		row = models.FrictionReport(
			institution_id=report.institution_id,
			service_task=report.service_task,
			friction_type=report.friction_type.value,
			time_wasted_hours=report.time_wasted_hours,
			description=report.description,
		)
		try:
			self.db.add(row)
			self.db.commit()
			self.db.refresh(row)
		except SQLAlchemyError as e:
			self.db.rollback()
			raise StoreError(str(e)) from e
		return FrictionReport.model_validate(row)

	def update_institution_score(self, institution_id: str, score: float, updated_at: datetime) -> None:
		self._execute_update(
			update(models.Institution)
			.where(models.Institution.id == institution_id)
			.values({models.Institution.score: score, models.Institution.updated_at: updated_at})
		)

	def update_metric_value(self, metric_id: str, value: str) -> None:
		self._execute_update(
			update(models.Metric).where(models.Metric.id == metric_id).values({models.Metric.value: value})
		)

	def _execute_update(self, stmt) -> None:
		try:
			self.db.execute(stmt)
			self.db.commit()
		except SQLAlchemyError as e:
			self.db.rollback()
			raise StoreError(str(e)) from e


def sql_store_factory(session_factory: sessionmaker) -> StoreFactory:
	@contextmanager
	def open_store() -> Iterator[Store]:
		db = session_factory()
		try:
			yield SqlStore(db)
		finally:
			db.close()

	return open_store


def shared_store_factory(store: Store) -> StoreFactory:
	# For stores that hold a long-lived client and need no per-use cleanup
	@contextmanager
	def open_store() -> Iterator[Store]:
		yield store

	return open_store


def get_store(request: Request) -> Iterator[Store]:
	"""FastAPI dependency yielding a store from the factory installed at startup."""
	open_store: StoreFactory = request.app.state.store_factory
	with open_store() as store:
		yield store
