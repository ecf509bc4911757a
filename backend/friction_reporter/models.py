from __future__ import annotations
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Float, Text, ForeignKey
from .db import Base


def _new_id() -> str:
	return str(uuid.uuid4())


def _utcnow() -> datetime:
	return datetime.now(timezone.utc)


# Table and column names follow the hosted schema so rows are interchangeable with the REST store

class Institution(Base):
	__tablename__ = "entities"
	id = Column(String(36), primary_key=True, default=_new_id)
	name = Column(String(256), nullable=False, index=True)
	# PSC score, kept within [0, 10]
	score = Column("psc_score", Float, nullable=False, default=10.0)
	created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
	updated_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)


class Metric(Base):
	__tablename__ = "entity_metrics"
	id = Column(String(36), primary_key=True, default=_new_id)
	# Plain reference; metrics are not owned by the institution row
	institution_id = Column("entity_id", String(36), ForeignKey("entities.id"), nullable=False, index=True)
	name = Column("metric_name", String(128), nullable=False)
	value = Column("metric_value", String(128), nullable=False)
	created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)


class FrictionReport(Base):
	__tablename__ = "friction_reports"
	id = Column(String(36), primary_key=True, default=_new_id)
	institution_id = Column("entity_id", String(36), ForeignKey("entities.id"), nullable=False, index=True)
	service_task = Column(String(256), nullable=False, default="")
	friction_type = Column(String(32), nullable=False)
	time_wasted_hours = Column(Float, nullable=False, default=0.0)
	description = Column(Text, nullable=False)
	created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
