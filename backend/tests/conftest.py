from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

import pytest

from friction_reporter.schemas import FrictionReport, FrictionReportIn, Institution, Metric
from friction_reporter.store import StoreError


class FakeStore:
	"""In-memory store that records calls and fails on demand."""

	def __init__(self) -> None:
		self.institutions: Dict[str, Institution] = {}
		self.metrics: List[Metric] = []
		self.reports: List[FrictionReport] = []
		self.calls: List[str] = []
		self.fail_on: set[str] = set()

	def add_institution(self, id: str, name: str, score: float) -> Institution:
		institution = Institution(id=id, name=name, score=score)
		self.institutions[id] = institution
		return institution

	def add_metric(self, id: str, institution_id: str, name: str, value: str) -> Metric:
		metric = Metric(id=id, institution_id=institution_id, name=name, value=value)
		self.metrics.append(metric)
		return metric

	def _call(self, name: str) -> None:
		self.calls.append(name)
		if name in self.fail_on:
			raise StoreError(f"{name} failed")

	def list_institutions(self) -> List[Institution]:
		self._call("list_institutions")
		return sorted(self.institutions.values(), key=lambda i: i.name)

	def get_institution(self, institution_id: str) -> Optional[Institution]:
		self._call("get_institution")
		return self.institutions.get(institution_id)

	def list_metrics(self, institution_id: str) -> List[Metric]:
		self._call("list_metrics")
		return [m for m in self.metrics if m.institution_id == institution_id]

	def insert_report(self, report: FrictionReportIn) -> FrictionReport:
		self._call("insert_report")
		row = FrictionReport(id=f"r{len(self.reports) + 1}", **report.model_dump())
		self.reports.append(row)
		return row

	def update_institution_score(self, institution_id: str, score: float, updated_at: datetime) -> None:
		self._call("update_institution_score")
		current = self.institutions[institution_id]
		self.institutions[institution_id] = current.model_copy(update={"score": score, "updated_at": updated_at})

	def update_metric_value(self, metric_id: str, value: str) -> None:
		self._call("update_metric_value")
		self.metrics = [m.model_copy(update={"value": value}) if m.id == metric_id else m for m in self.metrics]


@pytest.fixture
def fake_store() -> FakeStore:
	store = FakeStore()
	store.add_institution("inst-1", "Municipal Council", 7.0)
	store.add_institution("inst-2", "Land Registry Office", 5.8)
	store.add_metric("m-1", "inst-1", "Citizen Feedback Rating", "Fair (54%)")
	store.add_metric("m-2", "inst-1", "Average Response Time", "12 days")
	return store
