from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx

from .schemas import FrictionReport, FrictionReportIn, Institution, Metric
from .settings import Settings
from .store import StoreError


INSTITUTIONS_TABLE = "entities"
METRICS_TABLE = "entity_metrics"
REPORTS_TABLE = "friction_reports"


def _institution(row: Dict[str, Any]) -> Institution:
	return Institution(
		id=str(row["id"]),
		name=row.get("name", ""),
		score=float(row.get("psc_score") or 0.0),
		updated_at=row.get("updated_at"),
	)


def _metric(row: Dict[str, Any]) -> Metric:
	return Metric(
		id=str(row["id"]),
		institution_id=str(row["entity_id"]),
		name=row.get("metric_name", ""),
		value=row.get("metric_value", ""),
	)


def _report(row: Dict[str, Any]) -> FrictionReport:
	return FrictionReport(
		id=str(row["id"]),
		institution_id=str(row["entity_id"]),
		service_task=row.get("service_task") or "",
		friction_type=row["friction_type"],
		time_wasted_hours=float(row.get("time_wasted_hours") or 0.0),
		description=row.get("description") or "",
		created_at=row.get("created_at"),
	)


def _error_message(response: httpx.Response) -> str:
	try:
		data = response.json()
	except ValueError:
		data = None
	if isinstance(data, dict) and data.get("message"):
		return str(data["message"])
	return f"HTTP {response.status_code}: {response.text}"


class RestStore:
	"""Store backed by a hosted PostgREST endpoint (the Supabase auto-generated REST API)."""

	def __init__(
		self,
		base_url: str,
		api_key: str,
		*,
		timeout: float = 10.0,
		client: Optional[httpx.Client] = None,
	) -> None:
		if not base_url or not api_key:
			raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be configured for the REST store")
		self.base_url = base_url.rstrip("/") + "/rest/v1"
		self._headers = {
			"apikey": api_key,
			"Authorization": f"Bearer {api_key}",
			"Content-Type": "application/json",
		}
		self._client = client or httpx.Client(timeout=timeout)

	@classmethod
	def from_settings(cls, settings: Settings) -> "RestStore":
		return cls(
			settings.supabase_url or "",
			settings.supabase_anon_key or "",
			timeout=settings.rest_timeout_seconds,
		)

	def close(self) -> None:
		self._client.close()

	def _request(
		self,
		method: str,
		table: str,
		*,
		params: Optional[Dict[str, str]] = None,
		json: Any = None,
		prefer: Optional[str] = None,
	) -> Any:
		headers = dict(self._headers)
		if prefer:
			headers["Prefer"] = prefer
		try:
			r = self._client.request(method, f"{self.base_url}/{table}", params=params, headers=headers, json=json)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			raise StoreError(_error_message(http_err.response)) from http_err
		except httpx.RequestError as net_err:
			raise StoreError(str(net_err) or net_err.__class__.__name__) from net_err
		if not r.content:
			return None
		return r.json()

	def list_institutions(self) -> List[Institution]:
		rows = self._request("GET", INSTITUTIONS_TABLE, params={"select": "*", "order": "name"})
		return [_institution(row) for row in rows or []]

	def get_institution(self, institution_id: str) -> Optional[Institution]:
		rows = self._request("GET", INSTITUTIONS_TABLE, params={"select": "*", "id": f"eq.{institution_id}"})
		return _institution(rows[0]) if rows else None

	def list_metrics(self, institution_id: str) -> List[Metric]:
		rows = self._request("GET", METRICS_TABLE, params={"select": "*", "entity_id": f"eq.{institution_id}"})
		return [_metric(row) for row in rows or []]

	def insert_report(self, report: FrictionReportIn) -> FrictionReport:
		payload = {
			"entity_id": report.institution_id,
			"service_task": report.service_task,
			"friction_type": report.friction_type.value,
			"time_wasted_hours": report.time_wasted_hours,
			"description": report.description,
		}
		rows = self._request("POST", REPORTS_TABLE, json=[payload], prefer="return=representation")
		if not rows:
			raise StoreError("Insert returned no row")
		return _report(rows[0])

	def update_institution_score(self, institution_id: str, score: float, updated_at: datetime) -> None:
		self._request(
			"PATCH",
			INSTITUTIONS_TABLE,
			params={"id": f"eq.{institution_id}"},
			json={"psc_score": score, "updated_at": updated_at.isoformat()},
		)

	def update_metric_value(self, metric_id: str, value: str) -> None:
		self._request(
			"PATCH",
			METRICS_TABLE,
			params={"id": f"eq.{metric_id}"},
			json={"metric_value": value},
		)
