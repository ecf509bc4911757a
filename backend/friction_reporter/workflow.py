from __future__ import annotations
import logging
import math
from datetime import datetime, timezone
from typing import Callable, Optional

from .schemas import FrictionReportIn, SubmissionResult
from .scoring import FEEDBACK_METRIC_NAME, adjust_score
from .store import Store, StoreError


logger = logging.getLogger(__name__)


class SubmissionError(Exception):
	"""A submission attempt stopped. ``message`` is shown to the user as-is."""

	VALIDATION = "validation"
	NOT_FOUND = "not_found"
	STORE = "store"

	def __init__(self, message: str, kind: str) -> None:
		super().__init__(message)
		self.message = message
		self.kind = kind


def validate_report(report: FrictionReportIn) -> None:
	if not report.institution_id:
		raise SubmissionError("Error: Please select an institution", SubmissionError.VALIDATION)
	if not report.description.strip():
		raise SubmissionError("Error: Please provide a brief description", SubmissionError.VALIDATION)
	if not math.isfinite(report.time_wasted_hours):
		raise SubmissionError("Error: Time wasted must be a number of hours", SubmissionError.VALIDATION)
	if report.time_wasted_hours < 0:
		raise SubmissionError("Error: Time wasted cannot be negative", SubmissionError.VALIDATION)


def confirmation_message(institution_name: str, new_score: float) -> str:
	return f"Friction Report Submitted. {institution_name}'s PSC Score is now: {new_score:.1f}"


def _store_failure(prefix: str, err: StoreError) -> SubmissionError:
	logger.warning("%s: %s", prefix, err)
	return SubmissionError(f"{prefix}: {err}", SubmissionError.STORE)


def submit_report(
	store: Store,
	report: FrictionReportIn,
	*,
	now: Optional[datetime] = None,
	on_refresh: Optional[Callable[[Store], None]] = None,
) -> SubmissionResult:
	"""Record a friction report and apply its score and feedback penalty.

	Steps run in order and the first failure stops the chain. Writes that already
	happened stay in place; the user resubmits.
	"""
	validate_report(report)
	institution_id = report.institution_id

	try:
		store.insert_report(report)
	except StoreError as e:
		raise _store_failure("Error submitting report", e) from e

	try:
		institution = store.get_institution(institution_id)
	except StoreError as e:
		raise _store_failure("Error loading institution", e) from e
	if institution is None:
		raise SubmissionError("Error: Institution not found", SubmissionError.NOT_FOUND)

	try:
		metrics = store.list_metrics(institution_id)
	except StoreError as e:
		raise _store_failure("Error loading metrics", e) from e
	feedback_metric = next((m for m in metrics if m.name == FEEDBACK_METRIC_NAME), None)

	adjustment = adjust_score(
		institution.score,
		report.time_wasted_hours,
		report.description,
		feedback_metric.value if feedback_metric is not None else None,
	)

	try:
		store.update_institution_score(institution_id, adjustment.new_score, now or datetime.now(timezone.utc))
	except StoreError as e:
		raise _store_failure("Error updating score", e) from e

	if feedback_metric is not None and adjustment.new_feedback_value is not None:
		try:
			store.update_metric_value(feedback_metric.id, adjustment.new_feedback_value)
		except StoreError as e:
			raise _store_failure("Error updating feedback metric", e) from e

	logger.info(
		"Report applied to %s: %.1f -> %.1f",
		institution.name,
		institution.score,
		adjustment.new_score,
		extra={
			"psc_institution_id": institution_id,
			"psc_total_reduction": adjustment.total_reduction,
			"psc_feedback_value": adjustment.new_feedback_value,
		},
	)

	if on_refresh is not None:
		try:
			on_refresh(store)
		except StoreError as e:
			logger.warning("Institution list refresh after submission failed: %s", e)

	return SubmissionResult(
		message=confirmation_message(institution.name, adjustment.new_score),
		institution_id=institution_id,
		institution_name=institution.name,
		new_score=adjustment.new_score,
		feedback_value=adjustment.new_feedback_value,
	)
