"""
PSC score adjustment.

A friction report lowers an institution's PSC score by a bounded penalty built
from three independently capped terms:

- a flat 0.5 for any report,
- 0.15 per hour of wasted time, capped at 1.5,
- description length / 200, capped at 0.5,

with the sum capped at 2.0. The new score is rounded to one decimal place and
never drops below zero.

The same submission nudges the "Citizen Feedback Rating" metric down by two
percentage points and relabels it.
"""
from __future__ import annotations
import re
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional


BASE_REDUCTION = 0.5
TIME_REDUCTION_PER_HOUR = 0.15
TIME_REDUCTION_CAP = 1.5
DESCRIPTION_CHARS_PER_POINT = 200
DESCRIPTION_REDUCTION_CAP = 0.5
TOTAL_REDUCTION_CAP = 2.0

MIN_SCORE = 0.0
MAX_SCORE = 10.0

FEEDBACK_METRIC_NAME = "Citizen Feedback Rating"
FEEDBACK_DEFAULT_PERCENT = 50
FEEDBACK_STEP = 2

_FIRST_INT = re.compile(r"\d+")


def round_score(value: float) -> float:
	"""Round half-up to one decimal on the exact value of the float."""
	return float(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def feedback_label(percent: int) -> str:
	if percent < 40:
		return "Very Poor"
	if percent < 60:
		return "Poor"
	return "Fair"


def performance_status(score: float) -> str:
	if score >= 8:
		return "Excellent"
	if score >= 6:
		return "Good"
	return "Needs Improvement"


@dataclass(frozen=True)
class FeedbackRating:
	"""Structured form of the feedback metric's display string, e.g. ``Fair (54%)``."""

	percent: int
	label: str

	@classmethod
	def from_percent(cls, percent: int) -> "FeedbackRating":
		percent = max(0, min(100, int(percent)))
		return cls(percent=percent, label=feedback_label(percent))

	@classmethod
	def parse(cls, text: Optional[str]) -> "FeedbackRating":
		# Only the first embedded integer counts; the stored label is re-derived
		match = _FIRST_INT.search(text or "")
		percent = int(match.group(0)) if match else FEEDBACK_DEFAULT_PERCENT
		return cls.from_percent(percent)

	def lowered(self, step: int = FEEDBACK_STEP) -> "FeedbackRating":
		return FeedbackRating.from_percent(max(0, self.percent - step))

	def display(self) -> str:
		return f"{self.label} ({self.percent}%)"

	def __str__(self) -> str:
		return self.display()


@dataclass(frozen=True)
class ScoreAdjustment:
	new_score: float
	new_feedback_value: Optional[str]
	time_reduction: float
	description_reduction: float
	total_reduction: float


def score_reduction(time_wasted_hours: float, description: str) -> tuple[float, float, float]:
	"""Return ``(time_reduction, description_reduction, total_reduction)``."""
	time_reduction = min(time_wasted_hours * TIME_REDUCTION_PER_HOUR, TIME_REDUCTION_CAP)
	description_reduction = min(len(description) / DESCRIPTION_CHARS_PER_POINT, DESCRIPTION_REDUCTION_CAP)
	total = min(BASE_REDUCTION + time_reduction + description_reduction, TOTAL_REDUCTION_CAP)
	return time_reduction, description_reduction, total


def adjust_score(
	current_score: float,
	time_wasted_hours: float,
	description: str,
	current_feedback_value: Optional[str] = None,
) -> ScoreAdjustment:
	"""Compute the post-report score and feedback value.

	Callers validate inputs first: ``time_wasted_hours`` must be non-negative and
	``description`` non-blank. ``current_feedback_value`` is ``None`` when the
	institution has no feedback metric, in which case no new value is produced.
	"""
	time_reduction, description_reduction, total = score_reduction(time_wasted_hours, description)
	new_score = max(MIN_SCORE, round_score(current_score - total))

	new_feedback_value = None
	if current_feedback_value is not None:
		new_feedback_value = FeedbackRating.parse(current_feedback_value).lowered().display()

	return ScoreAdjustment(
		new_score=new_score,
		new_feedback_value=new_feedback_value,
		time_reduction=time_reduction,
		description_reduction=description_reduction,
		total_reduction=total,
	)
