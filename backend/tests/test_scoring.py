"""Tests for the PSC score adjustment and feedback rating helpers."""

import pytest

from friction_reporter.scoring import (
	FeedbackRating,
	adjust_score,
	feedback_label,
	performance_status,
	round_score,
	score_reduction,
)


SCORES = [i / 10 for i in range(0, 101)]
HOURS = [0, 0.5, 1, 2, 5, 10, 100]
DESCRIPTION_LENGTHS = [1, 20, 50, 100, 199, 200, 1000]


def test_example_report_reduces_score_by_reductions_sum():
	result = adjust_score(7.0, 2, "x" * 100)
	assert result.time_reduction == pytest.approx(0.3)
	assert result.description_reduction == pytest.approx(0.5)
	assert result.total_reduction == pytest.approx(1.3)
	assert result.new_score == 5.7
	assert result.new_feedback_value is None


def test_large_inputs_hit_every_cap():
	result = adjust_score(7.0, 100, "x" * 1000)
	assert result.time_reduction == 1.5
	assert result.description_reduction == 0.5
	assert result.total_reduction == 2.0
	assert result.new_score == 5.0


def test_score_never_goes_negative():
	assert adjust_score(1.5, 100, "x" * 1000).new_score == 0.0
	assert adjust_score(0.0, 0, "x").new_score == 0.0


def test_minimal_report_costs_base_penalty_plus_description():
	# 20 chars -> 0.1
	assert adjust_score(10.0, 0, "x" * 20).new_score == 9.4


def test_round_score_is_half_up_on_exact_float_value():
	assert round_score(0.25) == 0.3
	# 0.35 is stored just below the tie
	assert round_score(0.35) == 0.3
	assert round_score(5.699999999999999) == 5.7


def test_new_score_stays_within_bounds_for_all_inputs():
	for current in SCORES:
		for hours in HOURS:
			for length in DESCRIPTION_LENGTHS:
				new_score = adjust_score(current, hours, "x" * length).new_score
				assert 0.0 <= new_score <= current
				assert current - new_score <= 2.0 + 1e-9
				assert round(new_score, 1) == new_score


def test_total_reduction_is_monotonic_and_capped():
	for length in DESCRIPTION_LENGTHS:
		totals = [score_reduction(h, "x" * length)[2] for h in HOURS]
		assert totals == sorted(totals)
		assert max(totals) <= 2.0
	for hours in HOURS:
		totals = [score_reduction(hours, "x" * n)[2] for n in DESCRIPTION_LENGTHS]
		assert totals == sorted(totals)
		assert max(totals) <= 2.0


@pytest.mark.parametrize(
	("current", "expected"),
	[
		("Fair (50%)", "Poor (48%)"),
		("N/A", "Poor (48%)"),
		("Poor (40%)", "Very Poor (38%)"),
		("Fair (62%)", "Fair (60%)"),
		("Fair (61%)", "Poor (59%)"),
		("Very Poor (1%)", "Very Poor (0%)"),
		("Fair (54%)", "Poor (52%)"),
	],
)
def test_feedback_value_drops_two_points_and_relabels(current, expected):
	assert adjust_score(7.0, 1, "queue", current).new_feedback_value == expected


def test_feedback_rating_parse_uses_first_integer():
	assert FeedbackRating.parse("Fair (54%)") == FeedbackRating(percent=54, label="Poor")
	assert FeedbackRating.parse("12 of 30 (40%)").percent == 12
	assert FeedbackRating.parse("") == FeedbackRating(percent=50, label="Poor")
	assert FeedbackRating.parse(None).percent == 50


def test_feedback_rating_renders_display_string():
	rating = FeedbackRating.from_percent(38)
	assert rating.label == "Very Poor"
	assert str(rating) == "Very Poor (38%)"
	assert FeedbackRating.from_percent(0).lowered().percent == 0


def test_feedback_label_thresholds():
	assert feedback_label(39) == "Very Poor"
	assert feedback_label(40) == "Poor"
	assert feedback_label(59) == "Poor"
	assert feedback_label(60) == "Fair"


def test_performance_status_thresholds():
	assert performance_status(8.0) == "Excellent"
	assert performance_status(7.9) == "Good"
	assert performance_status(6.0) == "Good"
	assert performance_status(5.9) == "Needs Improvement"
	assert performance_status(0.0) == "Needs Improvement"


def test_feedback_percent_above_100_is_clamped_before_lowering():
	assert FeedbackRating.parse("Fair (150%)").percent == 100
	assert adjust_score(7.0, 1, "queue", "Fair (150%)").new_feedback_value == "Fair (98%)"
