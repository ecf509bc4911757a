from __future__ import annotations
import logging
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .models import Institution, Metric
from .scoring import FEEDBACK_METRIC_NAME


logger = logging.getLogger(__name__)


# (name, psc_score, [(metric_name, metric_value), ...])
DEMO_INSTITUTIONS = [
	("Municipal Council", 7.0, [
		(FEEDBACK_METRIC_NAME, "Fair (54%)"),
		("Average Response Time", "12 days"),
	]),
	("Land Registry Office", 5.8, [
		(FEEDBACK_METRIC_NAME, "Poor (46%)"),
		("Average Response Time", "21 days"),
	]),
	("Public Health Department", 8.2, [
		(FEEDBACK_METRIC_NAME, "Fair (68%)"),
	]),
	("Revenue Authority", 6.4, []),
]


def seed_if_empty(db: Session) -> int:
	"""Insert demo institutions into an empty store. Returns the number inserted."""
	existing = db.scalar(select(func.count()).select_from(Institution)) or 0
	if existing:
		return 0

	for name, score, metrics in DEMO_INSTITUTIONS:
		institution = Institution(name=name, score=score)
		db.add(institution)
		db.flush()
		for metric_name, metric_value in metrics:
			db.add(Metric(institution_id=institution.id, name=metric_name, value=metric_value))

	db.commit()
	logger.info("Seeded %d demo institutions", len(DEMO_INSTITUTIONS))
	return len(DEMO_INSTITUTIONS)
