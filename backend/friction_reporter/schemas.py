from __future__ import annotations
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class FrictionType(str, Enum):
	DELAY = "Delay"
	OPAQUENESS = "Opaqueness"
	INACCESSIBLE_FORM = "Inaccessible Form"


class Institution(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: str
	name: str
	score: float
	updated_at: Optional[datetime] = None


class Metric(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: str
	institution_id: str
	name: str
	value: str


class FrictionReportIn(BaseModel):
	# Fields are lenient here; the submission workflow turns gaps into user-facing messages
	institution_id: Optional[str] = None
	service_task: str = ""
	friction_type: FrictionType = FrictionType.DELAY
	time_wasted_hours: float = 0.0
	description: str = ""


class FrictionReport(FrictionReportIn):
	model_config = ConfigDict(from_attributes=True)

	id: str
	institution_id: str
	created_at: Optional[datetime] = None


class SubmissionResult(BaseModel):
	message: str
	institution_id: str
	institution_name: str
	new_score: float
	feedback_value: Optional[str] = None


class InstitutionCard(BaseModel):
	id: str
	name: str
	score: float
	status: str


class InstitutionDetail(BaseModel):
	institution: Institution
	status: str
	metrics: List[Metric]


class DashboardView(BaseModel):
	institutions: List[InstitutionCard]
	refreshed_at: Optional[datetime] = None


class FormView(BaseModel):
	institutions: List[Institution]
	friction_types: List[str]
	default_institution_id: Optional[str] = None
