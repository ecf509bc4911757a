from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException, Request

from ..refresh import InstitutionBoard, get_board
from ..schemas import DashboardView, FormView, FrictionType, InstitutionCard
from ..scoring import performance_status
from ..store import Store, StoreError, get_store
from .institutions import current_institutions


router = APIRouter(prefix="/views", tags=["views"])


@router.get("/form", response_model=FormView)
def form_view(
	request: Request,
	store: Store = Depends(get_store),
	board: InstitutionBoard = Depends(get_board),
):
	try:
		institutions = current_institutions(store, board)
	except StoreError as e:
		raise HTTPException(status_code=502, detail=f"Error loading institutions: {e}")
	default_name = request.app.state.settings.default_institution_name
	default = next((i for i in institutions if i.name == default_name), None)
	return FormView(
		institutions=institutions,
		friction_types=[t.value for t in FrictionType],
		default_institution_id=default.id if default else None,
	)


@router.get("/dashboard", response_model=DashboardView)
def dashboard_view(store: Store = Depends(get_store), board: InstitutionBoard = Depends(get_board)):
	try:
		institutions = current_institutions(store, board)
	except StoreError as e:
		raise HTTPException(status_code=502, detail=f"Error loading institutions: {e}")
	cards = [
		InstitutionCard(id=i.id, name=i.name, score=i.score, status=performance_status(i.score))
		for i in institutions
	]
	return DashboardView(institutions=cards, refreshed_at=board.refreshed_at)
