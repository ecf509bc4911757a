from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..refresh import InstitutionBoard, get_board
from ..schemas import Institution, InstitutionDetail
from ..scoring import performance_status
from ..store import Store, StoreError, get_store


router = APIRouter(prefix="/institutions", tags=["institutions"])


def current_institutions(store: Store, board: InstitutionBoard) -> List[Institution]:
	institutions = board.snapshot()
	if institutions is None:
		# Nothing fetched yet (refresh loop not started or first tick pending)
		institutions = board.refresh_with(store)
	return institutions


@router.get("", response_model=List[Institution])
def list_institutions(store: Store = Depends(get_store), board: InstitutionBoard = Depends(get_board)):
	try:
		return current_institutions(store, board)
	except StoreError as e:
		raise HTTPException(status_code=502, detail=f"Error loading institutions: {e}")


@router.get("/{institution_id}", response_model=InstitutionDetail)
def institution_detail(institution_id: str, store: Store = Depends(get_store)):
	try:
		institution = store.get_institution(institution_id)
		if institution is None:
			raise HTTPException(status_code=404, detail="Error: Institution not found")
		metrics = store.list_metrics(institution_id)
	except StoreError as e:
		raise HTTPException(status_code=502, detail=f"Error loading institution: {e}")
	return InstitutionDetail(
		institution=institution,
		status=performance_status(institution.score),
		metrics=metrics,
	)
