from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException

from ..refresh import InstitutionBoard, get_board
from ..schemas import FrictionReportIn, SubmissionResult
from ..store import Store, get_store
from ..workflow import SubmissionError, submit_report


router = APIRouter(prefix="/reports", tags=["reports"])

_STATUS_BY_KIND = {
	SubmissionError.VALIDATION: 400,
	SubmissionError.NOT_FOUND: 404,
	SubmissionError.STORE: 502,
}


@router.post("", response_model=SubmissionResult, status_code=201)
def create_report(
	req: FrictionReportIn,
	store: Store = Depends(get_store),
	board: InstitutionBoard = Depends(get_board),
):
	try:
		return submit_report(store, req, on_refresh=board.refresh_with)
	except SubmissionError as e:
		raise HTTPException(status_code=_STATUS_BY_KIND.get(e.kind, 500), detail=e.message)
