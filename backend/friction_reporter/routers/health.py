from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
def health(request: Request):
	board = request.app.state.board
	return {
		"status": "healthy",
		"service": "Friction Reporter",
		"store": request.app.state.settings.store_backend,
		"refreshed_at": board.refreshed_at,
	}
