import asyncio
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from .db import create_db_engine, create_session_factory, init_schema
from .logging_setup import setup_logging
from .refresh import InstitutionBoard, PeriodicTask
from .rest_store import RestStore
from .seed import seed_if_empty
from .settings import Settings
from .store import shared_store_factory, sql_store_factory
from .routers import health
from .routers import institutions
from .routers import reports
from .routers import views

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
	settings = settings or Settings()
	setup_logging(settings.log_format, settings.log_level)

	app = FastAPI(title="Friction Reporter & PSC Viewer API")
	app.include_router(health.router)
	app.include_router(institutions.router)
	app.include_router(reports.router)
	app.include_router(views.router)
	app.state.settings = settings

	engine = None
	rest_store: Optional[RestStore] = None
	if settings.store_backend == "rest":
		rest_store = RestStore.from_settings(settings)
		app.state.store_factory = shared_store_factory(rest_store)
	elif settings.store_backend == "sql":
		engine = create_db_engine(settings.database_url)
		session_factory = create_session_factory(engine)
		app.state.store_factory = sql_store_factory(session_factory)
	else:
		raise ValueError(f"STORE_BACKEND must be 'sql' or 'rest', got {settings.store_backend!r}")

	board = InstitutionBoard(app.state.store_factory)
	app.state.board = board
	refresher = PeriodicTask("institution-refresh", settings.refresh_interval_seconds, board.refresh_async)

	@app.get("/", include_in_schema=False)
	async def redirect_root_to_dashboard():
		return RedirectResponse(url="/views/dashboard")

	@app.on_event("startup")
	async def startup_event():
		if engine is not None:
			init_schema(engine)
			if settings.seed_demo_data:
				db = session_factory()
				try:
					seed_if_empty(db)
				finally:
					db.close()
		refresher.start()
		logger.info("Started with %s store, refreshing every %.1fs", settings.store_backend, settings.refresh_interval_seconds)

	@app.on_event("shutdown")
	async def shutdown_event():
		await refresher.stop()
		# A fetch already handed to a worker thread must finish before its store goes away
		await asyncio.to_thread(board.close)
		if rest_store is not None:
			rest_store.close()
		if engine is not None:
			engine.dispose()

	return app


app = create_app()


if __name__ == "__main__":
	import os
	import uvicorn

	uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", 8080)))
