from __future__ import annotations
import asyncio
import logging
import threading
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional

from fastapi import Request

from .schemas import Institution
from .store import Store, StoreFactory


logger = logging.getLogger(__name__)


class PeriodicTask:
	"""Run an async callback now and then every ``interval`` seconds until stopped.

	A failing tick is logged and the loop carries on. ``stop()`` cancels the
	task and waits for it, so no new tick starts after it returns. Work a tick
	handed to a thread can still be finishing; the owner of that work fences it.
	"""

	def __init__(self, name: str, interval: float, callback: Callable[[], Awaitable[None]]) -> None:
		if interval <= 0:
			raise ValueError("interval must be positive")
		self.name = name
		self.interval = interval
		self._callback = callback
		self._task: Optional[asyncio.Task] = None

	@property
	def running(self) -> bool:
		return self._task is not None and not self._task.done()

	def start(self) -> None:
		if self.running:
			return
		self._task = asyncio.create_task(self._run(), name=self.name)

	async def stop(self) -> None:
		task, self._task = self._task, None
		if task is None:
			return
		task.cancel()
		try:
			await task
		except asyncio.CancelledError:
			pass

	async def _run(self) -> None:
		while True:
			try:
				await self._callback()
			except Exception:
				logger.warning("Periodic task %s failed", self.name, exc_info=True)
			await asyncio.sleep(self.interval)


class InstitutionBoard:
	"""Latest institution list seen by this process. Whichever fetch lands last wins.

	After ``close()`` nothing is published and no background fetch is running.
	"""

	def __init__(self, store_factory: StoreFactory) -> None:
		self._open_store = store_factory
		self._lock = threading.Lock()
		# Held for the whole of a background fetch
		self._fetch_lock = threading.Lock()
		self._closed = False
		self._institutions: Optional[List[Institution]] = None
		self._refreshed_at: Optional[datetime] = None

	@property
	def refreshed_at(self) -> Optional[datetime]:
		return self._refreshed_at

	def snapshot(self) -> Optional[List[Institution]]:
		with self._lock:
			return list(self._institutions) if self._institutions is not None else None

	@property
	def closed(self) -> bool:
		return self._closed

	def publish(self, institutions: List[Institution]) -> None:
		with self._lock:
			if self._closed:
				return
			self._institutions = list(institutions)
			self._refreshed_at = datetime.now(timezone.utc)

	def refresh_with(self, store: Store) -> List[Institution]:
		institutions = store.list_institutions()
		self.publish(institutions)
		return institutions

	def refresh(self) -> List[Institution]:
		with self._fetch_lock:
			if self._closed:
				return []
			with self._open_store() as store:
				return self.refresh_with(store)

	def close(self) -> None:
		"""Stop publishing and wait out any fetch still using the store."""
		with self._lock:
			self._closed = True
		with self._fetch_lock:
			pass

	async def refresh_async(self) -> None:
		# Store clients are synchronous
		await asyncio.to_thread(self.refresh)


def get_board(request: Request) -> InstitutionBoard:
	return request.app.state.board
