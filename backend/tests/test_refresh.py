"""Tests for the periodic institution refresh."""

import asyncio
import time

import pytest

from friction_reporter.refresh import InstitutionBoard, PeriodicTask
from friction_reporter.store import StoreError, shared_store_factory


def test_interval_must_be_positive():
	async def noop():
		return None

	with pytest.raises(ValueError):
		PeriodicTask("bad", 0, noop)


@pytest.mark.asyncio
async def test_task_runs_immediately_and_repeats_until_stopped():
	ticks = []

	async def tick():
		ticks.append(1)

	task = PeriodicTask("ticker", 0.01, tick)
	task.start()
	await asyncio.sleep(0.1)
	assert task.running
	await task.stop()
	assert not task.running

	count = len(ticks)
	assert count >= 2
	await asyncio.sleep(0.05)
	assert len(ticks) == count


@pytest.mark.asyncio
async def test_failing_tick_does_not_stop_the_loop():
	ticks = []

	async def flaky():
		ticks.append(1)
		if len(ticks) == 1:
			raise RuntimeError("store unavailable")

	task = PeriodicTask("flaky", 0.01, flaky)
	task.start()
	await asyncio.sleep(0.1)
	await task.stop()
	assert len(ticks) >= 2


@pytest.mark.asyncio
async def test_stop_without_start_is_a_no_op():
	async def noop():
		return None

	await PeriodicTask("idle", 1, noop).stop()


def test_board_publishes_latest_fetch(fake_store):
	board = InstitutionBoard(shared_store_factory(fake_store))
	assert board.snapshot() is None
	assert board.refreshed_at is None

	board.refresh()
	assert [i.name for i in board.snapshot()] == ["Land Registry Office", "Municipal Council"]
	first_refresh = board.refreshed_at

	fake_store.add_institution("inst-3", "Revenue Authority", 6.4)
	board.refresh_with(fake_store)
	assert len(board.snapshot()) == 3
	assert board.refreshed_at >= first_refresh


def test_board_keeps_last_good_snapshot_when_fetch_fails(fake_store):
	board = InstitutionBoard(shared_store_factory(fake_store))
	board.refresh()
	fake_store.fail_on.add("list_institutions")
	with pytest.raises(StoreError):
		board.refresh()
	assert len(board.snapshot()) == 2


@pytest.mark.asyncio
async def test_board_refresh_async_feeds_periodic_task(fake_store):
	board = InstitutionBoard(shared_store_factory(fake_store))
	task = PeriodicTask("institution-refresh", 0.01, board.refresh_async)
	task.start()
	await asyncio.sleep(0.1)
	await task.stop()
	assert board.snapshot() is not None
	assert fake_store.calls.count("list_institutions") >= 1


def _slow_listing(store, delay):
	listing = store.list_institutions

	def slow():
		time.sleep(delay)
		return listing()

	store.list_institutions = slow


@pytest.mark.asyncio
async def test_fetch_in_flight_at_shutdown_is_not_published(fake_store):
	_slow_listing(fake_store, 0.3)
	board = InstitutionBoard(shared_store_factory(fake_store))
	task = PeriodicTask("institution-refresh", 10, board.refresh_async)
	task.start()
	await asyncio.sleep(0.05)

	await task.stop()
	await asyncio.to_thread(board.close)
	# close() waits for the worker thread, so the fetch has finished by now
	assert fake_store.calls == ["list_institutions"]
	assert board.snapshot() is None

	await asyncio.sleep(0.4)
	assert board.snapshot() is None
	assert board.refreshed_at is None


def test_closed_board_does_not_fetch_or_publish(fake_store):
	board = InstitutionBoard(shared_store_factory(fake_store))
	board.close()
	assert board.closed
	assert board.refresh() == []
	assert fake_store.calls == []
	board.publish([])
	assert board.snapshot() is None
