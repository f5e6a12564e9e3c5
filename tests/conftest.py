# -*- coding: utf-8 -*-
from __future__ import annotations

import asyncio
import datetime
from typing import Optional

import pytest

from parceltrack.modules.storage import DurableRecordStore, MemoryKeyspace, SettingsStore, StatusCache
from parceltrack.modules.storage.cache import TrackingStatus
from parceltrack.modules.tracker.classifier import CarrierClassifier
from parceltrack.modules.tracker.relay import NormalizedStatus, TrackingFetchError
from parceltrack.modules.tracker.tracker import PackageTracker

START = datetime.datetime(2025, 1, 1, 12, 0, tzinfo=datetime.timezone.utc)


class FakeClock:
	def __init__(self, now: datetime.datetime = START):
		self.now = now

	def __call__(self) -> datetime.datetime:
		return self.now

	def advance(self, **kwargs) -> None:
		self.now += datetime.timedelta(**kwargs)


class StubTrackingClient:
	"""Answers from a table; unknown numbers fail like an unreachable relay."""

	def __init__(self, statuses: Optional[dict[str, NormalizedStatus]] = None, gate: Optional[asyncio.Event] = None):
		self.statuses = statuses or {}
		self.gate = gate
		self.calls: list[tuple[str, str]] = []

	async def fetch(self, tracking_number: str, carrier_code: str) -> NormalizedStatus:
		self.calls.append((tracking_number, carrier_code))
		if self.gate is not None:
			await self.gate.wait()
		try:
			return self.statuses[tracking_number]
		except KeyError:
			raise TrackingFetchError('No tracking data available') from None

	async def ping(self) -> bool:
		return True


def in_transit(description: str = 'Package is in transit') -> NormalizedStatus:
	return NormalizedStatus(
		status=TrackingStatus.IN_TRANSIT,
		status_description=description,
		location='Distribution Center',
		source='Backend API',
	)


@pytest.fixture
def clock() -> FakeClock:
	return FakeClock()


@pytest.fixture
def classifier() -> CarrierClassifier:
	return CarrierClassifier()


@pytest.fixture
def cache(clock: FakeClock) -> StatusCache:
	return StatusCache(MemoryKeyspace('cache'), clock=clock)


@pytest.fixture
def store(cache: StatusCache, clock: FakeClock) -> DurableRecordStore:
	return DurableRecordStore(MemoryKeyspace('packages'), cache, clock=clock)


@pytest.fixture
def client() -> StubTrackingClient:
	return StubTrackingClient()


@pytest.fixture
def tracker(store, cache, classifier, client, clock) -> PackageTracker:
	return PackageTracker(
		store,
		cache,
		SettingsStore(MemoryKeyspace('settings')),
		classifier=classifier,
		client=client,
		clock=clock,
	)
