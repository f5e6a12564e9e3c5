# -*- coding: utf-8 -*-
"""Package tracker service: one explicitly constructed instance per process.

Stores are not thread-safe. Everything runs on one event loop and the stores
are touched only between awaits. The only suspending operation is the relay
fetch.
"""
import asyncio
import dataclasses
import datetime
import logging
from pathlib import Path
from typing import Iterable, Optional

from parceltrack.environs import env
from parceltrack.modules.dates import Clock, utcnow
from parceltrack.modules.policy import CompletionPolicy
from parceltrack.modules.storage import (
	CacheEntry,
	DurableRecord,
	DurableRecordStore,
	JsonFileKeyspace,
	MemoryKeyspace,
	Settings,
	SettingsStore,
	StatusCache,
	TrackingStatus,
)
from parceltrack.modules.storage.maintenance import migrate_legacy_records, sweep_retention
from .classifier import CarrierClassifier
from .hydrator import Hydrator, HydratedView
from .relay import OfflineTrackingClient, RelayTrackingClient, TrackingClient, TrackingFetchError
from .tokenizer import extract_candidates

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = 'Click "View on {carrier_name}" below for official tracking information.'


@dataclasses.dataclass(frozen=True)
class AddResult:
	added: list[HydratedView]
	# Candidates that were already tracked.
	duplicates: list[str]


class PackageTracker:
	def __init__(
		self,
		records: DurableRecordStore,
		cache: StatusCache,
		settings: SettingsStore,
		*,
		classifier: Optional[CarrierClassifier] = None,
		client: Optional[TrackingClient] = None,
		policy: CompletionPolicy = CompletionPolicy(),
		clock: Optional[Clock] = None,
		records_keyspace=None
	):
		self.records = records
		self.cache = cache
		self.settings = settings
		self.classifier = classifier or CarrierClassifier()
		self.client = client or OfflineTrackingClient()
		self.policy = policy
		self._clock = clock or utcnow
		self.hydrator = Hydrator(self.classifier, cache, policy=policy, clock=self._clock)
		# Needed only for the legacy format migration at startup.
		self._records_keyspace = records_keyspace
		self._batch_in_flight = False

	@classmethod
	def from_env(cls) -> 'PackageTracker':
		"""Build the service from environment configuration."""
		data_dir = Path(env.DATA_DIR).expanduser().resolve()
		cache_keyspace = JsonFileKeyspace(data_dir, 'cache') if env.PERSIST_CACHE else MemoryKeyspace('cache')
		records_keyspace = JsonFileKeyspace(data_dir, 'packages')

		cache = StatusCache(cache_keyspace, ttl=datetime.timedelta(seconds=env.CACHE_TTL_SECONDS))
		if env.TRACKING_RELAY_URL:
			client = RelayTrackingClient(env.TRACKING_RELAY_URL, timeout=env.TRACKING_FETCH_TIMEOUT)
		else:
			client = OfflineTrackingClient()

		return cls(
			DurableRecordStore(records_keyspace, cache),
			cache,
			SettingsStore(JsonFileKeyspace(data_dir, 'settings')),
			client=client,
			policy=CompletionPolicy.from_env(),
			records_keyspace=records_keyspace,
		)

	def startup(self):
		"""Maintenance pass. Call once, before serving anything."""
		if self._records_keyspace is not None:
			migrate_legacy_records(self._records_keyspace, self.cache, self._clock)
		sweep_retention(self.records, self.policy, self._clock())
		for carrier in self.classifier.carriers:
			logger.info('Registered carrier: %s (%s)', carrier.name, carrier.code)

	@property
	def batch_in_flight(self) -> bool:
		return self._batch_in_flight

	# Reads.

	def list_packages(self, show_completed: Optional[bool] = None) -> list[HydratedView]:
		"""Hydrated packages; completed ones only if asked (or set in settings)."""
		if show_completed is None:
			show_completed = self.settings.get().show_completed

		views = self.hydrator.hydrate_all(self.records)
		if show_completed:
			return views
		return [view for view in views if not view.is_completed]

	def get_package(self, record_id: str) -> Optional[HydratedView]:
		record = self.records.get(record_id)
		return self.hydrator.hydrate(record) if record else None

	# Writes.

	def add_packages(self, free_text: str, notes: str = '') -> AddResult:
		"""Create records for every new tracking number found in `free_text`."""
		added = []
		duplicates = []
		for tracking_number in extract_candidates(free_text, self.classifier):
			if self.records.contains(tracking_number):
				duplicates.append(tracking_number)
				continue
			record = self.records.create(tracking_number, notes)
			if record is not None:
				added.append(self.hydrator.hydrate(record))

		if added:
			logger.info('Added %d package(s) for tracking', len(added))
		return AddResult(added=added, duplicates=duplicates)

	def update_package(self, record_id: str, **patch) -> Optional[HydratedView]:
		record = self.records.update(record_id, patch)
		return self.hydrator.hydrate(record) if record else None

	def remove_package(self, record_id: str) -> bool:
		return self.records.delete(record_id)

	def clear_all(self):
		"""Forget everything: records, status cache and settings."""
		self.records.clear()
		self.settings.clear()
		logger.info('All tracking data cleared')

	def save_settings(self, settings: Settings) -> Settings:
		self.settings.save(settings)
		return settings

	# Refresh.

	async def refresh_all(self) -> Optional[list[HydratedView]]:
		"""Refresh every active package, None if a batch is already running."""
		active = [view.id for view in self.list_packages(show_completed=False)]
		return await self.refresh_packages(active)

	async def refresh_packages(self, record_ids: Iterable[str]) -> Optional[list[HydratedView]]:
		"""Refresh packages concurrently as one batch.

		Only one batch may be in flight; a concurrent request is a no-op and
		returns None.
		"""
		if self._batch_in_flight:
			logger.debug('Batch refresh ignored, another one is in flight')
			return None

		self._batch_in_flight = True
		try:
			records = [record for record in map(self.records.get, record_ids) if record is not None]
			await asyncio.gather(*(self._refresh_record(record) for record in records))
		finally:
			self._batch_in_flight = False

		return [view for view in map(self.get_package, (record.id for record in records)) if view]

	async def refresh_package(self, record_id: str) -> Optional[HydratedView]:
		"""Refresh one package; independent of the batch gate."""
		record = self.records.get(record_id)
		if record is None:
			return None

		await self._refresh_record(record)
		return self.get_package(record_id)

	async def _refresh_record(self, record: DurableRecord):
		entry = await self._fetch_entry(record)
		# The record could be deleted while we were waiting.
		if self.records.get(record.id) is None:
			return
		self.cache.set(record.id, entry)

	async def _fetch_entry(self, record: DurableRecord) -> CacheEntry:
		carrier = self.classifier.classify(record.tracking_number)
		if carrier is None:
			return self._unavailable_entry('Carrier')

		try:
			status = await self.client.fetch(record.tracking_number, carrier.code)
		except TrackingFetchError as e:
			logger.info('Tracking %s with %s failed: %s', record.tracking_number, carrier.name, e)
			return self._unavailable_entry(carrier.name)

		now = self._clock()
		delivered_date = status.delivered_date
		if status.status is TrackingStatus.DELIVERED and delivered_date is None:
			delivered_date = now

		return CacheEntry(
			status=status.status,
			status_description=status.status_description,
			cached_at=now,
			location=status.location,
			delivered_date=delivered_date,
			source=status.source,
			data_unavailable=status.data_unavailable,
		)

	def _unavailable_entry(self, carrier_name: str) -> CacheEntry:
		return CacheEntry(
			status=TrackingStatus.UNAVAILABLE,
			status_description=UNAVAILABLE_MESSAGE.format(carrier_name=carrier_name),
			cached_at=self._clock(),
			source='Link Only',
			data_unavailable=True,
		)
