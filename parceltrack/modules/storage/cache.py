# -*- coding: utf-8 -*-
"""Status cache: last fetched tracking status per package, TTL-bounded.

The cache is a side channel. Losing it must only degrade packages to
"not checked yet", it never requires changes in the record store.
Expiry is enforced lazily at read time, there is no eviction sweep.
"""
import dataclasses
import datetime
import enum
import logging
from typing import Optional

import voluptuous as vlps

from parceltrack.modules.dates import Clock, parse_datetime, to_iso, utcnow
from .keyspace import Keyspace, load_validated

logger = logging.getLogger(__name__)

DEFAULT_TTL = datetime.timedelta(minutes=5)


class TrackingStatus(enum.Enum):
	UNKNOWN = 'unknown'
	IN_TRANSIT = 'in-transit'
	OUT_FOR_DELIVERY = 'out-for-delivery'
	DELIVERED = 'delivered'
	UNAVAILABLE = 'unavailable'

	def __str__(self):
		return self.value

	@classmethod
	def normalize(cls, value) -> 'TrackingStatus':
		"""Map whatever a relay reports onto the known statuses."""
		if isinstance(value, cls):
			return value
		if not isinstance(value, str):
			return cls.UNKNOWN

		key = value.strip().lower().replace('_', '-').replace(' ', '-')
		if key == 'exception':
			return cls.UNAVAILABLE
		try:
			return cls(key)
		except ValueError:
			return cls.UNKNOWN


@dataclasses.dataclass(frozen=True)
class CacheEntry:
	status: TrackingStatus
	status_description: str
	cached_at: datetime.datetime
	location: Optional[str] = None
	delivered_date: Optional[datetime.datetime] = None
	source: Optional[str] = None
	data_unavailable: bool = False

	def to_json(self) -> dict:
		return {
			'status': self.status.value,
			'statusDescription': self.status_description,
			'location': self.location,
			'deliveredDate': to_iso(self.delivered_date),
			'source': self.source,
			'dataUnavailable': self.data_unavailable,
			'cachedAt': to_iso(self.cached_at),
		}

	@classmethod
	def from_json(cls, data: dict) -> 'CacheEntry':
		data = ENTRY_SCHEMA(data)
		return cls(
			status=data['status'],
			status_description=data['statusDescription'],
			cached_at=data['cachedAt'],
			location=data['location'],
			delivered_date=data['deliveredDate'],
			source=data['source'],
			data_unavailable=data['dataUnavailable'],
		)


ENTRY_SCHEMA = vlps.Schema({
	vlps.Required('status'): TrackingStatus.normalize,
	vlps.Optional('statusDescription', default=''): vlps.Any(str, vlps.All(None, lambda _: '')),
	vlps.Optional('location', default=None): vlps.Maybe(str),
	vlps.Optional('deliveredDate', default=None): vlps.Maybe(parse_datetime),
	vlps.Optional('source', default=None): vlps.Maybe(str),
	vlps.Optional('dataUnavailable', default=False): bool,
	vlps.Required('cachedAt'): parse_datetime,
}, extra=vlps.REMOVE_EXTRA)

# Whole keyspace: record id -> raw entry. Entries are validated one by one.
_KEYSPACE_SCHEMA = vlps.Schema({str: dict})


class StatusCache:
	"""TTL-bounded map of record id to CacheEntry."""

	def __init__(
		self,
		keyspace: Keyspace,
		*,
		ttl: datetime.timedelta = DEFAULT_TTL,
		clock: Optional[Clock] = None
	):
		self._keyspace = keyspace
		self.ttl = ttl
		self._clock = clock or utcnow
		self._entries: Optional[dict[str, CacheEntry]] = None

	def _load(self) -> dict[str, CacheEntry]:
		if self._entries is None:
			raw = load_validated(self._keyspace, _KEYSPACE_SCHEMA, dict)
			entries = {}
			for record_id, data in raw.items():
				try:
					entries[record_id] = CacheEntry.from_json(data)
				except vlps.Invalid as e:
					logger.warning('Dropping invalid cache entry %r: %s', record_id, e)
			self._entries = entries
		return self._entries

	def _save(self):
		self._keyspace.save({
			record_id: entry.to_json() for record_id, entry in self._load().items()
		})

	def is_expired(self, entry: CacheEntry) -> bool:
		return self._clock() - entry.cached_at > self.ttl

	def get(self, record_id: str) -> Optional[CacheEntry]:
		"""Fresh entry of `record_id`; expired entries are reclaimed."""
		entries = self._load()
		entry = entries.get(record_id)
		if entry is None:
			return None

		if self.is_expired(entry):
			del entries[record_id]
			self._save()
			return None

		return entry

	def set(self, record_id: str, entry: CacheEntry):
		"""Overwrite the entry of `record_id`."""
		self._load()[record_id] = entry
		self._save()

	def delete(self, record_id: str):
		entries = self._load()
		if entries.pop(record_id, None) is not None:
			self._save()

	def clear(self):
		self._entries = {}
		self._keyspace.remove()
