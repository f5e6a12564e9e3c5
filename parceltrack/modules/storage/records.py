# -*- coding: utf-8 -*-
"""Durable record store: the only state that must never be lost.

Records hold carrier-independent facts only. The carrier is never stored,
it is derived from the tracking number on every read, so classifier changes
never leave stale data behind.
"""
import dataclasses
import datetime
import logging
from typing import Callable, Mapping, Optional
import uuid

import voluptuous as vlps

from parceltrack.modules.dates import Clock, parse_datetime, to_iso, utcnow
from .cache import StatusCache
from .keyspace import Keyspace, load_validated

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class DurableRecord:
	"""Persisted package.

	`is_completed` is None until the user toggles completion for the first
	time. `completed_date` is set if and only if `is_completed` is True.
	"""
	id: str
	tracking_number: str
	added_date: datetime.datetime
	notes: str = ''
	is_completed: Optional[bool] = None
	completed_date: Optional[datetime.datetime] = None

	def to_json(self) -> dict:
		return {
			'id': self.id,
			'trackingNumber': self.tracking_number,
			'addedDate': to_iso(self.added_date),
			'notes': self.notes,
			'isCompleted': self.is_completed,
			'completedDate': to_iso(self.completed_date),
		}

	@classmethod
	def from_json(cls, data: dict) -> 'DurableRecord':
		data = RECORD_SCHEMA(data)
		is_completed = data['isCompleted']
		completed_date = data['completedDate'] if is_completed else None
		if is_completed and completed_date is None:
			# Completed without a date: the best we know is when it was added.
			completed_date = data['addedDate']
		return cls(
			id=data['id'],
			tracking_number=data['trackingNumber'],
			added_date=data['addedDate'],
			notes=data['notes'],
			is_completed=is_completed,
			completed_date=completed_date,
		)


RECORD_SCHEMA = vlps.Schema({
	vlps.Required('id'): vlps.All(str, vlps.Length(min=1)),
	vlps.Required('trackingNumber'): vlps.All(str, vlps.Length(min=1)),
	vlps.Required('addedDate'): parse_datetime,
	vlps.Optional('notes', default=''): vlps.Any(str, vlps.All(None, lambda _: '')),
	vlps.Optional('isCompleted', default=None): vlps.Maybe(bool),
	vlps.Optional('completedDate', default=None): vlps.Maybe(parse_datetime),
}, extra=vlps.REMOVE_EXTRA)

# Allowed keys of `DurableRecordStore.update` patch.
PATCH_SCHEMA = vlps.Schema({
	vlps.Optional('notes'): vlps.Any(str, vlps.All(None, lambda _: '')),
	vlps.Optional('is_completed'): bool,
})

# Whole keyspace is a list. Items are validated one by one.
_KEYSPACE_SCHEMA = vlps.Schema(list)


def _new_id() -> str:
	return uuid.uuid4().hex


class DurableRecordStore:
	"""Whole-collection store of DurableRecord objects.

	Deleting a record also deletes its status cache entry.
	"""

	def __init__(
		self,
		keyspace: Keyspace,
		cache: StatusCache,
		*,
		clock: Optional[Clock] = None,
		id_factory: Callable[[], str] = _new_id
	):
		self._keyspace = keyspace
		self._cache = cache
		self._clock = clock or utcnow
		self._id_factory = id_factory
		self._records: Optional[list[DurableRecord]] = None

	def _load(self) -> list[DurableRecord]:
		if self._records is None:
			records = []
			seen_ids = set()
			for data in load_validated(self._keyspace, _KEYSPACE_SCHEMA, list):
				if not isinstance(data, dict):
					logger.warning('Dropping record which is not an object: %r', data)
					continue
				try:
					record = DurableRecord.from_json(data)
				except vlps.Invalid as e:
					logger.warning('Dropping invalid record %r: %s', data.get('id'), e)
					continue
				if record.id in seen_ids:
					logger.warning('Dropping record with duplicate id %r', record.id)
					continue
				seen_ids.add(record.id)
				records.append(record)
			self._records = records
		return self._records

	def _save(self):
		self._keyspace.save([record.to_json() for record in self._load()])

	def _index(self, record_id: str) -> Optional[int]:
		for index, record in enumerate(self._load()):
			if record.id == record_id:
				return index
		return None

	def list_all(self) -> list[DurableRecord]:
		return list(self._load())

	def get(self, record_id: str) -> Optional[DurableRecord]:
		index = self._index(record_id)
		return None if index is None else self._load()[index]

	def contains(self, tracking_number: str) -> bool:
		"""Whether `tracking_number` is already tracked (verbatim)."""
		return any(record.tracking_number == tracking_number for record in self._load())

	def create(self, tracking_number: str, notes: str = '') -> Optional[DurableRecord]:
		"""Add a new record, None if `tracking_number` is already tracked."""
		if self.contains(tracking_number):
			return None

		records = self._load()
		existing_ids = {record.id for record in records}
		record_id = self._id_factory()
		while record_id in existing_ids:
			record_id = self._id_factory()

		record = DurableRecord(
			id=record_id,
			tracking_number=tracking_number,
			added_date=self._clock(),
			notes=notes or '',
		)
		records.append(record)
		self._save()
		return record

	def update(self, record_id: str, patch: Mapping) -> Optional[DurableRecord]:
		"""Apply `patch` (`notes`, `is_completed`), None for unknown id.

		Completion flag and date always change together. Completing an
		already completed record keeps its original date.
		"""
		patch = PATCH_SCHEMA(dict(patch))
		index = self._index(record_id)
		if index is None:
			return None

		records = self._load()
		record = records[index]
		changes = {}
		if 'notes' in patch:
			changes['notes'] = patch['notes']
		if 'is_completed' in patch:
			if patch['is_completed']:
				changes['is_completed'] = True
				changes['completed_date'] = record.completed_date if record.is_completed else self._clock()
			else:
				changes['is_completed'] = False
				changes['completed_date'] = None

		record = dataclasses.replace(record, **changes)
		records[index] = record
		self._save()
		return record

	def delete(self, record_id: str) -> bool:
		index = self._index(record_id)
		if index is None:
			return False

		del self._load()[index]
		self._save()
		self._cache.delete(record_id)
		return True

	def delete_many(self, record_ids) -> int:
		"""Delete several records with a single write."""
		record_ids = set(record_ids)
		records = self._load()
		kept = [record for record in records if record.id not in record_ids]
		removed = len(records) - len(kept)
		if removed:
			self._records = kept
			self._save()
			for record_id in record_ids:
				self._cache.delete(record_id)
		return removed

	def clear(self):
		self._records = []
		self._keyspace.remove()
		self._cache.clear()
