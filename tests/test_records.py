# -*- coding: utf-8 -*-
from __future__ import annotations

import datetime

import pytest
import voluptuous as vlps

from conftest import START, FakeClock
from parceltrack.modules.storage import (
	CacheEntry,
	DurableRecordStore,
	MemoryKeyspace,
	StatusCache,
	TrackingStatus,
)


def _entry(clock: FakeClock) -> CacheEntry:
	return CacheEntry(status=TrackingStatus.IN_TRANSIT, status_description='On its way', cached_at=clock())


def test_create_minimal_record(store: DurableRecordStore) -> None:
	record = store.create('9405536106193298175824')

	assert record.tracking_number == '9405536106193298175824'
	assert record.added_date == START
	assert record.notes == ''
	assert record.is_completed is None
	assert record.completed_date is None
	assert store.list_all() == [record]


def test_persisted_shape_has_no_carrier(cache: StatusCache, clock: FakeClock) -> None:
	keyspace = MemoryKeyspace('packages')
	store = DurableRecordStore(keyspace, cache, clock=clock)
	store.create('9405536106193298175824', notes='Birthday gift')

	(raw,) = keyspace.load()
	assert set(raw) == {'id', 'trackingNumber', 'addedDate', 'notes', 'isCompleted', 'completedDate'}
	assert raw['notes'] == 'Birthday gift'


def test_records_survive_reload(cache: StatusCache, clock: FakeClock) -> None:
	keyspace = MemoryKeyspace('packages')
	created = DurableRecordStore(keyspace, cache, clock=clock).create('1Z12345E0205271688')

	reloaded = DurableRecordStore(keyspace, cache, clock=clock)
	assert reloaded.list_all() == [created]


def test_duplicate_rejected(store: DurableRecordStore) -> None:
	assert store.create('1Z12345E0205271688') is not None
	assert store.contains('1Z12345E0205271688')
	assert store.create('1Z12345E0205271688') is None
	assert len(store.list_all()) == 1


def test_ids_unique(cache: StatusCache, clock: FakeClock) -> None:
	ids = iter(['same', 'same', 'other'])
	store = DurableRecordStore(MemoryKeyspace('packages'), cache, clock=clock, id_factory=lambda: next(ids))

	first = store.create('1Z12345E0205271688')
	second = store.create('9405536106193298175824')

	assert (first.id, second.id) == ('same', 'other')


def test_update_notes(store: DurableRecordStore) -> None:
	record = store.create('9405536106193298175824', notes='Birthday gift for mom')

	updated = store.update(record.id, {'notes': 'Updated: urgent!'})
	assert updated.notes == 'Updated: urgent!'
	assert store.update(record.id, {'notes': ''}).notes == ''
	assert store.get(record.id).notes == ''


def test_completion_sets_flag_and_date_together(store: DurableRecordStore, clock: FakeClock) -> None:
	record = store.create('9405536106193298175824')
	clock.advance(days=1)

	completed = store.update(record.id, {'is_completed': True})
	assert completed.is_completed is True
	assert completed.completed_date == clock()

	reopened = store.update(record.id, {'is_completed': False})
	assert reopened.is_completed is False
	assert reopened.completed_date is None


def test_completion_idempotent(store: DurableRecordStore, clock: FakeClock) -> None:
	record = store.create('9405536106193298175824')

	first = store.update(record.id, {'is_completed': True})
	clock.advance(hours=3)
	second = store.update(record.id, {'is_completed': True})

	assert first.completed_date == second.completed_date


def test_update_unknown_id(store: DurableRecordStore) -> None:
	assert store.update('missing', {'notes': 'x'}) is None


def test_update_rejects_unknown_fields(store: DurableRecordStore) -> None:
	record = store.create('9405536106193298175824')
	with pytest.raises(vlps.Invalid):
		store.update(record.id, {'tracking_number': 'other'})


def test_delete_cascades_to_cache(store: DurableRecordStore, cache: StatusCache, clock: FakeClock) -> None:
	record = store.create('9405536106193298175824')
	cache.set(record.id, _entry(clock))

	assert store.delete(record.id)
	assert store.get(record.id) is None
	assert cache.get(record.id) is None
	assert not store.delete(record.id)


def test_clear(store: DurableRecordStore, cache: StatusCache, clock: FakeClock) -> None:
	record = store.create('9405536106193298175824')
	cache.set(record.id, _entry(clock))

	store.clear()
	assert store.list_all() == []
	assert cache.get(record.id) is None


def test_corrupted_keyspace_is_empty(cache: StatusCache, clock: FakeClock) -> None:
	store = DurableRecordStore(MemoryKeyspace('packages', {'not': 'a list'}), cache, clock=clock)
	assert store.list_all() == []
	assert store.create('9405536106193298175824') is not None


def test_invalid_items_dropped(cache: StatusCache, clock: FakeClock) -> None:
	keyspace = MemoryKeyspace('packages', [
		{'id': 'a', 'trackingNumber': '9405536106193298175824', 'addedDate': '2025-01-01T00:00:00+00:00'},
		{'id': 'b', 'addedDate': 'yesterday-ish'},
		{'id': 'a', 'trackingNumber': '1Z12345E0205271688', 'addedDate': '2025-01-01T00:00:00+00:00'},
	])
	store = DurableRecordStore(keyspace, cache, clock=clock)

	assert [record.id for record in store.list_all()] == ['a']


def test_non_object_items_dropped_without_losing_others(cache: StatusCache, clock: FakeClock) -> None:
	keyspace = MemoryKeyspace('packages', [
		{'id': 'a', 'trackingNumber': '9405536106193298175824', 'addedDate': '2025-01-01T00:00:00+00:00'},
		None,
		'1Z12345E0205271688',
	])
	store = DurableRecordStore(keyspace, cache, clock=clock)

	assert [record.id for record in store.list_all()] == ['a']

	created = store.create('1ZH764V40332521616')
	assert [item['id'] for item in keyspace.load()] == ['a', created.id]


def test_completed_without_date_is_repaired(cache: StatusCache, clock: FakeClock) -> None:
	keyspace = MemoryKeyspace('packages', [{
		'id': 'a',
		'trackingNumber': '9405536106193298175824',
		'addedDate': '2025-01-01T00:00:00Z',
		'isCompleted': True,
		'completedDate': None,
	}, {
		'id': 'b',
		'trackingNumber': '1Z12345E0205271688',
		'addedDate': '2025-01-01T00:00:00Z',
		'isCompleted': False,
		'completedDate': '2025-01-02T00:00:00Z',
	}])
	first, second = DurableRecordStore(keyspace, cache, clock=clock).list_all()

	assert first.completed_date == datetime.datetime(2025, 1, 1, tzinfo=datetime.timezone.utc)
	assert second.completed_date is None
