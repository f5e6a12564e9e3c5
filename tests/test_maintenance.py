# -*- coding: utf-8 -*-
from __future__ import annotations

import datetime

from dateutil.relativedelta import relativedelta

from conftest import FakeClock
from parceltrack.modules.policy import CompletionPolicy
from parceltrack.modules.storage import (
	CacheEntry,
	DurableRecordStore,
	MemoryKeyspace,
	StatusCache,
	TrackingStatus,
)
from parceltrack.modules.storage.maintenance import migrate_legacy_records, sweep_retention


def test_sweep_removes_old_completed(store: DurableRecordStore, cache: StatusCache, clock: FakeClock) -> None:
	old = store.create('9405536106193298175824')
	store.update(old.id, {'is_completed': True})
	cache.set(old.id, CacheEntry(status=TrackingStatus.DELIVERED, status_description='x', cached_at=clock()))
	recent = store.create('1Z12345E0205271688')
	active = store.create('T1234567890')

	clock.advance(days=60)
	store.update(recent.id, {'is_completed': True})
	clock.now += relativedelta(months=2)

	removed = sweep_retention(store, CompletionPolicy(), clock())

	assert removed == [old.id]
	assert [record.id for record in store.list_all()] == [recent.id, active.id]
	assert cache.get(old.id) is None


def test_sweep_keeps_reopened(store: DurableRecordStore, clock: FakeClock) -> None:
	record = store.create('9405536106193298175824')
	store.update(record.id, {'is_completed': True})
	store.update(record.id, {'is_completed': False})
	clock.now += relativedelta(months=6)

	assert sweep_retention(store, CompletionPolicy(), clock()) == []
	assert len(store.list_all()) == 1


def test_migrate_legacy_records(clock: FakeClock) -> None:
	records_keyspace = MemoryKeyspace('packages', [
		{
			'id': 'a',
			'trackingNumber': '9405536106193298175824',
			'addedDate': '2024-12-30T00:00:00Z',
			'carrier': {'code': 'usps', 'name': 'USPS'},
			'status': 'in_transit',
			'statusDescription': 'Package is in transit',
			'location': 'Distribution Center',
			'notes': 'gift',
		},
		{
			'id': 'b',
			'trackingNumber': '1Z12345E0205271688',
			'carrier': 'ups',
			'status': 'unknown',
		},
		{'trackingNumber': 'no id'},
	])
	cache = StatusCache(MemoryKeyspace('cache'), clock=clock)

	assert migrate_legacy_records(records_keyspace, cache, clock) == 2

	store = DurableRecordStore(records_keyspace, cache, clock=clock)
	first, second = store.list_all()
	assert (first.id, first.notes) == ('a', 'gift')
	assert second.added_date == clock()
	assert all('carrier' not in raw for raw in records_keyspace.load())

	entry = cache.get('a')
	assert entry.status is TrackingStatus.IN_TRANSIT
	assert entry.location == 'Distribution Center'
	assert entry.cached_at == clock()
	assert cache.get('b') is None


def test_migrate_minimal_is_noop(clock: FakeClock) -> None:
	minimal = [{
		'id': 'a',
		'trackingNumber': '9405536106193298175824',
		'addedDate': '2025-01-01T00:00:00Z',
		'notes': '',
		'isCompleted': None,
		'completedDate': None,
	}]
	keyspace = MemoryKeyspace('packages', minimal)

	assert migrate_legacy_records(keyspace, StatusCache(MemoryKeyspace('cache'), clock=clock), clock) == 0
	assert keyspace.load() == minimal


def test_migrate_empty(clock: FakeClock) -> None:
	cache = StatusCache(MemoryKeyspace('cache'), clock=clock)
	assert migrate_legacy_records(MemoryKeyspace('packages'), cache, clock) == 0
	assert migrate_legacy_records(MemoryKeyspace('packages', 'garbage'), cache, clock) == 0
