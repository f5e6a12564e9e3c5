# -*- coding: utf-8 -*-
"""Startup maintenance passes: legacy format migration and retention sweep.

Both run once, synchronously, before the stores serve any request.
"""
import datetime
import logging

import voluptuous as vlps

from parceltrack.modules.dates import Clock, utcnow
from parceltrack.modules.policy import CompletionPolicy
from .cache import CacheEntry, StatusCache, TrackingStatus
from .keyspace import Keyspace
from .records import DurableRecordStore

logger = logging.getLogger(__name__)

MINIMAL_KEYS = frozenset(('id', 'trackingNumber', 'addedDate', 'notes', 'isCompleted', 'completedDate'))

# Status fields older releases stored inside the record itself.
_LEGACY_STATUS_KEYS = (
	'status', 'statusDescription', 'deliveredDate', 'location', 'source', 'dataUnavailable'
)


def migrate_legacy_records(keyspace: Keyspace, cache: StatusCache, clock: Clock = utcnow) -> int:
	"""Rewrite records of the old "fat" format into the minimal one.

	Tracking status found in a legacy record is moved to the status cache
	(with a fresh timestamp), the stored carrier is dropped. Entries without
	`id` or `trackingNumber` are discarded. Must run before the record store
	reads `keyspace` for the first time.

	Returns the number of migrated records.
	"""
	raw = keyspace.load()
	if not isinstance(raw, list) or not raw:
		return 0
	if all(isinstance(item, dict) and set(item) <= MINIMAL_KEYS for item in raw):
		return 0

	now = clock()
	migrated = []
	for item in raw:
		if not isinstance(item, dict) or not item.get('id') or not item.get('trackingNumber'):
			continue

		migrated.append({
			'id': item['id'],
			'trackingNumber': item['trackingNumber'],
			'addedDate': item.get('addedDate') or now.isoformat(),
			'notes': item.get('notes') or '',
			'isCompleted': item.get('isCompleted'),
			'completedDate': item.get('completedDate'),
		})

		status = TrackingStatus.normalize(item.get('status'))
		if status is TrackingStatus.UNKNOWN:
			continue
		legacy = {key: item[key] for key in _LEGACY_STATUS_KEYS if item.get(key) is not None}
		legacy['cachedAt'] = now.isoformat()
		try:
			cache.set(item['id'], CacheEntry.from_json(legacy))
		except vlps.Invalid as e:
			logger.warning('Legacy status of %r is not migrated: %s', item['id'], e)

	keyspace.save(migrated)
	logger.info('Migrated %d packages to minimal storage format', len(migrated))
	return len(migrated)


def sweep_retention(
	store: DurableRecordStore,
	policy: CompletionPolicy,
	now: datetime.datetime
) -> list[str]:
	"""Delete records manually completed longer than the retention window ago.

	Returns ids of deleted records. Their cache entries go with them.
	"""
	threshold = now - policy.retention
	expired = [
		record.id for record in store.list_all()
		if record.is_completed and record.completed_date is not None and record.completed_date < threshold
	]
	if expired:
		store.delete_many(expired)
		logger.info('Cleaned up %d old packages', len(expired))
	return expired
