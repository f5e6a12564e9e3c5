# -*- coding: utf-8 -*-
"""Hydration: durable record + fresh cache entry + classification -> view.

Views are derived on every read and never stored.
"""
import dataclasses
import datetime
from typing import Optional

from parceltrack.modules.dates import Clock, to_iso, utcnow
from parceltrack.modules.policy import CompletionPolicy
from parceltrack.modules.storage import CacheEntry, DurableRecord, DurableRecordStore, StatusCache, TrackingStatus
from .carriers import Carrier
from .classifier import CarrierClassifier, normalize_token

UNKNOWN_CARRIER_CODE = 'unknown'
UNKNOWN_CARRIER_NAME = 'Unknown'
NOT_CHECKED_DESCRIPTION = 'Not checked yet'


@dataclasses.dataclass(frozen=True)
class HydratedView:
	id: str
	tracking_number: str
	added_date: datetime.datetime
	notes: str
	carrier: str
	carrier_name: str
	tracking_url: str
	status: TrackingStatus
	status_description: str
	last_checked: Optional[datetime.datetime]
	location: Optional[str]
	delivered_date: Optional[datetime.datetime]
	source: Optional[str]
	data_unavailable: bool
	is_completed: bool
	completed_date: Optional[datetime.datetime]

	def as_dict(self) -> dict:
		"""JSON-friendly representation."""
		data = dataclasses.asdict(self)
		data['status'] = self.status.value
		for key in ('added_date', 'last_checked', 'delivered_date', 'completed_date'):
			data[key] = to_iso(data[key])
		return data


def effective_completion(
	record: DurableRecord,
	entry: Optional[CacheEntry],
	now: datetime.datetime,
	policy: CompletionPolicy
) -> tuple[bool, Optional[datetime.datetime]]:
	"""Completion flag and date of `record` as displayed.

	A flag set by the user wins. Otherwise a package delivered at least
	`policy.auto_complete_after` ago counts as completed since then.
	"""
	if record.is_completed is not None:
		return record.is_completed, record.completed_date

	if entry is None or entry.status is not TrackingStatus.DELIVERED:
		return False, None

	delivered_date = entry.delivered_date or entry.cached_at
	if now - delivered_date < policy.auto_complete_after:
		return False, None

	return True, delivered_date + policy.auto_complete_after


def compose_view(
	record: DurableRecord,
	carrier: Optional[Carrier],
	entry: Optional[CacheEntry],
	now: datetime.datetime,
	policy: CompletionPolicy
) -> HydratedView:
	"""Pure assembly of a view from already fetched parts."""
	is_completed, completed_date = effective_completion(record, entry, now, policy)

	if carrier is not None:
		carrier_code = carrier.code
		carrier_name = carrier.name
		tracking_url = carrier.url_for(normalize_token(record.tracking_number))
	else:
		carrier_code = UNKNOWN_CARRIER_CODE
		carrier_name = UNKNOWN_CARRIER_NAME
		tracking_url = ''

	return HydratedView(
		id=record.id,
		tracking_number=record.tracking_number,
		added_date=record.added_date,
		notes=record.notes,
		carrier=carrier_code,
		carrier_name=carrier_name,
		tracking_url=tracking_url,
		status=entry.status if entry else TrackingStatus.UNKNOWN,
		status_description=entry.status_description if entry else NOT_CHECKED_DESCRIPTION,
		last_checked=entry.cached_at if entry else None,
		location=entry.location if entry else None,
		delivered_date=entry.delivered_date if entry else None,
		source=entry.source if entry else None,
		data_unavailable=entry.data_unavailable if entry else False,
		is_completed=is_completed,
		completed_date=completed_date,
	)


class Hydrator:
	def __init__(
		self,
		classifier: CarrierClassifier,
		cache: StatusCache,
		*,
		policy: CompletionPolicy = CompletionPolicy(),
		clock: Optional[Clock] = None
	):
		self._classifier = classifier
		self._cache = cache
		self._policy = policy
		self._clock = clock or utcnow

	def hydrate(self, record: DurableRecord) -> HydratedView:
		carrier = self._classifier.classify(record.tracking_number)
		entry = self._cache.get(record.id)
		return compose_view(record, carrier, entry, self._clock(), self._policy)

	def hydrate_all(self, store: DurableRecordStore) -> list[HydratedView]:
		return [self.hydrate(record) for record in store.list_all()]
