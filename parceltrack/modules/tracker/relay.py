# -*- coding: utf-8 -*-
"""Client of the tracking relay: the only suspending operation of the system.

The relay (a separate backend) talks to carrier APIs and answers with an
already normalized status:

	POST {base_url}/api/track {"trackingNumber": ..., "carrier": ...}
	-> {"success": true, "data": {"status": ..., "message": ..., ...}}

Anything else (transport error, non-success response, `success: false`,
unexpected body) is a TrackingFetchError. Callers turn it into an
"unavailable" status, it never reaches a display layer.
"""
import dataclasses
import datetime
import json
import logging
from typing import Optional, Protocol

from tornado.httpclient import AsyncHTTPClient, HTTPError, HTTPRequest
import voluptuous as vlps

from parceltrack.modules.dates import parse_datetime
from parceltrack.modules.storage import TrackingStatus
from .carriers import CarrierTrackingError

logger = logging.getLogger(__name__)


class TrackingFetchError(CarrierTrackingError):
	pass


@dataclasses.dataclass(frozen=True)
class NormalizedStatus:
	status: TrackingStatus
	status_description: str
	location: Optional[str] = None
	delivered_date: Optional[datetime.datetime] = None
	source: Optional[str] = None
	data_unavailable: bool = False


class TrackingClient(Protocol):
	async def fetch(self, tracking_number: str, carrier_code: str) -> NormalizedStatus:
		...

	async def ping(self) -> bool:
		...


# Expected relay response. Let's make it explicit: describe only keys we are using.
_STATUS_SCHEMA = vlps.Schema({
	vlps.Required('status'): TrackingStatus.normalize,
	vlps.Optional('message'): vlps.Maybe(str),
	vlps.Optional('statusDescription'): vlps.Maybe(str),
	vlps.Optional('location'): vlps.Maybe(str),
	vlps.Optional('deliveredDate'): vlps.Maybe(parse_datetime),
	vlps.Optional('source'): vlps.Maybe(str),
	vlps.Optional('dataUnavailable', default=False): bool,
}, extra=vlps.REMOVE_EXTRA)

_RESPONSE_SCHEMA = vlps.Schema({
	vlps.Required('success'): bool,
	vlps.Optional('data'): vlps.Maybe(dict),
	vlps.Optional('error'): vlps.Maybe(str),
}, extra=vlps.REMOVE_EXTRA)

_PING_SCHEMA = vlps.Schema({vlps.Required('available'): bool}, extra=vlps.REMOVE_EXTRA)


def parse_relay_status(data: dict, default_source: str = 'Backend API') -> NormalizedStatus:
	"""Build NormalizedStatus from the `data` part of a relay response."""
	try:
		data = _STATUS_SCHEMA(data)
	except vlps.Invalid as e:
		raise TrackingFetchError('Invalid response from tracking relay') from e

	status = data['status']
	return NormalizedStatus(
		status=status,
		status_description=data.get('message') or data.get('statusDescription') or status.value,
		location=data.get('location'),
		delivered_date=data.get('deliveredDate'),
		source=data.get('source') or default_source,
		data_unavailable=data['dataUnavailable'],
	)


class RelayTrackingClient:
	"""TrackingClient backed by the HTTP tracking relay."""

	def __init__(
		self,
		base_url: str,
		*,
		timeout: float = 10,
		http_client: Optional[AsyncHTTPClient] = None
	):
		self.base_url = base_url.rstrip('/')
		self.timeout = timeout
		self._http_client = http_client

	@property
	def http_client(self) -> AsyncHTTPClient:
		# AsyncHTTPClient is bound to the running loop, create it lazily.
		if self._http_client is None:
			self._http_client = AsyncHTTPClient()
		return self._http_client

	async def _request(self, endpoint: str, method: str = 'GET', body: Optional[dict] = None) -> dict:
		request = HTTPRequest(
			url=self.base_url + endpoint,
			method=method,
			headers={'Content-Type': 'application/json'},
			body=json.dumps(body, separators=(',', ':')) if body is not None else None,
			request_timeout=self.timeout,
		)
		# ValueError comes from a malformed relay URL (no or unsupported scheme).
		try:
			response = await self.http_client.fetch(request)
		except (HTTPError, OSError, ValueError) as e:
			raise TrackingFetchError('Can\'t get info from tracking relay') from e

		try:
			return json.loads(response.body.decode())
		except (UnicodeDecodeError, ValueError) as e:
			raise TrackingFetchError('Invalid response from tracking relay') from e

	async def fetch(self, tracking_number: str, carrier_code: str) -> NormalizedStatus:
		"""Get normalized tracking status of `tracking_number`.

		TrackingFetchError will be raised in case of any failure.
		"""
		response_data = await self._request(
			'/api/track',
			method='POST',
			body={'trackingNumber': tracking_number, 'carrier': carrier_code}
		)
		try:
			response_data = _RESPONSE_SCHEMA(response_data)
		except vlps.Invalid as e:
			raise TrackingFetchError('Invalid response from tracking relay') from e

		if not response_data['success'] or not response_data.get('data'):
			raise TrackingFetchError(response_data.get('error') or 'No tracking data available')

		return parse_relay_status(response_data['data'])

	async def ping(self) -> bool:
		"""Whether the relay is reachable and reports itself available."""
		try:
			data = _PING_SCHEMA(await self._request('/api/track/ping'))
		except (TrackingFetchError, vlps.Invalid) as e:
			logger.info('Tracking relay is not available: %s', e)
			return False
		return data['available']


class OfflineTrackingClient:
	"""TrackingClient for standalone mode: there is nobody to ask."""

	async def fetch(self, tracking_number: str, carrier_code: str) -> NormalizedStatus:
		raise TrackingFetchError('Tracking relay is not configured')

	async def ping(self) -> bool:
		return False
