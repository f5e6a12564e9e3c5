# -*- coding: utf-8 -*-
"""Carrier classification by tracking number pattern.

Pattern spaces of different carriers overlap (12 digits could be UPS or
FedEx, 22 digits could be FedEx or USPS). Resolution is a fixed priority
list: carriers are tried in that order and the first match wins. Nothing
else (e.g. registration order) affects the result.
"""
import dataclasses
import re
from typing import Iterable, Optional

from .carriers import CARRIERS, Carrier

# Most specific first, broadest (USPS) last.
PRIORITY = ('ups', 'fedex', 'dhl', 'usps')

# For input validation.
TRACKING_NUMBER_MIN_LENGTH = 8
TRACKING_NUMBER_MAX_LENGTH = 35

_WHITESPACE_RE = re.compile(r'\s+')


def normalize_token(token: Optional[str]) -> str:
	"""Strip all whitespace and uppercase."""
	if not token:
		return ''
	return _WHITESPACE_RE.sub('', token).upper()


@dataclasses.dataclass(frozen=True)
class TrackingNumberValidation:
	valid: bool
	carrier: Optional[Carrier] = None
	error: Optional[str] = None


class CarrierClassifier:
	"""Resolves a token to at most one carrier."""

	def __init__(self, carriers: Iterable[Carrier] = CARRIERS, priority: tuple[str, ...] = PRIORITY):
		by_code: dict[str, Carrier] = {}
		for carrier in carriers:
			if carrier.code in by_code:
				raise ValueError(f'Duplicate carrier code: {carrier.code}')
			if carrier.code not in priority:
				raise ValueError(f'Carrier {carrier.code} has no classification priority')
			by_code[carrier.code] = carrier

		self._by_code = by_code
		self._ordered = tuple(by_code[code] for code in priority if code in by_code)

	@property
	def carriers(self) -> tuple[Carrier, ...]:
		"""Registered carriers in priority order."""
		return self._ordered

	def get_carrier(self, code: Optional[str]) -> Optional[Carrier]:
		return self._by_code.get(code) if code else None

	def classify(self, token: Optional[str]) -> Optional[Carrier]:
		"""Carrier of `token`, or None if no carrier recognizes it."""
		normalized = normalize_token(token)
		if not normalized:
			return None

		for carrier in self._ordered:
			if carrier.matches(normalized):
				return carrier

		return None

	def tracking_url(self, token: str) -> str:
		"""Carrier website URL for `token`, empty string for unknown carrier."""
		carrier = self.classify(token)
		return carrier.url_for(normalize_token(token)) if carrier else ''

	def validate(self, tracking_number: Optional[str]) -> TrackingNumberValidation:
		"""Check user input before it is stored."""
		normalized = normalize_token(tracking_number)
		if not normalized:
			return TrackingNumberValidation(valid=False, error='Tracking number is required')
		if len(normalized) < TRACKING_NUMBER_MIN_LENGTH:
			return TrackingNumberValidation(valid=False, error='Tracking number too short')
		if len(normalized) > TRACKING_NUMBER_MAX_LENGTH:
			return TrackingNumberValidation(valid=False, error='Tracking number too long')

		carrier = self.classify(normalized)
		if carrier is None:
			return TrackingNumberValidation(valid=False, error='Unknown tracking number format')

		return TrackingNumberValidation(valid=True, carrier=carrier)

	def stats(self) -> dict:
		return {
			'carriers_count': len(self._ordered),
			'carriers': [carrier.code for carrier in self._ordered],
		}
