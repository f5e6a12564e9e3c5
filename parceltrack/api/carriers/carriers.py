# -*- coding: utf-8 -*-
"""Module with handlers describing known carriers and checking tracking
numbers against them.
"""
from parceltrack.base_handler import BaseHandler
from parceltrack.modules.tracker.carriers import Carrier
from parceltrack.validation.packages import VALIDATE_REQUEST_SCHEMA


def _carrier_info(carrier: Carrier) -> dict:
	return {'name': carrier.name, 'code': carrier.code}


class CarriersHandler(BaseHandler):
	def get(self):
		"""List carriers in classification priority order."""
		classifier = self.tracker.classifier
		self.write({
			'carriers': [_carrier_info(carrier) for carrier in classifier.carriers],
			'stats': classifier.stats(),
		})


class ValidateTrackingNumberHandler(BaseHandler):
	def get(self):
		"""Check a single tracking number without storing it."""
		request = self.validate_query_string(VALIDATE_REQUEST_SCHEMA)
		classifier = self.tracker.classifier
		validation = classifier.validate(request['tracking_number'])

		self.write({
			'valid': validation.valid,
			'carrier': _carrier_info(validation.carrier) if validation.carrier else None,
			'tracking_url': classifier.tracking_url(request['tracking_number']) if validation.valid else '',
			'error': validation.error,
		})
