# -*- coding: utf-8 -*-
"""Module with health check handler, responds with availability and mode
of the service to any GET request.
"""
from parceltrack.base_handler import BaseHandler
from parceltrack.modules.dates import utcnow


class HealthCheckHandler(BaseHandler):
	"""Can be used to health-check requests and detect the tracking relay."""
	async def get(self):
		relay_available = await self.tracker.client.ping()
		self.write({
			'available': True,
			'timestamp': utcnow(),
			'version': self.application.version,
			'mode': 'client-server' if relay_available else 'standalone',
		})
