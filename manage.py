#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Main module of the program, executable."""
import asyncio
import logging
import os.path

from tornado.options import define, options, parse_command_line
import tornado.web

from parceltrack import api
from parceltrack.environs import env
from parceltrack.modules.tracker.tracker import PackageTracker


define("port", default=env.PORT, help="run on the given port", type=int)

_PACKAGE_ID = r"([0-9A-Za-z]+)"


def make_handlers(tracker: PackageTracker) -> list:
	deps = {"tracker": tracker}
	# pylint: disable=bad-whitespace
	return [
		(r"/api/healthcheck",                             api.healthcheck.HealthCheckHandler,           deps),

		(r"/api/carriers",                                api.carriers.CarriersHandler,                 deps),
		(r"/api/carriers/validate",                       api.carriers.ValidateTrackingNumberHandler,   deps),

		(r"/api/packages",                                api.packages.PackagesHandler,                 deps),
		(r"/api/packages/refresh",                        api.packages.PackagesRefreshHandler,          deps),
		(rf"/api/packages/{_PACKAGE_ID}",                 api.packages.PackageHandler,                  deps),
		(rf"/api/packages/{_PACKAGE_ID}/refresh",         api.packages.PackageRefreshHandler,           deps),

		(r"/api/settings",                                api.settings.SettingsHandler,                 deps),
	]
	# pylint: enable=bad-whitespace


def app_settings() -> dict:
	"""Tornado application settings: debug mode outside production."""
	return {"debug": not env.PRODUCTION}


class Application(tornado.web.Application):
	"""Main application class."""
	def __init__(self, tracker: PackageTracker, **settings):
		# Read app version.
		workdir = os.path.dirname(os.path.realpath(__file__))
		try:
			with open(os.path.join(workdir, 'VERSION')) as file:
				self.version = file.read().strip()
		except FileNotFoundError:
			self.version = 'unknown'

		self.tracker = tracker
		super().__init__(make_handlers(tracker), **settings)


async def main():
	"""Main function of the program."""
	options.logging = env.LOG_LEVEL.lower()
	parse_command_line()

	tracker = PackageTracker.from_env()
	tracker.startup()

	server = Application(tracker, **app_settings())
	server.listen(options.port)
	logging.getLogger(__name__).info(
		'Package tracker running on port %d (%s)',
		options.port,
		'relay ' + env.TRACKING_RELAY_URL if env.TRACKING_RELAY_URL else 'standalone'
	)
	await asyncio.Event().wait()


if __name__ == "__main__":
	asyncio.run(main())
