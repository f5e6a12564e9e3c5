# -*- coding: utf-8 -*-
"""Module with handlers for tracked packages.

Every response carries hydrated views: stored record + fresh cached status
+ carrier derived from the tracking number.
"""
from tornado.ioloop import IOLoop

from parceltrack.base_handler import BaseHandler, ApplicationError
from parceltrack.validation.packages import (
	ADD_PACKAGES_SCHEMA,
	LIST_PACKAGES_SCHEMA,
	UPDATE_PACKAGE_SCHEMA,
)


class PackagesHandler(BaseHandler):
	def get(self):
		"""List packages. Completed ones are hidden unless asked or set so."""
		request = self.validate_query_string(LIST_PACKAGES_SCHEMA)
		packages = self.tracker.list_packages(show_completed=request.get('show_completed'))
		self.write({'packages': packages})

	def post(self):
		"""Add packages found in pasted free text and track them in background."""
		request = self.validate(ADD_PACKAGES_SCHEMA)
		result = self.tracker.add_packages(request['text'], request['notes'])

		if not result.added and not result.duplicates:
			raise ApplicationError(status_code=400, message='No valid tracking numbers found')
		if not result.added:
			raise ApplicationError(status_code=409, message='All tracking numbers are already being tracked')

		# Fire and forget: the response doesn't wait for carriers.
		IOLoop.current().spawn_callback(
			self.tracker.refresh_packages,
			[view.id for view in result.added]
		)

		self.set_status(201)
		self.write({'packages': result.added, 'duplicates': result.duplicates})

	def delete(self):
		"""Clear all data."""
		self.tracker.clear_all()
		self.set_status(204)
		self.finish()


class PackagesRefreshHandler(BaseHandler):
	async def post(self):
		"""Refresh all active packages as one batch."""
		if self.tracker.batch_in_flight:
			raise ApplicationError(status_code=409, message='Refresh is already in progress')
		if not self.tracker.list_packages(show_completed=False):
			raise ApplicationError(status_code=404, message='No active packages to refresh')

		packages = await self.tracker.refresh_all()
		if packages is None:
			raise ApplicationError(status_code=409, message='Refresh is already in progress')

		self.write({'packages': packages})


class PackageHandler(BaseHandler):
	def _not_found(self, package_id: str) -> ApplicationError:
		return ApplicationError(status_code=404, message=f'Package {package_id} not found')

	def get(self, package_id: str):
		package = self.tracker.get_package(package_id)
		if package is None:
			raise self._not_found(package_id)
		self.write(package.as_dict())

	def patch(self, package_id: str):
		"""Update notes and/or manual completion flag."""
		request = self.validate(UPDATE_PACKAGE_SCHEMA)
		package = self.tracker.update_package(package_id, **request)
		if package is None:
			raise self._not_found(package_id)
		self.write(package.as_dict())

	def delete(self, package_id: str):
		if not self.tracker.remove_package(package_id):
			raise self._not_found(package_id)
		self.set_status(204)
		self.finish()


class PackageRefreshHandler(BaseHandler):
	async def post(self, package_id: str):
		"""Refresh a single package, not blocked by a running batch."""
		package = await self.tracker.refresh_package(package_id)
		if package is None:
			raise ApplicationError(status_code=404, message=f'Package {package_id} not found')
		self.write(package.as_dict())
