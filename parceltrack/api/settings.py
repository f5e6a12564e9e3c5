# -*- coding: utf-8 -*-
"""Module with handler for user settings.
"""
import dataclasses

from parceltrack.base_handler import BaseHandler
from parceltrack.modules.storage import Settings
from parceltrack.validation.packages import SETTINGS_SCHEMA


class SettingsHandler(BaseHandler):
	def get(self):
		self.write(dataclasses.asdict(self.tracker.settings.get()))

	def put(self):
		request = self.validate(SETTINGS_SCHEMA)
		settings = self.tracker.save_settings(Settings(show_completed=request['show_completed']))
		self.write(dataclasses.asdict(settings))
