# -*- coding: utf-8 -*-
"""User settings keyspace.
"""
import dataclasses

import voluptuous as vlps

from .keyspace import Keyspace, load_validated

_SETTINGS_SCHEMA = vlps.Schema({
	vlps.Optional('showCompleted', default=False): bool,
}, extra=vlps.REMOVE_EXTRA)


@dataclasses.dataclass(frozen=True)
class Settings:
	show_completed: bool = False


class SettingsStore:
	def __init__(self, keyspace: Keyspace):
		self._keyspace = keyspace

	def get(self) -> Settings:
		data = load_validated(self._keyspace, _SETTINGS_SCHEMA, dict)
		return Settings(show_completed=data.get('showCompleted', False))

	def save(self, settings: Settings):
		self._keyspace.save({'showCompleted': settings.show_completed})

	def clear(self):
		self._keyspace.remove()
