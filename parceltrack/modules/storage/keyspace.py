# -*- coding: utf-8 -*-
"""Named persistent keyspaces holding whole-collection JSON blobs.

Every store owns exactly one keyspace and always reads/writes the whole
collection. Writes are small and infrequent, so there is no partial-write
protocol.
"""
from contextlib import suppress
import copy
import json
import logging
import os
from pathlib import Path
import tempfile
from typing import Any, Callable, Optional, Protocol

import voluptuous as vlps

logger = logging.getLogger(__name__)


class Keyspace(Protocol):
	name: str

	def load(self) -> Optional[Any]:
		...

	def save(self, value: Any) -> None:
		...

	def remove(self) -> None:
		...


class MemoryKeyspace:
	"""Keyspace living in process memory only."""

	def __init__(self, name: str, value: Any = None):
		self.name = name
		self._value = copy.deepcopy(value)

	def load(self) -> Optional[Any]:
		return copy.deepcopy(self._value)

	def save(self, value: Any) -> None:
		self._value = copy.deepcopy(value)

	def remove(self) -> None:
		self._value = None


class JsonFileKeyspace:
	"""Keyspace stored as `<directory>/<name>.json`.

	Unparseable files are reported and treated as empty; the caller decides
	what "empty" means for its collection.
	"""

	def __init__(self, directory: os.PathLike, name: str):
		self.name = name
		self.path = Path(directory) / f'{name}.json'

	def load(self) -> Optional[Any]:
		try:
			with open(self.path, encoding='utf-8') as file:
				return json.load(file)
		except FileNotFoundError:
			return None
		except (OSError, ValueError) as e:
			logger.warning('Keyspace %r is unreadable, treating it as empty: %s', self.name, e)
			return None

	def save(self, value: Any) -> None:
		self.path.parent.mkdir(parents=True, exist_ok=True)
		# Write next to the target and swap, so a crash never leaves half a blob.
		fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f'.{self.name}.', suffix='.tmp')
		try:
			with os.fdopen(fd, 'w', encoding='utf-8') as file:
				json.dump(value, file, separators=(',', ':'))
			os.replace(tmp_path, self.path)
		except BaseException:
			with suppress(OSError):
				os.unlink(tmp_path)
			raise

	def remove(self) -> None:
		with suppress(OSError):
			self.path.unlink()


def load_validated(keyspace: Keyspace, schema: vlps.Schema, default: Callable[[], Any]) -> Any:
	"""Load `keyspace` and validate it with `schema`.

	Missing, corrupted or schema-invalid content yields `default()`.
	"""
	raw = keyspace.load()
	if raw is None:
		return default()

	try:
		return schema(raw)
	except vlps.Invalid as e:
		logger.warning('Keyspace %r has invalid content, treating it as empty: %s', keyspace.name, e)
		return default()
