# -*- coding: utf-8 -*-
"""Timestamp helpers: everything is stored and compared as aware UTC.
"""
import datetime
from typing import Callable, Optional

from dateutil import parser as date_parser

Clock = Callable[[], datetime.datetime]


def utcnow() -> datetime.datetime:
	return datetime.datetime.now(datetime.timezone.utc)


def to_iso(value: Optional[datetime.datetime]) -> Optional[str]:
	return value.isoformat() if value is not None else None


def parse_datetime(value) -> datetime.datetime:
	"""Parse ISO-8601 (or any dateutil-readable) timestamp into aware UTC.

	Naive timestamps are taken as UTC. Raises ValueError for garbage, so it
	can be used directly as a voluptuous validator.
	"""
	if isinstance(value, datetime.datetime):
		parsed = value
	elif isinstance(value, str) and value.strip():
		try:
			parsed = date_parser.parse(value)
		except (ValueError, OverflowError) as e:
			raise ValueError(f'Invalid timestamp: {value!r}') from e
	else:
		raise ValueError(f'Invalid timestamp: {value!r}')

	if parsed.tzinfo is None:
		return parsed.replace(tzinfo=datetime.timezone.utc)
	return parsed.astimezone(datetime.timezone.utc)
