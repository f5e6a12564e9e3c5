# -*- coding: utf-8 -*-
"""Common carrier definitions shared by all carrier modules.

Separate file to avoid circular import between carrier modules and the
classifier.
"""
import dataclasses
import re
import urllib.parse

URL_PLACEHOLDER = '{trackingNumber}'


class CarrierTrackingError(Exception):
	"""Base class for all carrier tracking errors."""
	pass


@dataclasses.dataclass(frozen=True)
class Carrier:
	"""Immutable carrier description.

	`patterns` are matched against the whole normalized token, a carrier
	matches when at least one of them does.
	"""
	name: str
	code: str
	url_template: str
	patterns: tuple[re.Pattern, ...]

	def __post_init__(self):
		if self.url_template.count(URL_PLACEHOLDER) != 1:
			raise ValueError(f'{self.code}: url_template needs exactly one {URL_PLACEHOLDER}')

	def matches(self, token: str) -> bool:
		return any(pattern.fullmatch(token) for pattern in self.patterns)

	def url_for(self, token: str) -> str:
		"""Carrier website URL for `token` (URL-encoded before substitution)."""
		return self.url_template.replace(URL_PLACEHOLDER, urllib.parse.quote(token, safe=''))


def compile_patterns(*expressions: str) -> tuple[re.Pattern, ...]:
	return tuple(re.compile(expression) for expression in expressions)
