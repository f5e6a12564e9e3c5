# -*- coding: utf-8 -*-
"""Common module for all handlers in parceltrack.api, providing a BaseHandler
class that all handlers should inherit from as well as ApplicationError class.
"""
from contextlib import suppress
import dataclasses
import datetime
import enum
import json
from typing import Optional

from tornado import escape
import tornado.web
import voluptuous as vlps

from parceltrack.modules.tracker.tracker import PackageTracker


__all__ = ('ApplicationError', 'BaseHandler')


class ApplicationError(tornado.web.HTTPError):
	"""An override of a standard tornado HTTPError class for custom handling."""

	def __init__(self, status_code: int, message: str, *args, **kwargs):
		self.message = message
		super().__init__(status_code, *args, reason=message, **kwargs)


class WideJSONEncoder(json.JSONEncoder):
	"""Custom json encoder: allows to handle:
	 - objects with as_dict() (hydrated views)
	 - dataclasses
	 - date/datetime (ISO-8601)
	 - enums (by value)
	"""
	def default(self, obj):
		as_dict = getattr(obj, 'as_dict', None)
		if callable(as_dict):
			return as_dict()

		if dataclasses.is_dataclass(obj):
			# If somehow `obj` is not an instance, but dataclass itself,
			# asdict(obj) will raise TypeError
			with suppress(TypeError):
				return dataclasses.asdict(obj)

		if isinstance(obj, (datetime.date, datetime.datetime)):
			return obj.isoformat()

		if isinstance(obj, enum.Enum):
			return obj.value

		return super().default(obj)


# pylint: disable=abstract-method
class BaseHandler(tornado.web.RequestHandler):
	"""Base API class for all endpoints.

	Inherit from this if you want to create a new handler. The package
	tracker service is injected through handler kwargs in the routing table.
	"""
	def initialize(self, tracker: Optional[PackageTracker] = None):  # pylint: disable=arguments-differ
		self.tracker = tracker

	def set_default_headers(self):
		self.set_header('Access-Control-Allow-Origin', '*')
		self.set_header('Access-Control-Allow-Credentials', 'true')
		self.set_header('Access-Control-Allow-Methods', 'GET, POST, PUT, PATCH, DELETE, OPTIONS')
		self.set_header(
			'Access-Control-Allow-Headers',
			'Content-Type, Accept-Version, Authorization, CrossDomain, WithCredentials'
		)

	def options(self, *args, **kwargs):  # pylint: disable=arguments-differ
		"""All OPTIONS requests are ignored with silent OK by default."""
		self.finish()

	def write(self, chunk):
		"""Overload of Tornado RequestHandler.write().

		Dicts and lists are serialized with WideJSONEncoder, so views, dates
		and enums can be written directly.
		"""
		if isinstance(chunk, (dict, list)):
			chunk = json.dumps(
				chunk,
				cls=WideJSONEncoder,
				separators=(',', ':')
			).replace("</", "<\\/")

			self.set_header("Content-Type", "application/json; charset=UTF-8")

		super().write(chunk)

	def write_error(self, status_code, **kwargs):
		"""Send error response to client based on HTTPError-derived exception.

		NOTE:
		This should not be called directly.

		Allows to easily report errors via ApplicationError, specifying desired
		code and message.
		"""
		try:
			message = kwargs["exc_info"][1].message
		except (KeyError, IndexError, AttributeError):
			message = self._reason

		self.set_status(status_code)
		self.finish({'message': message})

	def parse_json(self, json_: str = None):
		"""Parses data from json: either given string or self.request.body."""
		if not json_:
			json_ = self.request.body

		try:
			request = escape.json_decode(json_)
		except ValueError as e:
			raise ApplicationError(status_code=400, message="Bad JSON in request body") from e

		return request

	def validate(
		self,
		schema: vlps.Schema,
		data=None,
		http_error_code: int = 400,
		custom_message: str = None
	):
		"""Validates `data` according to Voluptuous `schema`.

		If `data` is None then request body will be used.
		New constructed object will be returned: `schema` may contain
		transform instructions.

		In case of validation error ApplicationError with given error_code
		will be raised with given message or validator message by default.
		"""
		if not isinstance(http_error_code, int):
			raise TypeError("http_error_code should be integer")

		if http_error_code < 400 or http_error_code >= 600:
			raise ValueError("http_error_code should be in range [400, 600)")

		if data is None:
			data = self.parse_json()

		try:
			data = schema(data)
		except vlps.Invalid as e:
			message = str(e) if custom_message is None else custom_message
			raise ApplicationError(
				status_code=http_error_code,
				message=message
			) from e

		return data

	def validate_query_string(self, schema: vlps.Schema):
		"""Validate GET request args with Voluptuous.

		All query-string args zipped into dict which then validated by specified
		voluptuous schema.
		Don't forget to use Coerces in your schema, because all GET-request
		args are strings.
		"""
		return self.validate(
			schema,
			{k: self.get_argument(k) for k in self.request.arguments}
		)
