# -*- coding: utf-8 -*-
"""Product policy constants, configurable through environment.
"""
import dataclasses
import datetime

from dateutil.relativedelta import relativedelta

from parceltrack.environs import env


@dataclasses.dataclass(frozen=True)
class CompletionPolicy:
	# Delivered packages count as completed this long after delivery.
	auto_complete_after: datetime.timedelta = datetime.timedelta(days=7)
	# Manually completed packages are purged this long after completion.
	retention: relativedelta = relativedelta(months=3)

	@classmethod
	def from_env(cls) -> 'CompletionPolicy':
		return cls(
			auto_complete_after=datetime.timedelta(days=env.AUTO_COMPLETE_DAYS),
			retention=relativedelta(months=env.RETENTION_MONTHS),
		)
