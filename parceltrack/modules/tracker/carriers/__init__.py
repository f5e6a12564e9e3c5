# -*- coding: utf-8 -*-
"""Static carrier table.

Ordered by classification priority: most specific first, USPS last.
"""
from . import dhl, fedex, ups, usps
from .common import Carrier, CarrierTrackingError

CARRIERS: tuple[Carrier, ...] = (
	ups.CARRIER,
	fedex.CARRIER,
	dhl.CARRIER,
	usps.CARRIER,
)

__all__ = ('CARRIERS', 'Carrier', 'CarrierTrackingError')
