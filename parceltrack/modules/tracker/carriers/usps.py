# -*- coding: utf-8 -*-
"""USPS tracking number formats.

These are the broadest patterns of the table (any 22 digits with a 90-95
prefix), so USPS must stay last in the classifier priority.
"""
from .common import Carrier, compile_patterns

CARRIER = Carrier(
	name='USPS',
	code='usps',
	url_template='https://tools.usps.com/go/TrackConfirmAction?tLabels={trackingNumber}',
	patterns=compile_patterns(
		r'E[A-Z]\d{9}[A-Z]{2}',  # Priority Mail Express
		r'9[0-5]\d{20}',  # Priority Mail and friends
		r'82\d{8}',
		r'[A-Z]{2}\d{9}[A-Z]{2}',  # International
	)
)
