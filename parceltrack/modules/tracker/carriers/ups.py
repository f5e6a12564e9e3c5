# -*- coding: utf-8 -*-
"""UPS tracking number formats.
"""
from .common import Carrier, compile_patterns

CARRIER = Carrier(
	name='UPS',
	code='ups',
	url_template='https://www.ups.com/track?loc=en_US&tracknum={trackingNumber}&requester=WT/trackdetails',
	patterns=compile_patterns(
		r'1Z[0-9A-Z]{16}',  # Standard
		r'T\d{10}',  # Express
		r'\d{9}',  # Ground, 9 digits
		r'\d{12}',  # Ground, 12 digits
	)
)
