# -*- coding: utf-8 -*-
"""DHL tracking number formats.
"""
from .common import Carrier, compile_patterns

CARRIER = Carrier(
	name='DHL',
	code='dhl',
	url_template='https://www.dhl.com/en/express/tracking.html?AWB={trackingNumber}&brand=DHL',
	patterns=compile_patterns(
		r'\d{10}',
		r'\d{11}',
		r'[A-Z]{3}\d{7}',
		r'[A-Z]{2}\d{9}',
		r'JD\d{18}',  # eCommerce
		r'GM\d{16}',  # Global Mail
		r'LX\d{9}[A-Z]{2}',
	)
)
