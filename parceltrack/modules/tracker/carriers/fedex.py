# -*- coding: utf-8 -*-
"""FedEx tracking number formats.

Plain digit runs overlap with UPS and USPS. UPS is resolved by classifier
priority, USPS 22-digit numbers must be excluded here: any 22-digit rule
added below must keep rejecting the 90-95 prefixes.
"""
from .common import Carrier, compile_patterns

CARRIER = Carrier(
	name='FedEx',
	code='fedex',
	url_template='https://www.fedex.com/apps/fedextrack/?action=track&trackingnumber={trackingNumber}&cntry_code=us',
	patterns=compile_patterns(
		r'(?!9[0-5])\d{22}',  # Ground, not USPS prefixes
		r'\d{12}',
		r'\d{14}',
		r'\d{15}',  # Ground
		r'\d{20}',
		r'61\d{17}',  # SmartPost
	)
)
