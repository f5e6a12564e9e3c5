# -*- coding: utf-8 -*-
"""'Externally' adjustable config vars.
"""
from os import environ

# Are we in production? False by default.
PRODUCTION = bool(int(environ.get('PRODUCTION', '0')))

PORT = int(environ['PORT']) if 'PORT' in environ else 8080

LOG_LEVEL = environ.get('LOG_LEVEL', 'INFO').strip().upper()

# Where the JSON keyspaces (packages, cache, settings) live.
DATA_DIR = environ.get('DATA_DIR', './data')
# Status cache is a side channel, it may live in memory only.
PERSIST_CACHE = bool(int(environ.get('PERSIST_CACHE', '1')))

# Base URL of the tracking relay. Empty means "no backend": every fetch
# degrades to the carrier's own tracking page.
TRACKING_RELAY_URL = environ.get('TRACKING_RELAY_URL', '').rstrip('/')
TRACKING_FETCH_TIMEOUT = float(environ.get('TRACKING_FETCH_TIMEOUT', '10'))

# Product policy, not invariants.
CACHE_TTL_SECONDS = int(environ.get('CACHE_TTL_SECONDS', '300'))
AUTO_COMPLETE_DAYS = int(environ.get('AUTO_COMPLETE_DAYS', '7'))
RETENTION_MONTHS = int(environ.get('RETENTION_MONTHS', '3'))
