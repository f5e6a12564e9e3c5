# -*- coding: utf-8 -*-
"""Durable records, status cache and their keyspaces.
"""
from .cache import CacheEntry, StatusCache, TrackingStatus
from .keyspace import JsonFileKeyspace, Keyspace, MemoryKeyspace
from .records import DurableRecord, DurableRecordStore
from .settings import Settings, SettingsStore

__all__ = (
	'CacheEntry',
	'DurableRecord',
	'DurableRecordStore',
	'JsonFileKeyspace',
	'Keyspace',
	'MemoryKeyspace',
	'Settings',
	'SettingsStore',
	'StatusCache',
	'TrackingStatus',
)
