# -*- coding: utf-8 -*-
from __future__ import annotations

from pathlib import Path

import voluptuous as vlps

from parceltrack.modules.storage import JsonFileKeyspace, MemoryKeyspace
from parceltrack.modules.storage.keyspace import load_validated


def test_json_file_roundtrip(tmp_path: Path) -> None:
	keyspace = JsonFileKeyspace(tmp_path / 'data', 'packages')
	assert keyspace.load() is None

	keyspace.save([{'id': 'a'}])
	assert keyspace.path == tmp_path / 'data' / 'packages.json'
	assert keyspace.load() == [{'id': 'a'}]
	assert [path.name for path in (tmp_path / 'data').iterdir()] == ['packages.json']

	keyspace.remove()
	keyspace.remove()
	assert keyspace.load() is None


def test_unparseable_file_is_empty(tmp_path: Path, caplog) -> None:
	(tmp_path / 'cache.json').write_text('{not json', encoding='utf-8')

	assert JsonFileKeyspace(tmp_path, 'cache').load() is None
	assert 'unreadable' in caplog.text


def test_memory_keyspace_copies() -> None:
	keyspace = MemoryKeyspace('cache')
	value = {'a': [1]}
	keyspace.save(value)
	value['a'].append(2)

	assert keyspace.load() == {'a': [1]}


def test_load_validated_falls_back(caplog) -> None:
	schema = vlps.Schema([int])

	assert load_validated(MemoryKeyspace('x'), schema, list) == []
	assert load_validated(MemoryKeyspace('x', ['a']), schema, list) == []
	assert 'invalid content' in caplog.text
	assert load_validated(MemoryKeyspace('x', [1]), schema, list) == [1]
