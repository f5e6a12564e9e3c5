# -*- coding: utf-8 -*-
"""Extraction of tracking number candidates from pasted free text.
"""
import re
from typing import Iterator, Optional

from .classifier import CarrierClassifier

# Below any real carrier's minimum length.
MIN_TOKEN_LENGTH = 8
# Unrecognized tokens this long are still accepted ("unknown carrier" mode).
MIN_UNKNOWN_LENGTH = 10

_LINE_SEPARATORS_RE = re.compile(r'[\n\r,;]+')
_NON_ALPHANUMERIC_RE = re.compile(r'[^0-9A-Za-z]')


def extract_candidates(free_text: Optional[str], classifier: CarrierClassifier) -> Iterator[str]:
	"""Yield normalized, de-duplicated tracking number candidates.

	Lines are separated by newlines, commas and semicolons, words by
	whitespace. Order of first appearance is preserved.
	"""
	if not free_text:
		return

	seen = set()
	for line in _LINE_SEPARATORS_RE.split(free_text):
		for word in line.split():
			if len(word) < MIN_TOKEN_LENGTH:
				continue

			token = _NON_ALPHANUMERIC_RE.sub('', word).upper()
			if not token or token in seen:
				continue

			if classifier.classify(token) is not None or len(token) >= MIN_UNKNOWN_LENGTH:
				seen.add(token)
				yield token
