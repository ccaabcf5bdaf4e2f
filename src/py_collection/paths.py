"""Dot-separated key path resolution for record elements."""

from __future__ import annotations
from collections.abc import Mapping
from typing import Any, Callable


class _Missing:
	"""Marker for a key path that did not resolve. Distinct from a stored None."""
	__slots__ = ()

	def __repr__(self):
		return 'MISSING'

	def __bool__(self):
		return False


MISSING = _Missing()


def is_record(value: Any) -> bool:
	"""Records are string-keyed mappings; everything else is a scalar."""
	return isinstance(value, Mapping)


def split_path(path: str) -> tuple[str, ...]:
	if not isinstance(path, str):
		# Integer keys ("where(0, ...)") are treated as a single segment
		return (path,)
	return tuple(path.split('.'))


def _has_key(mapping: Mapping, key: Any) -> bool:
	# Membership test only; subscripting a defaultdict would insert the key
	try:
		return key in mapping
	except TypeError:
		return False


def _step(current: Any, segment: Any) -> Any:
	if isinstance(current, Mapping):
		if _has_key(current, segment):
			return current[segment]
		# "items.0" style paths on int-keyed mappings
		if isinstance(segment, str) and segment.isdigit() and _has_key(current, int(segment)):
			return current[int(segment)]
		return MISSING

	if isinstance(current, (list, tuple)):
		if isinstance(segment, str):
			if not segment.isdigit():
				return MISSING
			segment = int(segment)
		if not isinstance(segment, int) or isinstance(segment, bool):
			return MISSING
		if 0 <= segment < len(current):
			return current[segment]
		return MISSING

	return MISSING


def resolve(element: Any, path: Any) -> Any:
	"""
	Walk ``path`` into ``element``.

	Returns MISSING as soon as a segment is absent or the value reached so far
	is neither a mapping nor a list/tuple. Never raises.

	>>> resolve({'address': {'city': 'Oslo'}}, 'address.city')
	'Oslo'
	>>> resolve({'address': None}, 'address.city')
	MISSING

	A key that literally contains dots wins over the walk:

	>>> resolve({'user.name': 'ann'}, 'user.name')
	'ann'
	"""
	if isinstance(element, Mapping) and _has_key(element, path):
		return element[path]
	current = element
	for segment in split_path(path):
		current = _step(current, segment)
		if current is MISSING:
			return MISSING
	return current


def lookup(element: Any, path: Any, default: Any = None) -> Any:
	"""Like resolve(), but reports a missing path as ``default``."""
	value = resolve(element, path)
	return default if value is MISSING else value


def key_getter(key: Any) -> Callable[[Any], Any]:
	"""Turn a key path or a callable into a one-argument value getter."""
	if callable(key):
		return key
	return lambda element: resolve(element, key)
