"""Display and repr logic for PyCollection."""

from __future__ import annotations
from collections.abc import Mapping
from datetime import date
from typing import Any, List


# How many items to show at each end before inserting "..."
MAX_HEAD_ROWS = 5

# Nested records/lists longer than this are elided inside a single item
MAX_ITEM_WIDTH = 60


def _format_item(v: Any, _seen: set | None = None) -> str:
	"""Format a single element for display. ``_seen`` holds the ids being rendered, to cut cycles."""
	if _seen is None:
		_seen = set()
	if type(v).__name__ == 'PyCollection':
		return _printr(v, _seen)
	if isinstance(v, float):
		return f"{v:.1f}" if v.is_integer() else f"{v:g}"
	if isinstance(v, date):
		return v.isoformat()
	if isinstance(v, Mapping):
		if id(v) in _seen:
			return '{...}'
		_seen.add(id(v))
		try:
			s = '{' + ', '.join(f"{k!r}: {_format_item(x, _seen)}" for k, x in v.items()) + '}'
		finally:
			_seen.discard(id(v))
	else:
		s = repr(v)
	if len(s) > MAX_ITEM_WIDTH:
		return s[:MAX_ITEM_WIDTH - 3] + '...'
	return s


def _preview(items, max_preview: int = MAX_HEAD_ROWS, _seen: set | None = None) -> List[str]:
	"""Returns the formatted items, truncated symmetrically around '...'."""
	if len(items) > max_preview * 2:
		head = [_format_item(v, _seen) for v in items[:max_preview]]
		tail = [_format_item(v, _seen) for v in items[-max_preview:]]
		return head + ['...'] + tail
	return [_format_item(v, _seen) for v in items]


def _printr(collection, _seen: set | None = None) -> str:
	if _seen is None:
		_seen = set()
	if id(collection) in _seen:
		return 'PyCollection([...])'
	_seen.add(id(collection))
	try:
		items = collection._items
		body = ', '.join(_preview(items, _seen=_seen))
	finally:
		_seen.discard(id(collection))
	if len(items) > MAX_HEAD_ROWS * 2:
		return f"PyCollection([{body}], count={len(items)})"
	return f"PyCollection([{body}])"
