"""
Comparison operators for the where() family.

Two equality strategies are used throughout the library:

Exact compare
	Same kind and equal value. Kinds are bool, number (int and float, but
	not bool) and otherwise the concrete type. 1 and 1.0 are exactly equal,
	1 and True are not, 1 and "1" are not.

Coercing compare
	- None only equals None, and is never ordered against anything.
	- bool operands count as the numbers 1 and 0.
	- A str compared with a number is stripped and parsed with float();
	  a string that does not parse is neither equal nor ordered.
	- Anything else falls back to the native Python operator. A TypeError
	  from the native operator means "no match".
"""

from __future__ import annotations
import operator
import re
from enum import Enum
from functools import lru_cache
from typing import Any, Callable, Optional


class Operator(Enum):
	EQ = '='
	STRICT_EQ = '=='
	NE = '!='
	NE_ALT = '<>'
	STRICT_NE = '!=='
	LT = '<'
	LE = '<='
	GT = '>'
	GE = '>='
	LIKE = 'like'
	ILIKE = 'ilike'
	NOT_LIKE = 'not like'
	NOT_ILIKE = 'not ilike'

	@classmethod
	def parse(cls, token: Any) -> Optional['Operator']:
		"""Look up an operator token. Returns None for anything unrecognised."""
		if isinstance(token, cls):
			return token
		if not isinstance(token, str):
			return None
		normalized = ' '.join(token.strip().lower().split())
		try:
			return cls(normalized)
		except ValueError:
			return None


# ============================================================
# Equality and ordering
# ============================================================

def _kind(x: Any) -> type:
	if isinstance(x, bool):
		return bool
	if isinstance(x, (int, float)):
		return float
	return type(x)


def _is_number(x: Any) -> bool:
	return isinstance(x, (int, float))  # bool is an int subclass


def _coerce_pair(a: Any, b: Any):
	"""Returns the operands ready for a native comparison, or None if they cannot be compared."""
	if a is None or b is None:
		return None
	if isinstance(a, str) and _is_number(b):
		a = _parse_number(a)
		if a is None:
			return None
	elif isinstance(b, str) and _is_number(a):
		b = _parse_number(b)
		if b is None:
			return None
	return a, b


def _parse_number(s: str) -> Optional[float]:
	try:
		return float(s.strip())
	except ValueError:
		return None


def strict_equals(a: Any, b: Any) -> bool:
	"""Exact compare: same kind, equal value."""
	if _kind(a) is not _kind(b):
		return False
	try:
		return bool(a == b)
	except Exception:
		return False


def hash_key(x: Any) -> tuple:
	"""Hashable stand-in for ``x`` that collides exactly when strict_equals() holds."""
	return (_kind(x), x)


def loose_equals(a: Any, b: Any) -> bool:
	"""Coercing compare: 1 == "1" == True."""
	if a is None or b is None:
		return a is None and b is None
	pair = _coerce_pair(a, b)
	if pair is None:
		return False
	try:
		return bool(pair[0] == pair[1])
	except Exception:
		return False


def _ordering(op: Callable[[Any, Any], Any]) -> Callable[[Any, Any], bool]:
	def compare(a, b):
		pair = _coerce_pair(a, b)
		if pair is None:
			return False
		try:
			return bool(op(*pair))
		except TypeError:
			return False
	return compare


loose_lt = _ordering(operator.lt)
loose_le = _ordering(operator.le)
loose_gt = _ordering(operator.gt)
loose_ge = _ordering(operator.ge)


# ============================================================
# LIKE
# ============================================================

@lru_cache(maxsize=256)
def _like_regex(pattern: str, case_sensitive: bool) -> re.Pattern:
	body = '.*'.join(re.escape(part) for part in pattern.split('%'))
	flags = re.DOTALL if case_sensitive else re.DOTALL | re.IGNORECASE
	return re.compile(body, flags)


def like(value: Any, pattern: Any, case_sensitive: bool = True) -> bool:
	"""
	SQL LIKE with ``%`` wildcards.

	'%x%' is contains, '%x' ends-with, 'x%' starts-with and 'x' is an exact
	match. Non-string values are matched through str(); None never matches.
	"""
	if value is None or pattern is None:
		return False
	regex = _like_regex(str(pattern), case_sensitive)
	return regex.fullmatch(str(value)) is not None


def _like(a, b):
	return like(a, b, case_sensitive=True)


def _ilike(a, b):
	return like(a, b, case_sensitive=False)


def _not_like(a, b):
	return a is not None and b is not None and not like(a, b, case_sensitive=True)


def _not_ilike(a, b):
	return a is not None and b is not None and not like(a, b, case_sensitive=False)


# ============================================================
# Dispatch table
# ============================================================

COMPARATORS: dict[Operator, Callable[[Any, Any], bool]] = {
	Operator.EQ: loose_equals,
	Operator.STRICT_EQ: strict_equals,
	Operator.NE: lambda a, b: not loose_equals(a, b),
	Operator.NE_ALT: lambda a, b: not loose_equals(a, b),
	Operator.STRICT_NE: lambda a, b: not strict_equals(a, b),
	Operator.LT: loose_lt,
	Operator.LE: loose_le,
	Operator.GT: loose_gt,
	Operator.GE: loose_ge,
	Operator.LIKE: _like,
	Operator.ILIKE: _ilike,
	Operator.NOT_LIKE: _not_like,
	Operator.NOT_ILIKE: _not_ilike,
}


def _never(a, b):
	return False


def comparator(op: Optional[Operator]) -> Callable[[Any, Any], bool]:
	"""Comparison function for ``op``; unknown operators never match."""
	if op is None:
		return _never
	return COMPARATORS.get(op, _never)
