import json
import reprlib
import warnings

from .display import _printr
from .errors import EmptyCollectionError
from .errors import InvalidArgument
from .errors import PyCollectionIndexError
from .errors import PyCollectionTypeError
from .errors import SerializationError
from .operators import Operator
from .operators import comparator
from .operators import hash_key
from .operators import loose_equals
from .operators import loose_ge
from .operators import loose_le
from .operators import strict_equals
from .paths import MISSING
from .paths import is_record
from .paths import key_getter
from .paths import lookup
from .paths import resolve

from collections.abc import Iterable
from collections.abc import Mapping
from functools import cmp_to_key
from functools import reduce as _fold

from typing import Any
from typing import List


# ============================================================
# Small helpers
# ============================================================

def _as_list(values, method) -> List[Any]:
	"""Materialize a list-like argument. Strings, bytes and mappings are rejected."""
	if isinstance(values, PyCollection):
		return list(values._items)
	if isinstance(values, (str, bytes, bytearray, Mapping)) or not isinstance(values, Iterable):
		raise InvalidArgument(
			f"{method}() expects a list, tuple, iterable or PyCollection, not {type(values).__name__}"
		)
	return list(values)


def _between_bounds(low, high):
	"""Normalize where_between() arguments. Returns None when no range was given."""
	if high is ...:
		if isinstance(low, (list, tuple)) and len(low) == 2:
			return low[0], low[1]
		return None
	return low, high


def _json_default(o):
	if isinstance(o, PyCollection):
		return o._items
	raise TypeError(f"Object of type {type(o).__name__} is not JSON serializable")


# ============================================================
# Main backend
# ============================================================

class PyCollection():
	""" Ordered, mutable collection with a chainable query API """
	_items = None

	def __init__(self, initial=()):
		"""
		Wrap ``initial`` in a new collection.

		The list structure is always copied (generators are consumed once);
		the elements themselves are shared, not cloned.
		"""
		if initial is None:
			initial = ()
		if isinstance(initial, PyCollection):
			initial = initial._items
		self._items = list(initial)

	def copy(self, new_values=None):
		"""New collection over ``new_values``, or over a copy of this one's items."""
		return PyCollection(self._items if new_values is None else new_values)

	@reprlib.recursive_repr(fillvalue="PyCollection([...])")
	def __repr__(self):
		return _printr(self)

	#-----------------------------------------------------
	# Access / conversion
	#-----------------------------------------------------

	def all(self):
		"""The live internal list. Writes to it are writes to the collection."""
		return self._items

	def entries(self):
		return list(enumerate(self._items))

	def to_list(self):
		"""A fresh, independent copy of the items."""
		return list(self._items)

	def to_json(self, **kwargs):
		"""
		Serialize the items as JSON text.

		NaN and infinity are rejected, nested PyCollections encode as arrays,
		and keyword arguments (indent, sort_keys, ...) go to json.dumps.

		Raises
		------
		SerializationError
			If any element is not encodable (unsupported type, cycle, NaN).
		"""
		kwargs.setdefault('allow_nan', False)
		kwargs.setdefault('default', _json_default)
		try:
			return json.dumps(self._items, **kwargs)
		except (TypeError, ValueError, RecursionError) as e:
			raise SerializationError(f"Collection is not JSON serializable: {e}") from e

	def get(self, index, default=None):
		value = self[index]
		return default if value is None else value

	def __getitem__(self, key):
		""" Get item(s) from self. Behavior varies by input type:
			# Int: the element at that index, or None when out of range.
			#      Negative indices count from the end.
			# Slice: a new PyCollection over the slice.
		"""
		if isinstance(key, int) and not isinstance(key, bool):
			n = len(self._items)
			if key < 0:
				key += n
			if 0 <= key < n:
				return self._items[key]
			return None
		if isinstance(key, slice):
			return self.copy(self._items[key])
		raise PyCollectionTypeError(f'Collection indices must be integers or slices, not {type(key).__name__}')

	def __setitem__(self, key, value):
		"""Replace an existing element. Writing past the end raises; the list never auto-extends."""
		if not isinstance(key, int) or isinstance(key, bool):
			raise PyCollectionTypeError(f'Collection indices must be integers, not {type(key).__name__}')
		n = len(self._items)
		if key < 0:
			key += n
		if not (0 <= key < n):
			raise PyCollectionIndexError(
				f"Index {key} out of range for collection length {n}; use push() to append"
			)
		self._items[key] = value

	def __iter__(self):
		"""
		Iterate over the live list.

		Every call starts again at index 0 over the items as they are at that
		moment. Adding or removing items while an iteration is open gives
		undefined results.
		"""
		index = 0
		while index < len(self._items):
			yield self._items[index]
			index += 1

	def __len__(self):
		return len(self._items)

	def __bool__(self):
		return bool(self._items)

	def __contains__(self, value):
		# Native Python equality; contains() is the coercing variant
		return value in self._items

	#-----------------------------------------------------
	# Mutators (return self)
	#-----------------------------------------------------

	def push(self, item):
		self._items.append(item)
		return self

	def map(self, transform):
		"""Replace each item with transform(item)."""
		self._items = [transform(x) for x in self._items]
		return self

	def filter(self, predicate=None):
		"""Keep items for which predicate(item) is truthy (truthy items when no predicate)."""
		if predicate is None:
			self._items = [x for x in self._items if x]
		else:
			self._items = [x for x in self._items if predicate(x)]
		return self

	def reduce(self, callback, initial):
		"""
		Fold the items left to right with callback(accumulator, item).

		Returns the accumulated value itself; the collection is not modified.

		>>> PyCollection([1, 2, 3]).reduce(lambda acc, x: acc + x, 0)
		6
		"""
		return _fold(callback, self._items, initial)

	def sort_by(self, key):
		"""
		Stable ascending sort on a key path or on callable(item).

		Items whose key is None or missing go last, in their original order.
		Remaining pairs that cannot be ordered (mixed types) compare as equal;
		a UserWarning is raised once.
		"""
		getter = key_getter(key)
		decorated = []
		absent = []
		for x in self._items:
			k = getter(x)
			if k is None or k is MISSING:
				absent.append(x)
			else:
				decorated.append((k, x))
		unordered = []

		def cmp(a, b):
			a, b = a[0], b[0]
			try:
				if a > b:
					return 1
				if a < b:
					return -1
			except TypeError:
				unordered.append((a, b))
			return 0

		decorated.sort(key=cmp_to_key(cmp))
		if unordered:
			a, b = unordered[0]
			warnings.warn(
				f"sort_by({key!r}): {len(unordered)} comparison(s) between unorderable values "
				f"(e.g. {type(a).__name__} and {type(b).__name__}) were treated as equal",
				stacklevel=2
			)
		self._items = [x for _, x in decorated] + absent
		return self

	def sort_by_desc(self, key):
		"""Ascending sort_by(key), then reverse()."""
		self.sort_by(key)
		return self.reverse()

	def reverse(self):
		self._items.reverse()
		return self

	#-----------------------------------------------------
	# where family (new collections)
	#-----------------------------------------------------

	def _where_predicate(self, field, operator_or_value, value):
		if value is ...:
			compare = loose_equals
			target = operator_or_value
		else:
			op = Operator.parse(operator_or_value)
			if op is None:
				warnings.warn(
					f"Unknown where() operator {operator_or_value!r}; no items will match",
					stacklevel=3
				)
			compare = comparator(op)
			target = value

		def predicate(element):
			if not is_record(element):
				return False
			actual = resolve(element, field)
			if actual is MISSING:
				return False
			return compare(actual, target)
		return predicate

	def _field_filter(self, field, test):
		"""New collection of records that have ``field`` and whose value passes test()."""
		out = []
		for element in self._items:
			if not is_record(element):
				continue
			actual = resolve(element, field)
			if actual is not MISSING and test(actual):
				out.append(element)
		return self.copy(out)

	def where(self, field, operator_or_value, value=...):
		"""
		Keep records whose ``field`` satisfies a comparison.

		where('id', 2) is coercing equality; where('id', '>', 1) applies an
		operator ('=', '==', '!=', '<>', '!==', '<', '<=', '>', '>=', 'like',
		'ilike', 'not like', 'not ilike'). ``field`` may be a dotted key path.
		Scalars and records missing the field never match.
		"""
		predicate = self._where_predicate(field, operator_or_value, value)
		return self.copy([x for x in self._items if predicate(x)])

	def where_not(self, field, value):
		return self.where(field, Operator.NE, value)

	def where_in(self, field, values):
		candidates = _as_list(values, 'where_in')
		return self._field_filter(field, lambda v: any(loose_equals(v, c) for c in candidates))

	def where_not_in(self, field, values):
		candidates = _as_list(values, 'where_not_in')
		return self._field_filter(field, lambda v: not any(loose_equals(v, c) for c in candidates))

	def where_between(self, field, low, high=...):
		"""
		Keep records whose ``field`` lies in the inclusive range.

		Accepts where_between('v', 1, 5) or where_between('v', [1, 5]). A
		scalar bound with no upper bound matches nothing.
		"""
		bounds = _between_bounds(low, high)
		if bounds is None:
			return self.copy([])
		lo, hi = bounds
		return self._field_filter(field, lambda v: loose_ge(v, lo) and loose_le(v, hi))

	def where_not_between(self, field, low, high=...):
		"""Negation of where_between(). A scalar bound with no upper bound keeps everything."""
		bounds = _between_bounds(low, high)
		if bounds is None:
			return self.copy()
		lo, hi = bounds
		return self._field_filter(field, lambda v: not (loose_ge(v, lo) and loose_le(v, hi)))

	def where_null(self, field):
		"""Records whose ``field`` is None or absent."""
		out = []
		for element in self._items:
			if not is_record(element):
				continue
			actual = resolve(element, field)
			if actual is None or actual is MISSING:
				out.append(element)
		return self.copy(out)

	def where_not_null(self, field):
		return self._field_filter(field, lambda v: v is not None)

	#-----------------------------------------------------
	# Lookup / slicing
	#-----------------------------------------------------

	def first(self):
		return self._items[0] if self._items else None

	def last(self):
		return self._items[-1] if self._items else None

	def first_where(self, field, operator_or_value, value=...):
		"""First record matching where(field, ...), or None. Leaves the collection untouched."""
		predicate = self._where_predicate(field, operator_or_value, value)
		for element in self._items:
			if predicate(element):
				return element
		return None

	def take(self, n):
		if not isinstance(n, int) or isinstance(n, bool):
			raise InvalidArgument(f"take() expects an integer, not {type(n).__name__}")
		if n <= 0:
			return self.copy([])
		return self.copy(self._items[:n])

	def pluck(self, key_path):
		"""
		New collection of the values found at ``key_path`` in each item.

		>>> PyCollection([{'a': {'b': 1}}, {'a': {}}]).pluck('a.b').all()
		[1, None]
		"""
		return self.copy([lookup(x, key_path) for x in self._items])

	def chunk(self, size):
		"""
		Split into consecutive PyCollections of ``size`` items (the last may be shorter).

		Raises
		------
		InvalidArgument
			If size is not a positive integer.
		"""
		if not isinstance(size, int) or isinstance(size, bool) or size <= 0:
			raise InvalidArgument(f"chunk size must be a positive integer, not {size!r}")
		items = self._items
		return self.copy([self.copy(items[i:i + size]) for i in range(0, len(items), size)])

	#-----------------------------------------------------
	# Aggregation
	#-----------------------------------------------------

	def _values(self, field):
		"""Present, non-None values of ``field`` (of the items themselves when field is None)."""
		if field is None:
			values = self._items
		else:
			getter = key_getter(field)
			values = (getter(x) for x in self._items)
		return [v for v in values if v is not None and v is not MISSING]

	def count(self):
		return len(self._items)

	def sum(self, field=None):
		values = self._values(field)
		try:
			return sum(values)
		except TypeError as e:
			raise PyCollectionTypeError(f"sum({field!r}) needs numeric values: {e}") from e

	def avg(self, field=None):
		"""
		Arithmetic mean of ``field``, skipping None and missing values.

		Raises
		------
		EmptyCollectionError
			If there are no values to average.
		"""
		values = self._values(field)
		if not values:
			raise EmptyCollectionError(f"avg({field!r}) of an empty collection")
		try:
			return sum(values) / len(values)
		except TypeError as e:
			raise PyCollectionTypeError(f"avg({field!r}) needs numeric values: {e}") from e

	def min(self, field=None):
		values = self._values(field)
		if not values:
			raise EmptyCollectionError(f"min({field!r}) of an empty collection")
		try:
			return min(values)
		except TypeError as e:
			raise PyCollectionTypeError(f"min({field!r}) over unorderable values: {e}") from e

	def max(self, field=None):
		values = self._values(field)
		if not values:
			raise EmptyCollectionError(f"max({field!r}) of an empty collection")
		try:
			return max(values)
		except TypeError as e:
			raise PyCollectionTypeError(f"max({field!r}) over unorderable values: {e}") from e

	def group_by(self, key):
		"""
		Partition items by the value of ``key`` (a key path or a callable).

		Returns a dict of str(value) -> PyCollection, in order of first
		occurrence. Items without the key are grouped under 'None'.
		"""
		getter = key_getter(key)
		partition_index = {}
		for element in self._items:
			value = getter(element)
			group = str(None if value is MISSING else value)
			bucket = partition_index.get(group)
			if bucket is None:
				partition_index[group] = [element]
			else:
				bucket.append(element)
		return {group: self.copy(bucket) for group, bucket in partition_index.items()}

	#-----------------------------------------------------
	# Set-like operations
	#-----------------------------------------------------

	def unique(self, key=None):
		"""
		First occurrence of each distinct item (or of each distinct ``key`` value).

		Distinct means not exactly equal: 1 and 1.0 collapse, 1 and True and
		"1" do not.
		"""
		getter = key_getter(key) if key is not None else None
		items = self._items
		keys = items if getter is None else [getter(x) for x in items]

		# Fast path: hashable
		try:
			seen = set()
			out = []
			for x, k in zip(items, keys):
				h = hash_key(k)
				if h not in seen:
					seen.add(h)
					out.append(x)
			return self.copy(out)
		except TypeError:
			pass   # fall through → slow path

		# Slow path: unhashables
		out = []
		out_keys = []
		for x, k in zip(items, keys):
			if not any(strict_equals(k, y) for y in out_keys):
				out_keys.append(k)
				out.append(x)
		return self.copy(out)

	def diff(self, others):
		"""Items not (coercing-)equal to any value in ``others``."""
		exclude = _as_list(others, 'diff')
		return self.copy([x for x in self._items if not any(loose_equals(x, y) for y in exclude)])

	def merge(self, others):
		"""This collection's items followed by those of ``others``; duplicates are kept."""
		return self.copy(self._items + _as_list(others, 'merge'))

	def contains(self, value):
		"""Coercing membership test, or any(value(item)) when ``value`` is callable."""
		if callable(value):
			return any(value(x) for x in self._items)
		return any(loose_equals(x, value) for x in self._items)

	def is_empty(self):
		return not self._items

	def is_not_empty(self):
		return bool(self._items)
