"""
py-collection: a fluent, in-memory collection library

For Python users who keep writing the same loops to filter, group and
summarize lists of records, and would rather say what they want in the
vocabulary of a query language.

Main classes:
    - PyCollection: ordered, mutable list wrapper with a chainable API
    - Operator: the comparison operators understood by where()

Factory:
    - collect(items): wrap a list (or any iterable) in a PyCollection

Zero external dependencies - pure Python stdlib only.
"""

from .collection import PyCollection
from .operators import Operator
from .paths import MISSING
from .errors import PyCollectionError, InvalidArgument, SerializationError, EmptyCollectionError, PyCollectionIndexError, PyCollectionTypeError


def collect(items=None):
	"""Wrap ``items`` (default: empty) in a new PyCollection."""
	return PyCollection(items)


__version__ = "0.1.0"
__all__ = [
	"PyCollection",
	"collect",
	"Operator",
	"MISSING",
	"PyCollectionError",
	"InvalidArgument",
	"SerializationError",
	"EmptyCollectionError",
	"PyCollectionIndexError",
	"PyCollectionTypeError"
]
