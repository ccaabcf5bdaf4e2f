class PyCollectionError(Exception):
	"""Base exception for py-collection."""
	pass


class InvalidArgument(PyCollectionError, ValueError):
	"""Raised when a parameter is structurally invalid (e.g. a chunk size of 0)."""
	pass


class SerializationError(PyCollectionError, ValueError):
	"""Raised when the collection cannot be encoded as JSON."""
	pass


class EmptyCollectionError(PyCollectionError, ValueError):
	"""Raised by avg/min/max when there is nothing to aggregate."""
	pass


class PyCollectionIndexError(PyCollectionError, IndexError):
	"""Raised for invalid index writes."""
	pass


class PyCollectionTypeError(PyCollectionError, TypeError):
	"""Raised for invalid types in API calls."""
	pass
