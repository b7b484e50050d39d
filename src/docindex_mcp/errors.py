"""Exception types raised by the index loader and the query engine.

Load failures are atomic: when any of the ``IndexLoadError`` subclasses is
raised, no ``SearchIndex`` value has been produced.
"""

from __future__ import annotations

from typing import Any


class DocIndexError(Exception):
    """Base class for all docindex errors."""

    code = "docindex_error"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_details(self) -> dict[str, Any]:
        """Structured context for tool error envelopes."""
        return {key: value for key, value in self.context.items() if value is not None}


class IndexLoadError(DocIndexError):
    """The serialized index could not be turned into a SearchIndex."""

    code = "index_load_error"


class OutOfRangeReference(IndexLoadError, IndexError):
    """A string, owner or kind reference falls outside its table."""

    code = "out_of_range_reference"

    def __init__(
        self,
        message: str,
        *,
        record: int | None = None,
        field: str | None = None,
        value: Any = None,
        limit: int | None = None,
    ) -> None:
        super().__init__(message, record=record, field=field, value=value, limit=limit)


class MalformedRecord(IndexLoadError, ValueError):
    """A record is missing a field or has the wrong shape."""

    code = "malformed_record"

    def __init__(
        self,
        message: str,
        *,
        record: int | None = None,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        super().__init__(message, record=record, field=field, value=value)


class QueryError(DocIndexError):
    """Base class for query-time failures."""

    code = "query_error"


class NotReady(QueryError):
    """Search was invoked before an index was loaded."""

    code = "index_not_ready"
