"""Normalized result types returned by the reply decoder."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

from .types import FieldMap

JSON_ROOT_PATH = "$"


@dataclass
class HashValue:
    """Field values of a hash-backed record."""

    value: FieldMap = field(default_factory=dict)


@dataclass
class JSONValue:
    """Path-keyed JSON texts of a document-backed record.

    Without a `RETURN` projection the engine sends the whole document under
    the `$` path.
    """

    value: FieldMap = field(default_factory=dict)

    def unmarshal(self, path: str = JSON_ROOT_PATH) -> Any:
        """Parse the JSON text stored under `path`.

        Raises:
            KeyError: If the record carries no value for `path`.
        """

        if path not in self.value:
            raise KeyError(f"Search result has no value for path: {path}")
        return json.loads(self.value[path])


ResultValue = Union[HashValue, JSONValue]


@dataclass
class QueryResult:
    """One matched record.

    `score` stays `0.0` unless scores were requested and `explanation` is only
    set when an explanation was requested alongside the score. `values` is
    `None` for content-suppressed searches.
    """

    key: str
    score: float = 0.0
    explanation: Any = None
    values: Optional[ResultValue] = None

    @property
    def fields(self) -> FieldMap:
        return dict(self.values.value) if self.values is not None else {}


class QueryResults:
    """Ordered search results with a derived key lookup.

    Reading `results` gives an immutable snapshot. Assigning a new sequence
    replaces the records and rebuilds the key map.
    """

    def __init__(
        self,
        total_results: int = 0,
        results: Optional[Sequence[QueryResult]] = None,
        *,
        errors: Optional[List[Any]] = None,
        warnings: Optional[List[Any]] = None,
        format: Optional[str] = None,
        attributes: Optional[List[Any]] = None,
    ) -> None:
        self.total_results = total_results
        self.errors: List[Any] = list(errors or [])
        self.warnings: List[Any] = list(warnings or [])
        self.format = format
        self.attributes: List[Any] = list(attributes or [])
        self._results: List[QueryResult] = []
        self._keymap: Dict[str, int] = {}
        self.results = list(results or [])

    @property
    def results(self) -> Tuple[QueryResult, ...]:
        return tuple(self._results)

    @results.setter
    def results(self, results: Sequence[QueryResult]) -> None:
        self._results = list(results)
        self._keymap = {item.key: index for index, item in enumerate(self._results)}

    def key(self, key: str) -> QueryResult:
        """Return the record with `key`.

        Raises:
            KeyError: If no record in this page has that key.
        """

        return self._results[self._keymap[key]]

    def get(self, key: str) -> Optional[QueryResult]:
        index = self._keymap.get(key)
        return None if index is None else self._results[index]

    def keys(self) -> List[str]:
        return [item.key for item in self._results]

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[QueryResult]:
        return iter(self._results)

    def __getitem__(self, index: int) -> QueryResult:
        return self._results[index]

    def __repr__(self) -> str:
        return (
            f"QueryResults(total_results={self.total_results!r}, "
            f"results={self._results!r})"
        )


@dataclass
class AggregateResults:
    """Rows of one aggregate reply, plus the cursor id when a cursor is open.

    A `cursor_id` of `0` means the engine has no more pages for the cursor.
    """

    total_results: int = 0
    rows: List[Dict[str, Any]] = field(default_factory=list)
    errors: List[Any] = field(default_factory=list)
    warnings: List[Any] = field(default_factory=list)
    format: Optional[str] = None
    cursor_id: Optional[int] = None

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self.rows)
