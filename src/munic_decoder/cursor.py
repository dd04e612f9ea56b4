"""
Cursor over the top-level array of a pushed JSON document.

Notes:
- Called from the request handler: everything happens in memory, nothing blocks.
- Parsing is deferred to the first advance() and runs at most once.

Logic flow:
1) DocumentCursor(text) stores the raw text only.
2) advance() parses on first use, then fetches the next object.
3) The caller reads cursor.current, classifies and extracts it.
4) close() releases the parsed array.
"""

from __future__ import annotations

from typing import Any
import json
import logging

logger = logging.getLogger(__name__)


def _sink(custom: logging.Logger | None) -> logging.Logger:
    return custom if custom is not None else logger


def _reject_constant(name: str) -> Any:
    # NaN/Infinity are not JSON.
    raise ValueError(f"invalid JSON constant {name}")


class DocumentCursor:
    """
    Walks a JSON array one object at a time.

    A parse failure is memoized: every advance() after it returns False.
    """

    def __init__(
        self,
        document: str | bytes,
        *,
        logger: logging.Logger | None = None,
        log_document: bool = False,
    ) -> None:
        self._document: str | bytes | None = document
        self._logger = _sink(logger)
        self._array: list[Any] | None = None
        self._parsed = False
        self._closed = False
        self._index = 0
        self._current: dict[str, Any] | None = None
        if log_document:
            self._logger.debug("DocumentCursor - document to parse: %r", document)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def index(self) -> int:
        """
        0-based index of the next element to fetch.
        """

        return self._index

    @property
    def current(self) -> dict[str, Any] | None:
        """
        Last object returned by advance(); stale once advance() returns False.
        """

        return self._current

    def _ensure_parsed(self) -> list[Any] | None:
        if self._parsed:
            return self._array
        self._parsed = True
        try:
            value = json.loads(self._document, parse_constant=_reject_constant)
        except (ValueError, TypeError, RecursionError) as exc:
            self._logger.error("no array found: %s", exc)
            value = None
        else:
            if not isinstance(value, list):
                self._logger.error("no array found: top-level value is %s", type(value).__name__)
                value = None
        # The raw text is no longer needed once parsed.
        self._document = None
        self._array = value
        return value

    def advance(self) -> bool:
        """
        Move to the next array object.

        Outputs:
        - True if cursor.current now holds the next object.
        - False when the document has no array, is exhausted, or the next
          element is not an object (processing stops there).
        """

        if self._closed:
            return False
        array = self._ensure_parsed()
        if array is None:
            return False
        if self._index >= len(array):
            return False
        element = array[self._index]
        if not isinstance(element, dict):
            self._logger.error(
                "can't parse next object: element %d is %s",
                self._index,
                type(element).__name__,
            )
            return False
        self._current = element
        self._index += 1
        return True

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._document = None
        self._array = None
        self._current = None

    def __enter__(self) -> "DocumentCursor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
