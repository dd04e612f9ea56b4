"""
One decoding session over a pushed document.

Runs the call sequence a request handler needs:
DocumentCursor -> advance() -> classify() -> extract() -> close().
"""

from __future__ import annotations

from typing import Iterator, Mapping
import logging

from .cursor import DocumentCursor
from .extraction import Extractor, extract
from .models import DecodedPayload, PayloadType


def iter_payloads(
    document: str | bytes,
    *,
    extractors: Mapping[PayloadType, Extractor] | None = None,
    logger: logging.Logger | None = None,
    log_document: bool = False,
) -> Iterator[DecodedPayload]:
    """
    Yield one DecodedPayload per array object, in document order.

    extractors overrides DEFAULT_EXTRACTORS for this session only.
    The cursor is closed once, even if the consumer stops early.
    """

    with DocumentCursor(document, logger=logger, log_document=log_document) as cursor:
        while cursor.advance():
            yield extract(cursor.current, extractors=extractors, logger=cursor.logger)


def decode_document(
    document: str | bytes,
    *,
    extractors: Mapping[PayloadType, Extractor] | None = None,
    logger: logging.Logger | None = None,
    log_document: bool = False,
) -> list[DecodedPayload]:
    return list(
        iter_payloads(
            document,
            extractors=extractors,
            logger=logger,
            log_document=log_document,
        )
    )
