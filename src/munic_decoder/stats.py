"""
Decode counters for the push receiver.

Purpose:
- Track how many documents and payloads were seen, per type.
- Provide a quick snapshot for monitoring or logging.

Notes:
- Counters only; decoded records are never retained.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable
import time

from .models import DecodedPayload, PayloadType


@dataclass
class DecodeStatsSnapshot:
    documents: int
    rejected_documents: int
    presence: int
    message: int
    track: int
    errors: int
    absent: int
    last_document_ts: float | None


@dataclass
class DocumentSummary:
    """
    Per-document counts returned to the pushing platform.
    """

    presence: int = 0
    message: int = 0
    track: int = 0
    error: int = 0
    absent: int = 0

    @property
    def total(self) -> int:
        return self.presence + self.message + self.track + self.error

    def add(self, decoded: DecodedPayload) -> None:
        if decoded.type is PayloadType.ERROR:
            self.error += 1
            return
        if decoded.record is None:
            self.absent += 1
        if decoded.type is PayloadType.PRESENCE:
            self.presence += 1
        elif decoded.type is PayloadType.MESSAGE:
            self.message += 1
        elif decoded.type is PayloadType.TRACK:
            self.track += 1


def summarize(payloads: Iterable[DecodedPayload]) -> DocumentSummary:
    summary = DocumentSummary()
    for decoded in payloads:
        summary.add(decoded)
    return summary


class DecodeStats:
    """
    In-memory counters for one process.
    """

    def __init__(self) -> None:
        self.documents = 0
        self.rejected_documents = 0
        self.presence = 0
        self.message = 0
        self.track = 0
        self.errors = 0
        self.absent = 0
        self.last_document_ts: float | None = None

    def record(self, summary: DocumentSummary, *, received_ts: float | None = None) -> None:
        self.documents += 1
        # Nothing decoded: no array, empty array, or the first element was not an object.
        if summary.total == 0:
            self.rejected_documents += 1
        self.presence += summary.presence
        self.message += summary.message
        self.track += summary.track
        self.errors += summary.error
        self.absent += summary.absent
        self.last_document_ts = received_ts if received_ts is not None else time.time()

    def snapshot(self) -> DecodeStatsSnapshot:
        return DecodeStatsSnapshot(
            documents=self.documents,
            rejected_documents=self.rejected_documents,
            presence=self.presence,
            message=self.message,
            track=self.track,
            errors=self.errors,
            absent=self.absent,
            last_document_ts=self.last_document_ts,
        )
