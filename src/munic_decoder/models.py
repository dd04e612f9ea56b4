"""
Typed records for pushed payloads.

Purpose:
- Provide typed views of presence/message/track payloads.
- Keep every record fully populated: unreadable fields hold a sentinel.

Notes:
- Records are plain values; they never keep a reference to the parsed document.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Union

BAD_VAL = -1
BAD_STRING = "*"
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class PayloadType(Enum):
    PRESENCE = "presence"
    MESSAGE = "message"
    TRACK = "track"
    ERROR = "error"


@dataclass(frozen=True)
class PresenceRecord:
    """
    Connection/disconnection of an asset.

    Fields map 1:1 to payload keys (id_str <- "id_str", etc.).
    """

    id: int = BAD_VAL
    connection_id: int = BAD_VAL
    id_str: str = BAD_STRING
    connection_id_str: str = BAD_STRING
    asset: str = BAD_STRING
    time: datetime = EPOCH
    type: str = BAD_STRING
    reason: str = BAD_STRING


@dataclass(frozen=True)
class MessageRecord:
    id: int = BAD_VAL
    connection_id: int = BAD_VAL
    id_str: str = BAD_STRING
    asset: str = BAD_STRING
    channel: str = BAD_STRING
    sender: str = BAD_STRING
    recipient: str = BAD_STRING
    time: datetime = EPOCH
    b64_payload: str = BAD_STRING


@dataclass(frozen=True)
class TrackRecord:
    """
    Position/sensor sample.

    location is (longitude, latitude) as sent in "loc", or None.
    fields is a dict, so track records compare by value but are unhashable.
    """

    id: int = BAD_VAL
    connection_id: int = BAD_VAL
    id_str: str = BAD_STRING
    asset: str = BAD_STRING
    recorded_at: datetime = EPOCH
    received_at: datetime = EPOCH
    location: tuple[float, float] | None = None
    fields: dict[str, Any] = field(default_factory=dict)


Record = Union[PresenceRecord, MessageRecord, TrackRecord]


@dataclass(frozen=True)
class DecodedPayload:
    """
    One decoded array element.

    record is None when type is ERROR or when the "payload" object was missing.
    """

    type: PayloadType
    record: Record | None = None

    @property
    def ok(self) -> bool:
        return self.type is not PayloadType.ERROR and self.record is not None


def record_to_dict(record: Record) -> dict[str, Any]:
    """
    Flatten a record into JSON-ready values (datetimes as yyyy-MM-ddTHH:mm:ssZ).
    """

    payload: dict[str, Any] = {}
    for key, value in vars(record).items():
        if isinstance(value, datetime):
            value = value.strftime("%Y-%m-%dT%H:%M:%SZ")
        elif isinstance(value, tuple):
            value = list(value)
        elif isinstance(value, dict):
            value = dict(value)
        payload[key] = value
    return payload
