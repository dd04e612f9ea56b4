"""
Payload classification and extraction.

Purpose:
- classify() reads the "meta.event" discriminator of one array object.
- extract_*() turn its "payload" object into a typed record.

Logic flow:
1) classify(obj) -> PayloadType (ERROR when meta/event is missing or unknown).
2) extract(obj, payload_type, extractors=...) dispatches to the extractor
   mapped to that type (DEFAULT_EXTRACTORS unless the session passes its own).
3) Extractors return None only when "payload" itself is not an object;
   otherwise every field is read independently via fields.py.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Callable, Mapping
import logging

from .fields import read_int, read_location, read_mapping, read_str, read_time
from .models import (
    DecodedPayload,
    MessageRecord,
    PayloadType,
    PresenceRecord,
    Record,
    TrackRecord,
)

logger = logging.getLogger(__name__)

VAL_PRESENCE = "presence"
VAL_MESSAGE = "message"
VAL_TRACK = "track"

Extractor = Callable[..., "Record | None"]


def _sink(custom: logging.Logger | None) -> logging.Logger:
    return custom if custom is not None else logger


def classify(obj: Any, *, logger: logging.Logger | None = None) -> PayloadType:
    """
    Return the payload type announced by obj["meta"]["event"].
    """

    log = _sink(logger)
    if not isinstance(obj, dict):
        log.error("classify: no current object")
        return PayloadType.ERROR
    meta = obj.get("meta")
    if not isinstance(meta, dict):
        log.error("classify: no meta object")
        return PayloadType.ERROR
    event = meta.get("event")
    if not isinstance(event, str):
        log.error("classify: meta has no event string")
        return PayloadType.ERROR
    if event == VAL_PRESENCE:
        log.debug("classify: presence")
        return PayloadType.PRESENCE
    if event == VAL_MESSAGE:
        log.debug("classify: message")
        return PayloadType.MESSAGE
    if event == VAL_TRACK:
        log.debug("classify: track")
        return PayloadType.TRACK
    log.error("classify: unknown type of event - %s", event)
    return PayloadType.ERROR


def _payload_object(obj: Any, caller: str, log: logging.Logger) -> dict[str, Any] | None:
    if not isinstance(obj, dict):
        log.error("%s: no current object", caller)
        return None
    payload = obj.get("payload")
    if payload is None:
        log.error("%s: no payload object", caller)
        return None
    if not isinstance(payload, dict):
        log.error("%s: payload is %s, not an object", caller, type(payload).__name__)
        return None
    return payload


def extract_presence(obj: Any, *, logger: logging.Logger | None = None) -> PresenceRecord | None:
    """
    Build a PresenceRecord from obj["payload"].

    Unreadable fields fall back to their sentinels (-1, "*", epoch).
    Returns None only if the payload object itself is missing.
    """

    payload = _payload_object(obj, "extract_presence", _sink(logger))
    if payload is None:
        return None
    return PresenceRecord(
        id=read_int(payload, "id"),
        connection_id=read_int(payload, "connection_id"),
        id_str=read_str(payload, "id_str"),
        connection_id_str=read_str(payload, "connection_id_str"),
        asset=read_str(payload, "asset"),
        time=read_time(payload, "time"),
        type=read_str(payload, "type"),
        reason=read_str(payload, "reason"),
    )


def extract_message(obj: Any, *, logger: logging.Logger | None = None) -> MessageRecord | None:
    payload = _payload_object(obj, "extract_message", _sink(logger))
    if payload is None:
        return None
    return MessageRecord(
        id=read_int(payload, "id"),
        connection_id=read_int(payload, "connection_id"),
        id_str=read_str(payload, "id_str"),
        asset=read_str(payload, "asset"),
        channel=read_str(payload, "channel"),
        sender=read_str(payload, "sender"),
        recipient=read_str(payload, "recipient"),
        time=read_time(payload, "time"),
        b64_payload=read_str(payload, "b64_payload"),
    )


def extract_track(obj: Any, *, logger: logging.Logger | None = None) -> TrackRecord | None:
    payload = _payload_object(obj, "extract_track", _sink(logger))
    if payload is None:
        return None
    return TrackRecord(
        id=read_int(payload, "id"),
        connection_id=read_int(payload, "connection_id"),
        id_str=read_str(payload, "id_str"),
        asset=read_str(payload, "asset"),
        recorded_at=read_time(payload, "recorded_at"),
        received_at=read_time(payload, "received_at"),
        location=read_location(payload, "loc"),
        fields=read_mapping(payload, "fields"),
    )


DEFAULT_EXTRACTORS: Mapping[PayloadType, Extractor] = MappingProxyType(
    {
        PayloadType.PRESENCE: extract_presence,
        PayloadType.MESSAGE: extract_message,
        PayloadType.TRACK: extract_track,
    }
)


def with_extractor(
    payload_type: PayloadType,
    extractor: Extractor,
    base: Mapping[PayloadType, Extractor] | None = None,
) -> Mapping[PayloadType, Extractor]:
    """
    Return a new extractor mapping with one payload type swapped.

    Extractors are called as extractor(obj, logger=...) and must not raise.
    The base mapping (DEFAULT_EXTRACTORS if omitted) is left untouched, so a
    swap only affects the sessions it is passed to.
    """

    if payload_type is PayloadType.ERROR:
        raise ValueError("No extractor can be registered for PayloadType.ERROR.")
    mapping = dict(DEFAULT_EXTRACTORS if base is None else base)
    mapping[payload_type] = extractor
    return MappingProxyType(mapping)


def extract(
    obj: Any,
    payload_type: PayloadType | None = None,
    *,
    extractors: Mapping[PayloadType, Extractor] | None = None,
    logger: logging.Logger | None = None,
) -> DecodedPayload:
    """
    Classify (unless payload_type is given) and extract one array object.
    """

    if payload_type is None:
        payload_type = classify(obj, logger=logger)
    if payload_type is PayloadType.ERROR:
        return DecodedPayload(type=PayloadType.ERROR)
    extractor = (DEFAULT_EXTRACTORS if extractors is None else extractors).get(payload_type)
    if extractor is None:
        _sink(logger).error("extract: no extractor for %s", payload_type.value)
        return DecodedPayload(type=payload_type)
    return DecodedPayload(type=payload_type, record=extractor(obj, logger=logger))
