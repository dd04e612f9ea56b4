"""
Munic push decoder.

Tolerant decoding of pushed JSON documents (arrays of presence/message/track
payloads) into typed records. Import paths are exported here to keep the
public surface area obvious while the implementation stays in small files.
"""

from .models import (
    BAD_STRING,
    BAD_VAL,
    EPOCH,
    DecodedPayload,
    MessageRecord,
    PayloadType,
    PresenceRecord,
    TrackRecord,
    record_to_dict,
)
from .cursor import DocumentCursor
from .extraction import (
    DEFAULT_EXTRACTORS,
    classify,
    extract,
    extract_message,
    extract_presence,
    extract_track,
    with_extractor,
)
from .decoder import decode_document, iter_payloads
from .stats import DecodeStats, DecodeStatsSnapshot, DocumentSummary, summarize
from .config import DecoderSettings, load_settings
from .validation import validate_settings
from .logging_config import setup_logging, setup_logging_from_settings
from .server import create_app, run

__all__ = [
    "BAD_STRING",
    "BAD_VAL",
    "EPOCH",
    "DecodedPayload",
    "MessageRecord",
    "PayloadType",
    "PresenceRecord",
    "TrackRecord",
    "record_to_dict",
    "DocumentCursor",
    "DEFAULT_EXTRACTORS",
    "classify",
    "extract",
    "extract_message",
    "extract_presence",
    "extract_track",
    "with_extractor",
    "decode_document",
    "iter_payloads",
    "DecodeStats",
    "DecodeStatsSnapshot",
    "DocumentSummary",
    "summarize",
    "DecoderSettings",
    "load_settings",
    "validate_settings",
    "setup_logging",
    "setup_logging_from_settings",
    "create_app",
    "run",
]
