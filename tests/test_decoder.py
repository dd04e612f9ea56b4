import json
from datetime import datetime, timezone

import pytest

from munic_decoder import decoder as decoder_module
from munic_decoder.cursor import DocumentCursor
from munic_decoder.decoder import decode_document, iter_payloads
from munic_decoder.extraction import classify, extract_presence, with_extractor
from munic_decoder.models import BAD_STRING, BAD_VAL, MessageRecord, PayloadType


def test_single_presence_document_call_sequence() -> None:
    document = '[{"meta":{"event":"presence"},"payload":{"id":42,"time":"2016-03-01T10:00:00Z"}}]'
    cursor = DocumentCursor(document)
    assert cursor.advance() is True
    assert classify(cursor.current) is PayloadType.PRESENCE
    record = extract_presence(cursor.current)
    assert record.id == 42
    assert record.connection_id == BAD_VAL
    assert record.id_str == BAD_STRING
    assert record.time == datetime(2016, 3, 1, 10, 0, 0, tzinfo=timezone.utc)
    assert cursor.advance() is False
    cursor.close()


def test_not_json_produces_nothing() -> None:
    assert decode_document("not json") == []


def test_missing_meta_classifies_as_error() -> None:
    cursor = DocumentCursor('[{"payload":{}}]')
    assert cursor.advance() is True
    assert classify(cursor.current) is PayloadType.ERROR
    cursor.close()


def test_error_elements_do_not_stop_the_document(presence_payload) -> None:
    document = json.dumps(
        [
            {"meta": {"event": "bogus"}, "payload": {}},
            {"meta": {"event": "presence"}, "payload": presence_payload},
            {"meta": {"event": "presence"}},
            {"meta": {"event": "track"}, "payload": {"id": 5}},
        ]
    )
    decoded = decode_document(document)
    assert [d.type for d in decoded] == [
        PayloadType.ERROR,
        PayloadType.PRESENCE,
        PayloadType.PRESENCE,
        PayloadType.TRACK,
    ]
    assert decoded[1].record.asset == "359551031717123"
    assert decoded[2].record is None
    assert decoded[3].record.id == 5


def test_non_object_element_stops_the_document() -> None:
    document = json.dumps(
        [
            {"meta": {"event": "presence"}, "payload": {"id": 1}},
            [1, 2],
            {"meta": {"event": "presence"}, "payload": {"id": 3}},
        ]
    )
    decoded = decode_document(document)
    assert len(decoded) == 1
    assert decoded[0].record.id == 1


def test_iter_payloads_closes_cursor_when_consumer_stops(monkeypatch: pytest.MonkeyPatch) -> None:
    closed = []

    class TrackingCursor(DocumentCursor):
        def close(self) -> None:
            closed.append(True)
            super().close()

    monkeypatch.setattr(decoder_module, "DocumentCursor", TrackingCursor)
    document = json.dumps([{"meta": {"event": "presence"}, "payload": {}}] * 3)
    payloads = iter_payloads(document)
    next(payloads)
    payloads.close()
    assert closed == [True]


def test_records_do_not_reference_the_document() -> None:
    document = json.dumps(
        [{"meta": {"event": "track"}, "payload": {"fields": {"GPS_SPEED": 1}}}]
    )
    decoded = decode_document(document)
    decoded[0].record.fields["GPS_SPEED"] = 2
    assert decode_document(document)[0].record.fields == {"GPS_SPEED": 1}


def test_extractor_swap_does_not_leak_into_other_sessions() -> None:
    def swapped(obj, *, logger=None):
        return MessageRecord(channel="swapped")

    document = json.dumps([{"meta": {"event": "message"}, "payload": {"channel": "real"}}])
    custom = decode_document(document, extractors=with_extractor(PayloadType.MESSAGE, swapped))
    other = decode_document(document)
    assert custom[0].record.channel == "swapped"
    assert other[0].record.channel == "real"
