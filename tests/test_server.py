import json

import pytest
from aiohttp.test_utils import TestClient, TestServer

from munic_decoder.config import DecoderSettings
from munic_decoder.extraction import with_extractor
from munic_decoder.models import MessageRecord, PayloadType
from munic_decoder.server import create_app
from munic_decoder.stats import DecodeStats


async def _client(app) -> TestClient:
    client = TestClient(TestServer(app))
    await client.start_server()
    return client


@pytest.mark.asyncio
async def test_push_returns_document_summary(presence_payload):
    seen = []
    stats = DecodeStats()
    app = create_app(DecoderSettings(path="/push"), stats=stats, on_payload=seen.append)
    client = await _client(app)
    try:
        body = json.dumps(
            [
                {"meta": {"event": "presence"}, "payload": presence_payload},
                {"meta": {"event": "bogus"}},
            ]
        )
        response = await client.post("/push", data=body)
        assert response.status == 200
        summary = await response.json()
        assert summary == {"presence": 1, "message": 0, "track": 0, "error": 1, "absent": 0}
        assert [d.type for d in seen] == [PayloadType.PRESENCE, PayloadType.ERROR]
        assert seen[0].record.asset == "359551031717123"

        response = await client.get("/stats")
        snapshot = await response.json()
        assert snapshot["documents"] == 1
        assert snapshot["presence"] == 1
        assert snapshot["errors"] == 1
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_malformed_body_is_acknowledged():
    stats = DecodeStats()
    client = await _client(create_app(stats=stats))
    try:
        response = await client.post("/", data="not json")
        assert response.status == 200
        summary = await response.json()
        assert summary["presence"] == 0
        assert summary["error"] == 0
        assert stats.snapshot().rejected_documents == 1
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_oversize_body_is_rejected():
    client = await _client(create_app(DecoderSettings(max_body_bytes=16)))
    try:
        response = await client.post("/", data="[" + " " * 64 + "]")
        assert response.status == 413
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_app_extractors_apply_only_to_that_app():
    def swapped(obj, *, logger=None):
        return MessageRecord(channel="swapped")

    seen_custom, seen_default = [], []
    custom_app = create_app(
        on_payload=seen_custom.append,
        extractors=with_extractor(PayloadType.MESSAGE, swapped),
    )
    default_app = create_app(on_payload=seen_default.append)
    body = json.dumps([{"meta": {"event": "message"}, "payload": {"channel": "real"}}])
    for app in (custom_app, default_app):
        client = await _client(app)
        try:
            response = await client.post("/", data=body)
            assert response.status == 200
        finally:
            await client.close()
    assert seen_custom[0].record.channel == "swapped"
    assert seen_default[0].record.channel == "real"
