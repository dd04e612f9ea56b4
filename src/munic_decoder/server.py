"""
HTTP push receiver.

Purpose:
- Accept POSTed JSON documents from the pushing platform.
- Decode them in the request path (in memory, never blocking) and answer
  with per-type counts.

Logic flow:
1) create_app() wires settings, stats and an optional payload callback.
2) POST {settings.path} reads the whole body, then runs iter_payloads().
3) Each DecodedPayload goes to on_payload(); counts go to DecodeStats.
4) The response is always 200 with the document summary, so the platform
   does not re-push documents that can never be decoded.
5) GET /stats returns the DecodeStats snapshot.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Callable, Mapping
import logging
import time

from aiohttp import web

from .config import DecoderSettings
from .decoder import iter_payloads
from .extraction import Extractor
from .logging_config import setup_logging_from_settings
from .models import DecodedPayload, PayloadType
from .stats import DecodeStats, DocumentSummary

logger = logging.getLogger(__name__)

PayloadCallback = Callable[[DecodedPayload], None]

SETTINGS_KEY = web.AppKey("settings", DecoderSettings)
STATS_KEY = web.AppKey("stats", DecodeStats)
CALLBACK_KEY = web.AppKey("on_payload", object)
EXTRACTORS_KEY = web.AppKey("extractors", object)


async def handle_push(request: web.Request) -> web.Response:
    app = request.app
    settings = app[SETTINGS_KEY]
    on_payload = app[CALLBACK_KEY]
    body = await request.read()

    summary = DocumentSummary()
    for decoded in iter_payloads(
        body,
        extractors=app[EXTRACTORS_KEY],
        logger=logger,
        log_document=settings.log_documents,
    ):
        summary.add(decoded)
        if decoded.record is not None:
            logger.debug("decoded %s: %s", decoded.type.value, decoded.record)
        if on_payload is not None:
            on_payload(decoded)

    app[STATS_KEY].record(summary, received_ts=time.time())
    if summary.total == 0:
        logger.info("POST %s: no payload decoded from %d bytes", request.path, len(body))
    return web.json_response(asdict(summary))


async def handle_stats(request: web.Request) -> web.Response:
    return web.json_response(asdict(request.app[STATS_KEY].snapshot()))


def create_app(
    settings: DecoderSettings | None = None,
    *,
    stats: DecodeStats | None = None,
    on_payload: PayloadCallback | None = None,
    extractors: Mapping[PayloadType, Extractor] | None = None,
) -> web.Application:
    """
    Build the aiohttp application.

    Inputs:
    - settings: DecoderSettings (defaults if omitted).
    - stats: shared DecodeStats, handy for tests and monitoring.
    - on_payload: called once per decoded element, in document order.
    - extractors: per-app extractor mapping (see with_extractor()).
    """

    settings = settings or DecoderSettings()
    app = web.Application(client_max_size=settings.max_body_bytes)
    app[SETTINGS_KEY] = settings
    app[STATS_KEY] = stats or DecodeStats()
    app[CALLBACK_KEY] = on_payload
    app[EXTRACTORS_KEY] = extractors
    app.router.add_post(settings.path, handle_push)
    app.router.add_get("/stats", handle_stats)
    return app


def run(settings: DecoderSettings, *, on_payload: PayloadCallback | None = None) -> None:
    """
    Configure logging and serve until interrupted.
    """

    setup_logging_from_settings(settings)
    logger.info("Listening on %s:%d%s", settings.host, settings.port, settings.path)
    web.run_app(
        create_app(settings, on_payload=on_payload),
        host=settings.host,
        port=settings.port,
        print=None,
    )
