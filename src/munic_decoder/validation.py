"""
Validation helpers for DecoderSettings.

Purpose:
- Catch settings that load fine but will misbehave at runtime.
- Keep the checks in one place so scripts can print them before serving.
"""

from __future__ import annotations

import logging

from .config import DecoderSettings


def validate_settings(settings: DecoderSettings) -> list[str]:
    """
    Inspect settings and return warnings.

    Inputs:
    - settings: output of load_settings() or a hand-built DecoderSettings.

    Outputs:
    - List of warning strings (empty list means no issues detected).

    Next:
    - Callers can treat warnings as errors or surface them to users.
    """

    warnings: list[str] = []

    # setup_logging() passes the name straight to logging.basicConfig().
    if not isinstance(logging.getLevelName(settings.log_level.upper()), int):
        warnings.append(f"log_level '{settings.log_level}' is not a known logging level.")

    if not 0 < settings.port < 65536:
        warnings.append(f"port {settings.port} is outside 1..65535.")

    # aiohttp routes must be absolute.
    if not settings.path.startswith("/"):
        warnings.append(f"path '{settings.path}' should start with '/'.")

    if settings.max_body_bytes <= 0:
        warnings.append(
            f"max_body_bytes {settings.max_body_bytes} disables the body size limit."
        )

    # Raw documents carry asset identifiers and positions.
    if settings.log_documents and settings.json_logs:
        warnings.append("log_documents writes raw pushed documents into the JSON log stream.")

    return warnings
