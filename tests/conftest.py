import os
from pathlib import Path

import pytest

from munic_decoder import config


PRESENCE_PAYLOAD = {
    "id": 343888541230530561,
    "connection_id": 343888541230530560,
    "id_str": "343888541230530561",
    "connection_id_str": "343888541230530560",
    "asset": "359551031717123",
    "time": "2016-03-01T10:00:00Z",
    "type": "connect",
    "reason": "authenticated",
}


@pytest.fixture
def presence_payload() -> dict:
    return dict(PRESENCE_PAYLOAD)


@pytest.fixture
def tmp_config_dir(tmp_path: Path) -> Path:
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture(autouse=True)
def clear_env(monkeypatch: pytest.MonkeyPatch):
    keys = [
        "MUNIC_CONFIG",
        "MUNIC_LOG_LEVEL",
        "MUNIC_JSON_LOGS",
        "MUNIC_LOG_DOCUMENTS",
        "MUNIC_HOST",
        "MUNIC_PORT",
        "MUNIC_PATH",
        "MUNIC_MAX_BODY_BYTES",
    ]
    original = {key: os.getenv(key) for key in keys}
    for key in keys:
        if key in os.environ:
            del os.environ[key]
    # A developer's local .env must not leak into tests.
    monkeypatch.setattr(config, "_ENV_LOADED", True)
    yield
    for key, value in original.items():
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value
