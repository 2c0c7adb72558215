from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from sms_relay.config import Settings
from sms_relay.main import create_app

from .fakes import FROM_NUMBER, FakeProvider


@pytest.fixture
def public_dir(tmp_path: Path) -> Path:
    path = tmp_path / "public"
    path.mkdir()
    (path / "index.html").write_text("<h1>Send an SMS</h1>", encoding="utf-8")
    (path / "app.js").write_text("console.log('hi');", encoding="utf-8")
    return path


@pytest.fixture
def settings(public_dir: Path) -> Settings:
    return Settings(
        account_sid="ACxxx",
        auth_token="tok",
        phone_number=FROM_NUMBER,
        public_dir=public_dir,
    )


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def client(settings: Settings, provider: FakeProvider) -> TestClient:
    return TestClient(create_app(settings=settings, provider=provider))
