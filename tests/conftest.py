import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.time import FakeClock  # noqa: E402
from features.ctcerts.infrastructure.issuer_store import create_test_issuer  # noqa: E402


FIXED_NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def fake_clock():
    """秒単位に揃えた固定時刻のクロック"""
    return FakeClock(FIXED_NOW)


@pytest.fixture(scope="session")
def issuer():
    """テスト用の自己署名P-256発行者"""
    return create_test_issuer(common_name="Test Issuer", clock=FakeClock(FIXED_NOW))


@pytest.fixture(autouse=True)
def _isolate_ctcert_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("CTCERT_"):
            monkeypatch.delenv(key, raising=False)
