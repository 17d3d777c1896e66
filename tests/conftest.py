from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import List

import pytest


def pytest_configure():
    # Ensure project root is on sys.path for absolute imports like 'services.index_client'
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))
    # Set test environment knobs
    os.environ.setdefault("RUN_ENV", "test")


@pytest.fixture(autouse=True)
def _fresh_settings():
    from config.settings import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_session():
    from fakes import FakeSession
    return FakeSession()


@pytest.fixture
def tax_lines() -> List[str]:
    return [
        "10200345,Acme A/S,20304050,2022,,A/S,,,1000000,0,220000",
        "10200353,Beta ApS,20304069,2022,,ApS,,,,150000,",
        "10200361,Gamma Holding A/S,20304077,2021,,A/S,,,-5000,5000,0",
    ]
