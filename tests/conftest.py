from __future__ import annotations

import pytest

from core.engine import AnalyticsEngine
from tests.helpers import make_record


@pytest.fixture
def sample_records():
    return [
        make_record(1, product="Laptop Pro", amount=100, region="NA", date="2024-01-05", category="Electronics"),
        make_record(2, product="Gaming Console", amount=200, region="EU", date="2024-01-20", category="Gaming"),
        make_record(3, product="Laptop Pro", amount=300, region="NA", date="2024-02-11", category="Electronics"),
        make_record(4, product="Wireless Mouse", amount=2500, region="EU", date="2024-07-01", category="Accessories"),
        make_record(5, product="Gaming Console", amount=1800, region="APAC", date="2024-09-15", category="Electronics"),
        make_record(6, product="Smart Watch", amount=50, region="NA", date="2024-02-28", category="Gaming"),
    ]


@pytest.fixture
def engine(sample_records):
    eng = AnalyticsEngine()
    eng.load(sample_records)
    return eng
