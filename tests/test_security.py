"""
Tests for per-IP request throttling
"""

import pytest

from event_creator.utils.security import rate_limit_check, rate_limiter

@pytest.fixture(autouse=True)
def clear_limiter():
    rate_limiter.clear()
    yield
    rate_limiter.clear()

def test_limit_within_window():
    assert rate_limit_check("10.0.0.1", limit=2, now=100.0)
    assert rate_limit_check("10.0.0.1", limit=2, now=110.0)
    assert not rate_limit_check("10.0.0.1", limit=2, now=120.0)
    # Other clients are counted separately
    assert rate_limit_check("10.0.0.2", limit=2, now=120.0)

def test_window_slides():
    rate_limit_check("10.0.0.1", limit=1, now=100.0)

    assert not rate_limit_check("10.0.0.1", limit=1, now=159.0)
    assert rate_limit_check("10.0.0.1", limit=1, now=161.0)

def test_idle_clients_are_evicted():
    rate_limit_check("10.0.0.1", now=100.0)
    rate_limit_check("10.0.0.2", now=130.0)

    rate_limit_check("10.0.0.3", now=170.0)

    assert set(rate_limiter) == {"10.0.0.2", "10.0.0.3"}
