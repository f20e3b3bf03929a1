"""Shared fixtures for the webhook trader tests."""

import pytest

from algofinance.memory.activity_log import ActivityLog

from tests.fakes import FakeAdvisor, FakeBroker


@pytest.fixture
def broker():
    return FakeBroker()


@pytest.fixture
def advisor():
    return FakeAdvisor()


@pytest.fixture
def activity_log():
    return ActivityLog(capacity=50)


@pytest.fixture
def signal_payload():
    return {"ticker": "AAPL", "action": "buy", "contracts": 10, "price": 150}
