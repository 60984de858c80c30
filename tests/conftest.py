"""Pytest configuration and shared fixtures."""

import random
from datetime import datetime, timezone

import pytest

from orderdesk.domain.entities.agent import Agent
from orderdesk.domain.entities.status import Status


@pytest.fixture
def fixed_now():
    return datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def seeded_rng():
    return random.Random(1234)


@pytest.fixture
def roster():
    return [Agent(id=1, name="Amina"), Agent(id=2, name="Youssef"), Agent(id=3, name="Salma")]


@pytest.fixture
def statuses():
    return [
        Status(id=1, name="Confirmed", recall_after_h=24),
        Status(id=2, name="No answer", recall_after_h=2),
        Status(id=3, name="Cancelled"),
    ]
