"""
Pytest configuration and shared fixtures for all tests.
"""

import datetime as dt

import pytest

from geomail.config import Settings
from geomail.services.notifier import GeolocationEmailHandler


class FakeTransport:
    """Records envelopes; raises ``error`` instead when one is set."""

    def __init__(self, error=None):
        self.sent = []
        self.error = error

    async def send(self, envelope):
        self.sent.append(envelope)
        if self.error is not None:
            raise self.error


FIXED_NOW = dt.datetime(2024, 3, 5, 14, 7, 9)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        EMAIL_USER="sender@example.com",
        EMAIL_PASS="secret",
        RECIPIENT_EMAIL="owner@example.com",
    )


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def handler(settings, transport):
    return GeolocationEmailHandler(settings, transport, clock=lambda: FIXED_NOW)
