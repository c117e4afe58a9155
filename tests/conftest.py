"""
Shared fixtures for healthgate tests.
"""

import pytest

from .helpers import FakeClock, RecordingClient


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def client():
    recording = RecordingClient()
    yield recording
    recording.close()
