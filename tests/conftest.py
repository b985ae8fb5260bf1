"""Shared fixtures: canned Twilio bodies and a mocked HTTP session."""

from pathlib import Path
from typing import Callable
from unittest.mock import MagicMock, Mock

import pytest

from twilio_lookup.base import TwilioContext

FIXTURES = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> bytes:
    return (FIXTURES / name).read_bytes()


def fake_response(status_code: int, body: bytes) -> MagicMock:
    """Build a response double usable as a context manager."""
    response = MagicMock()
    response.status_code = status_code
    response.content = body
    response.__enter__.return_value = response
    return response


@pytest.fixture
def make_context() -> Callable[..., TwilioContext]:
    def _make(response=None, side_effect=None) -> TwilioContext:
        session = Mock()
        session.get = Mock(return_value=response, side_effect=side_effect)
        return TwilioContext(
            account_sid="AC00000000000000000000000000000000",
            auth_token="secret",
            lookup_url="https://lookups.example.test/",
            session=session,
            timeout=5,
        )

    return _make
