from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import httpx
import pytest

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def mock_sleep() -> Generator[Mock, None, None]:
    """Patch time.sleep to make tests run faster."""
    with patch("time.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def mock_transport() -> Mock:
    """Create a mock transport answering 200 to every request."""
    return Mock(send=Mock(return_value=httpx.Response(200, content=b"{}")))


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
    """Requests received by a transport built with ``make_http_transport``."""
    return []


@pytest.fixture
def mock_callback() -> Mock:
    """Create a mock callback function for testing callbacks."""
    return Mock()
