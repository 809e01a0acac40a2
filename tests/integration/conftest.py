"""Integration-test fixtures.

Each test runs against its own SQLite database (see tests/conftest.py).
"""

import pytest
from httpx import AsyncClient

from tests.integration.helpers import Api


@pytest.fixture
def api(client: AsyncClient) -> Api:
    return Api(client)
