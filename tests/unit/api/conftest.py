"""Fixtures for API tests."""

import pytest
from fastapi.testclient import TestClient

from pairdex.api.endpoints import Exchange, get_exchange
from pairdex.api.main import app
from tests.helpers import DEPLOYER, make_chain


@pytest.fixture
def exchange() -> Exchange:
    return Exchange.create(make_chain())


@pytest.fixture
def client(exchange):
    """Test client bound to a fresh exchange."""
    app.dependency_overrides[get_exchange] = lambda: exchange
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def assets(client) -> tuple[str, str]:
    """Two deployed assets."""
    addresses = []
    for symbol in ("AAA", "BBB"):
        response = client.post(
            "/assets", json={"deployer": DEPLOYER, "name": f"{symbol} Token", "symbol": symbol}
        )
        assert response.status_code == 200
        addresses.append(response.json()["address"])
    return addresses[0], addresses[1]


@pytest.fixture
def pair(client, assets) -> dict:
    """Created pair: {"pair", "token0", "token1"}."""
    response = client.post(
        "/pairs", json={"sender": DEPLOYER, "token_a": assets[0], "token_b": assets[1]}
    )
    assert response.status_code == 200
    return response.json()
