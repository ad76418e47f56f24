"""HTTP-level tests for the JSON and plain-text supply endpoints."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from config.settings import Settings
from src.api.app import create_app
from src.api.dependencies import get_estimator, get_resolver
from src.parsers.ethplorer.client import EthplorerError
from src.supply.estimator import CirculatingSupplyEstimator
from src.supply.models import BreakdownGroup, HolderClass, HolderRecord, SupplyBreakdown
from src.supply.resolver import TokenDescriptorResolver

TOTAL = 500 * 10**18
DEAD = "0x000000000000000000000000000000000000dead"


@pytest.fixture
def resolver(descriptor) -> MagicMock:
    mock = MagicMock()
    mock.resolve = AsyncMock(return_value=descriptor)
    return mock


@pytest.fixture
def breakdown() -> SupplyBreakdown:
    burn = BreakdownGroup()
    burn.add(
        HolderRecord(
            address=DEAD,
            share=Decimal("40"),
            quantity=200 * 10**18,
            classification=HolderClass.BURN,
        )
    )
    return SupplyBreakdown(
        circulating_supply=300 * 10**18,
        circulating_percentage="60.00",
        non_circulating={"BURN": burn},
    )


@pytest.fixture
def estimator(breakdown) -> MagicMock:
    mock = MagicMock()
    mock.estimate = AsyncMock(return_value=breakdown)
    return mock


@pytest.fixture
def app(token, resolver, estimator):
    application = create_app(Settings(_env_file=None, default_token=token))
    application.dependency_overrides[get_resolver] = lambda: resolver
    application.dependency_overrides[get_estimator] = lambda: estimator
    return application


@pytest.fixture
def client(app) -> TestClient:
    # No context manager: the lifespan (real RPC / explorer clients) is not started
    return TestClient(app)


class TestTotalSupply:
    def test_default_token(self, client, resolver, token) -> None:
        resp = client.get("/api/total-supply")

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("application/json")
        assert resp.json() == {
            "address": token,
            "name": "Example Token",
            "symbol": "EXT",
            "decimals": 18,
            "totalSupply": {"raw": str(TOTAL), "formatted": "500.0"},
        }
        assert '\n  "address": ' in resp.text
        resolver.resolve.assert_awaited_once_with(token)

    def test_explicit_token(self, client, resolver) -> None:
        other = "0x1110000000000000000000000000000000000001"
        resp = client.get("/api/total-supply", params={"token": other})

        assert resp.status_code == 200
        assert resp.json()["address"] == other
        resolver.resolve.assert_awaited_once_with(other)

    def test_resolution_failure(self, app, client) -> None:
        erc20 = MagicMock()
        erc20.call = AsyncMock()
        app.dependency_overrides[get_resolver] = lambda: TokenDescriptorResolver(erc20)

        resp = client.get("/api/total-supply", params={"token": "bad"})

        assert resp.status_code == 500
        assert resp.headers["content-type"].startswith("text/plain")
        assert resp.text == (
            "Error fetching total supply: "
            "Failed to get token details: Invalid token address format: bad"
        )


class TestCirculatingSupply:
    def test_estimated(self, client, token) -> None:
        resp = client.get("/api/circulating-supply")

        assert resp.status_code == 200
        assert resp.json() == {
            "address": token,
            "name": "Example Token",
            "symbol": "EXT",
            "decimals": 18,
            "circulatingSupply": {"raw": str(300 * 10**18), "formattedSupply": "300.0"},
        }

    def test_percentage_override(self, client, estimator) -> None:
        resp = client.get("/api/circulating-supply", params={"percentage": "25"})

        assert resp.status_code == 200
        assert resp.json()["circulatingSupply"] == {
            "raw": str(125 * 10**18),
            "formattedSupply": "125.0",
        }
        estimator.estimate.assert_not_awaited()

    def test_invalid_percentage_falls_back_to_estimate(self, client, estimator) -> None:
        resp = client.get("/api/circulating-supply", params={"percentage": "150"})

        assert resp.json()["circulatingSupply"]["raw"] == str(300 * 10**18)
        estimator.estimate.assert_awaited_once()

    def test_failure_is_plain_text(self, client, resolver) -> None:
        resolver.resolve.side_effect = RuntimeError("rpc down")

        resp = client.get("/api/circulating-supply")

        assert resp.status_code == 500
        assert resp.text == "Error fetching circulating supply: rpc down"


class TestTokenInfo:
    def test_without_calculation(self, client, estimator) -> None:
        body = client.get("/api/token-info").json()

        assert body["totalSupply"] == {"raw": str(TOTAL), "formatted": "500.0"}
        assert "circulatingSupply" not in body
        assert "nonCirculatingSupply" not in body
        estimator.estimate.assert_not_awaited()

    def test_with_calculation(self, client) -> None:
        body = client.get("/api/token-info", params={"calculate": "true"}).json()

        assert body["circulatingSupply"] == {
            "raw": str(300 * 10**18),
            "formatted": "300.0",
            "percentOfTotal": "60.00%",
        }
        burn = body["nonCirculatingSupply"]["breakdown"]["BURN"]
        assert burn["totalQuantity"] == str(200 * 10**18)
        assert burn["totalPercentage"] == "40.00"
        assert burn["addresses"] == [
            {"address": DEAD, "quantity": str(200 * 10**18), "percentage": 40.0}
        ]

    def test_failure_is_json(self, client, resolver) -> None:
        resolver.resolve.side_effect = RuntimeError("boom")

        resp = client.get("/api/token-info")

        assert resp.status_code == 500
        assert resp.json() == {"error": True, "message": "Error fetching token info: boom"}


class TestCirculatingCalculation:
    def test_full_sections(self, client) -> None:
        body = client.get("/api/circulating-calculation").json()

        assert body["totalSupply"]["raw"] == str(TOTAL)
        assert body["circulatingSupply"]["percentOfTotal"] == "60.00%"
        non_circ = body["nonCirculatingSupply"]
        assert non_circ["raw"] == str(200 * 10**18)
        assert non_circ["formatted"] == "200.0"
        assert non_circ["percentOfTotal"] == "40.00%"
        assert set(non_circ["breakdown"]) == {"BURN"}

    def test_holder_provider_failure_degrades(self, app, client, ethplorer, etherscan) -> None:
        ethplorer.get_top_holders.side_effect = EthplorerError("ETHPLORER HTTP 500")
        real = CirculatingSupplyEstimator(ethplorer, etherscan)
        app.dependency_overrides[get_estimator] = lambda: real

        resp = client.get("/api/circulating-calculation")

        assert resp.status_code == 200
        body = resp.json()
        assert body["circulatingSupply"]["raw"] == body["totalSupply"]["raw"]
        assert body["circulatingSupply"]["percentOfTotal"] == "100.00%"
        assert body["nonCirculatingSupply"]["raw"] == "0"
        assert body["nonCirculatingSupply"]["percentOfTotal"] == "0.00%"
        assert body["nonCirculatingSupply"]["breakdown"] == {}

    def test_failure_is_json(self, client, resolver) -> None:
        resolver.resolve.side_effect = RuntimeError("boom")

        resp = client.get("/api/circulating-calculation")

        assert resp.status_code == 500
        assert resp.json() == {
            "error": True,
            "message": "Error calculating circulating supply: boom",
        }


class TestAggregatorEndpoints:
    def test_total_is_plain_decimal(self, client) -> None:
        resp = client.get("/cmc/total")

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/plain")
        assert resp.text == "500.0"

    def test_circulating_is_bare_integer(self, client) -> None:
        resp = client.get("/cmc/circulating")

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/plain")
        assert resp.text == str(300 * 10**18)

    def test_circulating_override(self, client, estimator) -> None:
        resp = client.get("/cmc/circulating", params={"percentage": "33.335"})

        assert resp.text == str(TOTAL * 3333 // 10000)
        estimator.estimate.assert_not_awaited()

    def test_circulating_override_reads_leading_number(self, client, estimator) -> None:
        resp = client.get("/cmc/circulating", params={"percentage": "50%"})

        assert resp.text == str(TOTAL // 2)
        estimator.estimate.assert_not_awaited()

    def test_total_failure(self, client, resolver) -> None:
        resolver.resolve.side_effect = RuntimeError("rpc down")

        resp = client.get("/cmc/total")

        assert resp.status_code == 500
        assert resp.text == "Error fetching total supply: rpc down"


class TestUnmatchedRoutes:
    @pytest.mark.parametrize("path", ["/", "/api", "/api/unknown", "/cmc/market-cap"])
    def test_unknown_path(self, client, path: str) -> None:
        resp = client.get(path)

        assert resp.status_code == 404
        assert resp.text == "Not Found"

    def test_wrong_method(self, client) -> None:
        resp = client.post("/api/total-supply")

        assert resp.status_code == 404
        assert resp.text == "Not Found"
