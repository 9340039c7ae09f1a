from __future__ import annotations

import httpx
import pytest

from src.adapters.costs import LengthCostOracle, OverpassSpeedLimitCostOracle
from src.adapters.costs.overpass_speed_limit_oracle import parse_maxspeed
from src.domain.models import GeoPoint, RoadEdge

SOURCE = GeoPoint(lat=32.86, lon=-117.22)
TARGET = GeoPoint(lat=32.87, lon=-117.22)
EDGE = RoadEdge(target=TARGET, road_name="Gilman Dr", road_type="secondary", length_km=11.0)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for name in (
        "OVERPASS_URL",
        "OVERPASS_TIMEOUT_S",
        "OVERPASS_RADIUS_M",
        "DEFAULT_SPEED_LIMIT",
    ):
        monkeypatch.delenv(name, raising=False)


def _oracle(handler) -> OverpassSpeedLimitCostOracle:
    return OverpassSpeedLimitCostOracle(
        url="http://overpass.test/api/interpreter",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("50", 50.0),
        ("30 mph", 30 * 1.609344),
        ("25mph", 25 * 1.609344),
        ("50;30", 50.0),
        (70, 70.0),
        ("signals", None),
        ("RU:urban", None),
        ("0", None),
        (None, None),
    ],
)
def test_parse_maxspeed(raw, expected) -> None:
    if expected is None:
        assert parse_maxspeed(raw) is None
    else:
        assert parse_maxspeed(raw) == pytest.approx(expected)


def test_cost_is_length_over_looked_up_speed() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json={
                "elements": [
                    {"type": "way", "tags": {"highway": "footway"}},
                    {"type": "way", "tags": {"highway": "secondary", "maxspeed": "110"}},
                ]
            },
        )

    oracle = _oracle(handler)

    assert oracle.edge_cost(SOURCE, EDGE) == pytest.approx(0.1)
    (req,) = requests
    query = req.url.params["data"]
    assert "around:333,32.87,-117.22" in query
    assert query.startswith("[out:json]")


def test_lookups_are_cached_by_rounded_coordinate() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(200, json={"elements": [{"tags": {"maxspeed": "40"}}]})

    oracle = _oracle(handler)
    nearby = GeoPoint(lat=32.870001, lon=-117.220001)

    assert oracle.speed_limit_at(TARGET) == 40.0
    assert oracle.speed_limit_at(nearby) == 40.0
    assert calls == 1


def test_timeout_falls_back_to_default_speed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    oracle = _oracle(handler)

    assert oracle.speed_limit_at(TARGET) == 55.0
    assert oracle.edge_cost(SOURCE, EDGE) == pytest.approx(11.0 / 55.0)


def test_http_error_falls_back_to_default_speed() -> None:
    oracle = _oracle(lambda request: httpx.Response(429, text="Too Many Requests"))
    assert oracle.speed_limit_at(TARGET) == 55.0


def test_invalid_json_falls_back_to_default_speed() -> None:
    oracle = _oracle(lambda request: httpx.Response(200, text="<html>busy</html>"))
    assert oracle.speed_limit_at(TARGET) == 55.0


def test_missing_tag_uses_configured_default(monkeypatch) -> None:
    monkeypatch.setenv("DEFAULT_SPEED_LIMIT", "30")
    oracle = _oracle(lambda request: httpx.Response(200, json={"elements": []}))

    assert oracle.default_speed_kmh == 30.0
    assert oracle.speed_limit_at(TARGET) == 30.0


def test_env_overrides_timeout_and_radius(monkeypatch) -> None:
    monkeypatch.setenv("OVERPASS_TIMEOUT_S", "1.5")
    monkeypatch.setenv("OVERPASS_RADIUS_M", "100")

    oracle = OverpassSpeedLimitCostOracle()

    assert oracle.timeout_s == 1.5
    assert oracle.radius_m == 100
    assert oracle.url == "https://overpass-api.de/api/interpreter"
    assert oracle.distance_based is False


def test_length_oracle_returns_edge_length() -> None:
    oracle = LengthCostOracle()
    assert oracle.edge_cost(SOURCE, EDGE) == 11.0
    assert oracle.distance_based is True


def test_constructor_values_win_over_env(monkeypatch) -> None:
    monkeypatch.setenv("OVERPASS_TIMEOUT_S", "1.5")
    monkeypatch.setenv("OVERPASS_RADIUS_M", "100")
    monkeypatch.setenv("DEFAULT_SPEED_LIMIT", "30")

    oracle = OverpassSpeedLimitCostOracle(
        timeout_s=9.0, radius_m=500, default_speed_kmh=80.0
    )

    assert oracle.timeout_s == 9.0
    assert oracle.radius_m == 500
    assert oracle.default_speed_kmh == 80.0


@pytest.mark.parametrize("value", ["0", "-10"])
def test_non_positive_default_speed_from_env_is_rejected(monkeypatch, value) -> None:
    monkeypatch.setenv("DEFAULT_SPEED_LIMIT", value)

    with pytest.raises(ValueError, match="default_speed_kmh"):
        OverpassSpeedLimitCostOracle()


@pytest.mark.parametrize(
    "kwargs", [{"timeout_s": 0}, {"radius_m": -1}, {"default_speed_kmh": 0.0}]
)
def test_non_positive_settings_are_rejected(kwargs) -> None:
    with pytest.raises(ValueError):
        OverpassSpeedLimitCostOracle(**kwargs)


def test_http_client_is_shared_until_closed() -> None:
    oracle = _oracle(lambda request: httpx.Response(200, json={"elements": []}))

    client = oracle._http()
    assert oracle._http() is client

    oracle.close()
    assert client.is_closed
    assert oracle._http() is not client

    oracle.close()
    oracle.close()
