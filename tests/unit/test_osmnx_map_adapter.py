from __future__ import annotations

from pathlib import Path

import networkx as nx
import pytest

from src.adapters.maps import osmnx_map_adapter
from src.adapters.maps.osmnx_map_adapter import OSMnxMapAdapter
from src.domain.models import GeoPoint


def _street_graph() -> nx.MultiDiGraph:
    g = nx.MultiDiGraph()
    g.add_node(1, x=-117.22, y=32.86)
    g.add_node(2, x=-117.21, y=32.86)
    g.add_edge(1, 2, length=940.0, name="Gilman Drive", highway="secondary")
    g.add_edge(2, 1, length=940.0, name="Gilman Drive", highway="secondary")
    return g


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path: Path) -> None:
    for name in ("OSM_GRAPH_PATH", "OSM_PLACE", "OSM_NETWORK_TYPE", "MAPGRAPH_STRICT_EDGES"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("OSMNX_CACHE_FOLDER", str(tmp_path / "osm_cache"))


def test_loads_prebuilt_graphml(monkeypatch, tmp_path: Path) -> None:
    path = tmp_path / "city.graphml"
    path.write_text("<graphml/>", encoding="utf-8")
    loaded: list[str] = []

    def fake_load(p):
        loaded.append(str(p))
        return _street_graph()

    monkeypatch.setattr(osmnx_map_adapter.ox, "load_graphml", fake_load)

    graph = OSMnxMapAdapter(graph_path=str(path)).get_road_graph()

    assert loaded == [str(path)]
    assert graph.vertex_count() == 2
    assert graph.edge_count() == 2
    a = GeoPoint(lat=32.86, lon=-117.22)
    assert graph.neighbors(a)[0].length_km == pytest.approx(0.94)


def test_downloads_place_with_network_type(monkeypatch) -> None:
    calls: list[tuple[str, str]] = []

    def fake_from_place(place, network_type, simplify):
        calls.append((place, network_type))
        return _street_graph()

    monkeypatch.setattr(osmnx_map_adapter.ox, "graph_from_place", fake_from_place)
    monkeypatch.setenv("OSM_PLACE", "La Jolla, San Diego, California")
    monkeypatch.setenv("MAPGRAPH_STRICT_EDGES", "1")

    graph = OSMnxMapAdapter().get_road_graph()

    assert calls == [("La Jolla, San Diego, California", "drive")]
    assert graph.strict_endpoints is True
    assert graph.edge_count() == 2


def test_missing_configuration_raises() -> None:
    with pytest.raises(RuntimeError):
        OSMnxMapAdapter().get_road_graph()


def test_rejects_non_graphml_path() -> None:
    with pytest.raises(RuntimeError):
        OSMnxMapAdapter(graph_path="city.pkl").get_road_graph()
