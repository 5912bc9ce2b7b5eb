"""Unit tests for API endpoints."""

import pytest
from fastapi.testclient import TestClient

from edugraph.api.main import create_app
from edugraph.api.routes import (
    ClockRequest,
    ConceptEdgeModel,
    ConceptNodeModel,
    GraphPayloadRequest,
    HealthResponse,
    SearchRequest,
    StepRequest,
    ZoomRequest,
)


class TestRequestModels:
    """Tests for request/response models."""

    def test_node_defaults(self) -> None:
        """Test optional node fields."""
        node = ConceptNodeModel(id="ml")
        assert node.category == "definition"
        assert node.timestamps == []

    def test_numeric_ids_become_strings(self) -> None:
        """Test integer and float ids are accepted as strings."""
        assert ConceptNodeModel(id=7).id == "7"
        edge = ConceptEdgeModel(source=1, target=2.5)
        assert (edge.source, edge.target) == ("1", "2.5")
        with pytest.raises(ValueError):
            ConceptNodeModel(id=True)

    def test_payload_defaults(self) -> None:
        """Test an empty payload is valid."""
        payload = GraphPayloadRequest()
        assert payload.nodes == []
        assert payload.edges == []

    def test_clock_rejects_negative(self) -> None:
        """Test playback time must be non-negative."""
        with pytest.raises(ValueError):
            ClockRequest(time=-1)

    def test_zoom_action(self) -> None:
        """Test zoom accepts only known actions."""
        assert ZoomRequest(action="in").action == "in"
        with pytest.raises(ValueError):
            ZoomRequest(action="sideways")

    def test_search_default(self) -> None:
        """Test an omitted term clears the filter."""
        assert SearchRequest().term == ""

    def test_step_bounds(self) -> None:
        """Test step count limits."""
        assert StepRequest().ticks == 1
        with pytest.raises(ValueError):
            StepRequest(ticks=0)

    def test_health_response(self) -> None:
        """Test health response defaults."""
        resp = HealthResponse(status="healthy", graph_loaded=False)
        assert resp.version == "0.1.0"


class TestEndpoints:
    """Tests for API endpoints."""

    @pytest.fixture
    def client(self, ml_payload):
        app = create_app()
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.post("/v1/graph", json=ml_payload)
            assert response.status_code == 200
            yield client

    def test_health_without_graph(self) -> None:
        """Test health check before anything is loaded."""
        app = create_app()
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/health")
            assert response.status_code == 200
            assert response.json() == {"status": "healthy", "graph_loaded": False, "version": "0.1.0"}

    def test_requires_graph(self) -> None:
        """Test read endpoints 404 until a graph is loaded."""
        app = create_app()
        with TestClient(app, raise_server_exceptions=False) as client:
            assert client.get("/v1/graph/scene").status_code == 404
            assert client.post("/v1/graph/clock", json={"time": 3}).status_code == 404

    def test_load_graph(self, ml_payload) -> None:
        """Test loading reports counts and starts in overview."""
        app = create_app()
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.post("/v1/graph", json=ml_payload)
            assert response.status_code == 200
            assert response.json() == {"nodes": 10, "edges": 9, "overview_nodes": 7, "mode": "overview"}
            assert client.get("/health").json()["graph_loaded"] is True

    def test_get_graph(self, client: TestClient) -> None:
        """Test the snapshot is returned in payload form."""
        data = client.get("/v1/graph").json()
        assert len(data["nodes"]) == 10
        assert len(data["edges"]) == 9

    def test_scene(self, client: TestClient, ml_first_order_ids) -> None:
        """Test the scene holds the overview nodes."""
        client.post("/v1/graph/step", json={"ticks": 5})
        data = client.get("/v1/graph/scene").json()
        assert data["view"]["mode"] == "overview"
        assert sorted(node["id"] for node in data["nodes"]) == sorted(ml_first_order_ids)
        assert data["stats"]["title"] == "Course Overview"

    def test_clock(self, client: TestClient) -> None:
        """Test the clock reports activation changes."""
        response = client.post("/v1/graph/clock", json={"time": 100})
        assert response.status_code == 200
        assert response.json() == {"changed": ["ai", "neural"], "active": ["ai", "neural"]}

        again = client.post("/v1/graph/clock", json={"time": 101}).json()
        assert again["changed"] == []

    def test_clock_validation(self, client: TestClient) -> None:
        """Test negative times are rejected."""
        assert client.post("/v1/graph/clock", json={"time": -5}).status_code == 422

    def test_click_and_back(self, client: TestClient) -> None:
        """Test clicking enters detail view and back returns to overview."""
        response = client.post("/v1/graph/nodes/neural/click")
        assert response.status_code == 200
        data = response.json()
        assert data["mode"] == "detail"
        assert data["focus_node_id"] == "neural"
        assert data["selected_node_id"] == "neural"
        assert data["title"] == "Detailed View"
        assert data["exploring"] == "Exploring: Neural Networks"
        assert sorted(data["node_ids"]) == ["ai", "backprop", "deep", "ml", "neural"]

        back = client.post("/v1/graph/back").json()
        assert back["mode"] == "overview"
        assert back["focus_node_id"] is None
        assert back["exploring"] is None

    def test_click_unknown_node(self, client: TestClient) -> None:
        """Test clicking a missing concept is a 404."""
        response = client.post("/v1/graph/nodes/nope/click")
        assert response.status_code == 404
        assert client.post("/v1/graph/back").json()["mode"] == "overview"

    def test_node_details(self, client: TestClient) -> None:
        """Test concept details include reference statistics."""
        data = client.get("/v1/graph/nodes/neural").json()
        assert data["node"]["label"] == "Neural Networks"
        assert data["summary"]["referenceCount"] == 3
        assert data["summary"]["span"] == "5min"
        assert client.get("/v1/graph/nodes/nope").status_code == 404

    def test_seek(self, client: TestClient) -> None:
        """Test seeking returns the first listed reference."""
        data = client.post("/v1/graph/nodes/training/seek").json()
        assert data == {"node_id": "training", "time": 150.0}
        assert client.post("/v1/graph/nodes/nope/seek").status_code == 404

    def test_zoom(self, client: TestClient) -> None:
        """Test zoom buttons return the target transform."""
        data = client.post("/v1/graph/zoom", json={"action": "in"}).json()
        assert data["k"] == pytest.approx(1.5)

        reset = client.post("/v1/graph/zoom", json={"action": "reset"}).json()
        assert reset == {"x": 0.0, "y": 0.0, "k": 1.0}

    def test_step(self, client: TestClient) -> None:
        """Test stepping advances the layout."""
        data = client.post("/v1/graph/step", json={"ticks": 5}).json()
        assert data["ticks"] == 5
        assert data["active"] is True
        assert 0 < data["alpha"] < 1

    def test_timeline(self, client: TestClient) -> None:
        """Test the timeline defaults its duration to the last reference."""
        client.post("/v1/graph/clock", json={"time": 30})
        data = client.get("/v1/graph/timeline").json()
        assert data["duration"] == 510
        assert data["label"] == "0:30 / 8:30"
        assert data["markers"][0]["nodeId"] == "ml"
        assert len(data["markers"]) == 20

        explicit = client.get("/v1/graph/timeline", params={"duration": 600}).json()
        assert explicit["duration"] == 600

    def test_metrics(self, client: TestClient) -> None:
        """Test structural metrics of the loaded graph."""
        data = client.get("/v1/graph/metrics").json()
        assert data["total_concepts"] == 10
        assert data["max_degree"] == 4
        assert data["root_concepts"] == 5

    def test_load_structured(self) -> None:
        """Test a structured lecture breakdown loads as a graph."""
        app = create_app()
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.post(
                "/v1/graph/structured",
                json={
                    "hierarchical_structure": {
                        "layer_1": [
                            {"id": "1", "title": "Intro", "layer_2": [{"id": "1.1", "title": "Why"}]},
                        ]
                    },
                    "detailed_breakdown": [{"id": "1", "timestamp": "0:10"}],
                },
            )
            assert response.status_code == 200
            assert response.json()["nodes"] == 2
            assert response.json()["edges"] == 1

    def test_load_numeric_ids(self) -> None:
        """Test a payload with numeric ids loads and can be clicked."""
        app = create_app()
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.post(
                "/v1/graph",
                json={
                    "nodes": [{"id": 1, "label": "One"}, {"id": 2, "label": "Two"}],
                    "edges": [{"source": 1, "target": 2}],
                },
            )
            assert response.status_code == 200
            assert response.json()["nodes"] == 2
            assert response.json()["edges"] == 1

            data = client.post("/v1/graph/nodes/1/click").json()
            assert sorted(data["node_ids"]) == ["1", "2"]

    def test_search(self, client: TestClient) -> None:
        """Test search narrows the view and an empty term clears it."""
        data = client.post("/v1/graph/search", json={"term": "learning"}).json()
        assert data["search"] == "learning"
        assert data["node_ids"] == ["ml", "deep", "unsupervised", "training"]
        assert data["summary"] == "4 main concepts • 1 connections"

        scene = client.get("/v1/graph/scene").json()
        assert sorted(node["id"] for node in scene["nodes"]) == sorted(data["node_ids"])

        cleared = client.post("/v1/graph/search", json={"term": ""}).json()
        assert cleared["search"] is None
        assert len(cleared["node_ids"]) == 7

    def test_search_requires_graph(self) -> None:
        """Test search 404s before a graph is loaded."""
        app = create_app()
        with TestClient(app, raise_server_exceptions=False) as client:
            assert client.post("/v1/graph/search", json={"term": "x"}).status_code == 404
