"""Pytest configuration and fixtures."""

import copy

import pytest

from edugraph.config import Settings, get_test_settings
from edugraph.interaction import GraphSession
from edugraph.models import ConceptEdge, ConceptNode, GraphSnapshot


# Machine learning lecture, ten concepts over a ten minute video
ML_LECTURE_PAYLOAD = {
    "nodes": [
        {"id": "ai", "label": "Artificial Intelligence", "size": 20, "category": "definition",
         "timestamps": [30, 90], "description": "The simulation of human intelligence in machines"},
        {"id": "ml", "label": "Machine Learning", "size": 18, "category": "definition",
         "timestamps": [0, 150], "description": "A subset of AI that learns without explicit programming"},
        {"id": "neural", "label": "Neural Networks", "size": 16, "category": "application",
         "timestamps": [90, 330, 390], "description": "Computing systems inspired by biological neurons"},
        {"id": "training", "label": "Training Data", "size": 14, "category": "prerequisite",
         "timestamps": [150, 210], "description": "Dataset used to teach learning algorithms"},
        {"id": "supervised", "label": "Supervised Learning", "size": 15, "category": "example",
         "timestamps": [210, 270], "description": "Learning with labeled training examples"},
        {"id": "unsupervised", "label": "Unsupervised Learning", "size": 15, "category": "example",
         "timestamps": [270, 330], "description": "Finding hidden patterns in unlabeled data"},
        {"id": "deep", "label": "Deep Learning", "size": 17, "category": "application",
         "timestamps": [330, 390], "description": "Machine learning using deep neural networks"},
        {"id": "backprop", "label": "Backpropagation", "size": 13, "category": "application",
         "timestamps": [390, 450], "description": "Algorithm for training neural networks"},
        {"id": "overfitting", "label": "Overfitting", "size": 12, "category": "definition",
         "timestamps": [450, 510], "description": "Good on training data, poor on new data"},
        {"id": "validation", "label": "Cross-validation", "size": 14, "category": "application",
         "timestamps": [510], "description": "Technique for assessing model generalization"},
    ],
    "edges": [
        {"source": "ml", "target": "ai", "type": "prerequisite", "strength": 0.8},
        {"source": "neural", "target": "ai", "type": "application", "strength": 0.7},
        {"source": "supervised", "target": "ml", "type": "example", "strength": 0.9},
        {"source": "unsupervised", "target": "ml", "type": "example", "strength": 0.9},
        {"source": "deep", "target": "neural", "type": "application", "strength": 0.8},
        {"source": "training", "target": "supervised", "type": "prerequisite", "strength": 0.7},
        {"source": "backprop", "target": "neural", "type": "application", "strength": 0.6},
        {"source": "overfitting", "target": "ml", "type": "related", "strength": 0.5},
        {"source": "validation", "target": "overfitting", "type": "related", "strength": 0.6},
    ],
}

# Overview of the lecture: roots, prerequisites and nodes of size >= 18
ML_FIRST_ORDER_IDS = ["ai", "ml", "deep", "unsupervised", "training", "validation", "backprop"]


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with a fixed layout seed."""
    return get_test_settings()


@pytest.fixture
def ml_payload() -> dict:
    """Fresh copy of the machine learning lecture payload."""
    return copy.deepcopy(ML_LECTURE_PAYLOAD)


@pytest.fixture
def ml_first_order_ids() -> list[str]:
    return list(ML_FIRST_ORDER_IDS)


@pytest.fixture
def ml_snapshot(ml_payload: dict) -> GraphSnapshot:
    return GraphSnapshot.from_payload(ml_payload)


@pytest.fixture
def abc_snapshot() -> GraphSnapshot:
    """A(20, root), B(10, prerequisite), C(5, target of A)."""
    return GraphSnapshot.from_parts(
        [
            ConceptNode(id="A", label="A", size=20),
            ConceptNode(id="B", label="B", size=10, category="prerequisite"),
            ConceptNode(id="C", label="C", size=5),
        ],
        [ConceptEdge(source="A", target="C")],
    )


@pytest.fixture
def sample_node() -> ConceptNode:
    return ConceptNode(
        id="ml",
        label="Machine Learning",
        description="A subset of AI",
        category="definition",
        size=18,
        timestamps=[150.0, 0.0],
    )


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session(test_settings: Settings, fake_clock: FakeClock) -> GraphSession:
    """Empty session on a fake clock."""
    return GraphSession(config=test_settings, clock=fake_clock)


@pytest.fixture
def loaded_session(session: GraphSession, ml_payload: dict) -> GraphSession:
    """Session with the machine learning lecture loaded."""
    session.load(ml_payload)
    return session
