"""Force-directed layout for concept graphs."""

from edugraph.layout.config import LayoutFrame, LayoutParams
from edugraph.layout.forces import LinkIndex
from edugraph.layout.simulation import (
    ForceSimulation,
    LayoutInputs,
    LayoutState,
    build_inputs,
    step,
)

__all__ = [
    "LayoutFrame",
    "LayoutParams",
    "LinkIndex",
    "ForceSimulation",
    "LayoutInputs",
    "LayoutState",
    "build_inputs",
    "step",
]
