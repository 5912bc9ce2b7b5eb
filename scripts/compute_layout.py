#!/usr/bin/env python3
"""Compute concept graph layout positions offline.

This script:
1. Reads a GraphPayload JSON file (or a structured lecture breakdown)
2. Builds the overview, or the detail view of one concept
3. Runs the force simulation until it cools
4. Writes node positions as JSON

Usage:
    python scripts/compute_layout.py graph.json
    python scripts/compute_layout.py graph.json --focus node_3 -o positions.json
    python scripts/compute_layout.py lecture.json --structured
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
project_root = Path(__file__).parent.parent
load_dotenv(project_root / ".env")

# Add src to path
sys.path.insert(0, str(project_root / "src"))

from edugraph.config import settings
from edugraph.graph import build_view, compute_first_order_nodes, first_order_ranks
from edugraph.ingestion import load_structured_file
from edugraph.layout import ForceSimulation, LayoutFrame, LayoutParams
from edugraph.models import GraphSnapshot, ViewState

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def load_snapshot(path: Path, structured: bool) -> GraphSnapshot:
    if structured:
        return load_structured_file(path).to_snapshot()
    with path.open(encoding="utf-8") as f:
        return GraphSnapshot.from_payload(json.load(f))


def compute_positions(
    snapshot: GraphSnapshot,
    focus: str | None = None,
    max_ticks: int = 1000,
) -> tuple[dict[str, tuple[float, float]], int]:
    """Lay out one view; returns positions and the number of ticks run."""
    view = ViewState.detail(focus) if focus else ViewState.overview()
    nodes, edges = build_view(snapshot, view)

    first_order = compute_first_order_nodes(snapshot)
    ranks = first_order_ranks(first_order) if view.is_overview else None

    simulation = ForceSimulation(
        nodes,
        edges,
        params=LayoutParams.for_mode(view.mode),
        frame=LayoutFrame.from_settings(),
        ranks=ranks,
        seed=settings.layout_random_seed,
        anchor_id=focus,
    )
    ticks = simulation.run(max_ticks)
    return simulation.positions(), ticks


def main() -> bool:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Compute concept graph layout positions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("input", type=Path, help="GraphPayload JSON file")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Where to write positions (default: stdout)",
    )
    parser.add_argument("--focus", help="Lay out the detail view of this concept id")
    parser.add_argument(
        "--structured",
        action="store_true",
        help="Input is a structured lecture breakdown, not a GraphPayload",
    )
    parser.add_argument("--max-ticks", type=int, default=1000)

    args = parser.parse_args()

    if not args.input.exists():
        print(f"Error: File not found: {args.input}")
        return False

    snapshot = load_snapshot(args.input, args.structured)
    if args.focus and args.focus not in snapshot:
        print(f"Error: Unknown concept id: {args.focus}")
        return False

    positions, ticks = compute_positions(snapshot, args.focus, args.max_ticks)
    logger.info(f"Layout cooled after {ticks} ticks ({len(positions)} nodes)")

    result = {
        "view": "detail" if args.focus else "overview",
        "focus": args.focus,
        "width": settings.viewport_width,
        "height": settings.viewport_height,
        "positions": {node_id: {"x": x, "y": y} for node_id, (x, y) in positions.items()},
    }
    text = json.dumps(result, indent=2)

    if args.output:
        args.output.write_text(text, encoding="utf-8")
        print(f"Wrote {len(positions)} positions to {args.output}")
    else:
        print(text)

    if positions:
        xs = [p[0] for p in positions.values()]
        ys = [p[1] for p in positions.values()]
        logger.info(
            f"Bounding box: x=[{min(xs):.1f}, {max(xs):.1f}], y=[{min(ys):.1f}, {max(ys):.1f}]"
        )
    return True


if __name__ == "__main__":
    sys.exit(0 if main() else 1)
