"""Interactive graph session.

GraphSession is the single owner of the current snapshot, view state,
simulation and viewport. Every mutation (clock tick, click, drag, camera
move, layout step) goes through it, one at a time. Hosts either call the
methods directly or submit commands that are drained once per frame by
tick().
"""

import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

from edugraph.config import Settings, settings
from edugraph.graph import (
    ViewStats,
    build_view,
    compute_first_order_nodes,
    compute_view_stats,
    first_order_ranks,
)
from edugraph.interaction.activation import ActivationTracker
from edugraph.interaction.commands import (
    BackToOverview,
    ClockTick,
    Command,
    CommandQueue,
    NodeClick,
    Pan,
    PointerDown,
    PointerMove,
    PointerUp,
    ResetView,
    SetSearch,
    WheelZoom,
    ZoomIn,
    ZoomOut,
)
from edugraph.interaction.gestures import GestureOutcome, GestureTracker
from edugraph.layout import ForceSimulation, LayoutFrame, LayoutParams
from edugraph.models import IDENTITY, ConceptEdge, ConceptNode, GraphSnapshot, ViewState
from edugraph.render import RenderScene, build_scene
from edugraph.viewport import ViewportController

logger = logging.getLogger(__name__)


class GraphSession:
    """
    One interactive concept graph view.

    Args:
        width: Canvas width in pixels (default from settings)
        height: Canvas height in pixels (default from settings)
        config: Settings to use instead of the module defaults
        on_node_click: Host callback invoked with the clicked ConceptNode
        on_seek: Host callback asked to move playback to a time in seconds
        clock: Monotonic time source for camera animations
    """

    def __init__(
        self,
        width: float | None = None,
        height: float | None = None,
        config: Settings | None = None,
        on_node_click: Callable[[ConceptNode], None] | None = None,
        on_seek: Callable[[float], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or settings
        self.viewport = ViewportController(
            width, height, self.config, clock=clock, on_reset=self._reheat
        )
        self.frame = LayoutFrame(width=self.viewport.width, height=self.viewport.height)
        self.activation = ActivationTracker(self.config.activation_window)
        self.gestures = GestureTracker(self.config.click_distance)
        self.commands = CommandQueue()

        self.on_node_click = on_node_click
        self.on_seek = on_seek
        # Set by a scheduler to be woken when new work arrives
        self.on_activity: Callable[[], None] | None = None

        self._snapshot = GraphSnapshot()
        self._view = ViewState.overview()
        self._search: str | None = None
        self._first_order: list[ConceptNode] = []
        self._nodes: list[ConceptNode] = []
        self._edges: list[ConceptEdge] = []
        self._simulation: ForceSimulation | None = None
        self._generation = 0
        self._dirty = True

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> GraphSnapshot:
        return self._snapshot

    @property
    def view_state(self) -> ViewState:
        """Current view, including the transform shown right now."""
        return ViewState(
            mode=self._view.mode,
            focus_node_id=self._view.focus_node_id,
            selected_node_id=self._view.selected_node_id,
            transform=self.viewport.transform,
        )

    @property
    def search(self) -> str | None:
        """Active text filter, or None when every concept is shown."""
        return self._search

    @property
    def current_nodes(self) -> list[ConceptNode]:
        return list(self._nodes)

    @property
    def current_edges(self) -> list[ConceptEdge]:
        return list(self._edges)

    @property
    def first_order_nodes(self) -> list[ConceptNode]:
        return list(self._first_order)

    @property
    def simulation(self) -> ForceSimulation | None:
        return self._simulation

    @property
    def generation(self) -> int:
        """Incremented every time the simulation is restarted."""
        return self._generation

    @property
    def selected_node(self) -> ConceptNode | None:
        selected = self._view.selected_node_id
        return self._snapshot.get(selected) if selected is not None else None

    @property
    def focus_node(self) -> ConceptNode | None:
        focus = self._view.focus_node_id
        return self._snapshot.get(focus) if focus is not None else None

    @property
    def needs_frame(self) -> bool:
        """True while ticking would change what is on screen."""
        if self._dirty or self.commands:
            return True
        if self._simulation is not None and self._simulation.active:
            return True
        return self.viewport.animating

    def _notify(self) -> None:
        self._dirty = True
        if self.on_activity is not None:
            self.on_activity()

    # ------------------------------------------------------------------
    # Snapshot and view transitions
    # ------------------------------------------------------------------

    def load(self, payload: GraphSnapshot | Mapping[str, Any] | None) -> GraphSnapshot:
        """Replace the graph and reset to a fresh overview."""
        snapshot = payload if isinstance(payload, GraphSnapshot) else GraphSnapshot.from_payload(payload)

        if self._simulation is not None:
            self._simulation.stop()
            self._simulation = None
        self.commands.clear()

        self._snapshot = snapshot
        self._first_order = compute_first_order_nodes(snapshot, self.config.first_order_size_threshold)
        self._view = ViewState.overview()
        self._search = None
        self.viewport.set_transform(IDENTITY)
        self.activation.reapply(snapshot)

        self._restart()
        logger.info(
            f"Loaded graph: {len(snapshot)} concepts, "
            f"{len(self._first_order)} in overview"
        )
        return snapshot

    def _restart(self) -> None:
        """Discard the running simulation and lay out the current view from scratch."""
        # Gestures in flight belong to the old view
        self.gestures.cancel()

        previous = self._simulation
        seed_positions = None
        if previous is not None:
            if self.config.layout_seed_from_previous:
                seed_positions = previous.positions()
            previous.stop()

        self._nodes, self._edges = build_view(
            self._snapshot,
            self._view,
            self.config.first_order_size_threshold,
            self.config.neighborhood_hops,
            self._search,
        )
        params = LayoutParams.for_mode(self._view.mode, self.config)
        ranks = first_order_ranks(self._first_order) if self._view.is_overview else None

        self._simulation = ForceSimulation(
            self._nodes,
            self._edges,
            params=params,
            frame=self.frame,
            ranks=ranks,
            seed_positions=seed_positions,
            seed=self.config.layout_random_seed,
            anchor_id=self._view.focus_node_id if not self._view.is_overview else None,
        )
        self._generation += 1
        self._notify()

    def click(self, node_id: str) -> bool:
        """
        Select a concept.

        From overview this enters the detail view of the node and focuses the
        camera on it. The detail layout is anchored on the node, so the camera
        target is where the node sits in the new view. In detail it moves the
        focus without a camera move.

        Returns:
            False if node_id is not in the snapshot
        """
        node = self._snapshot.get(node_id)
        if node is None:
            logger.debug(f"Ignoring click on unknown node {node_id!r}")
            return False

        was_overview = self._view.is_overview
        self._view = ViewState.detail(node_id, selected_node_id=node_id)
        self._restart()

        position = self._simulation.position(node_id) if self._simulation else None
        if was_overview and position is not None:
            self.viewport.focus_on_node(*position)

        if self.on_node_click is not None:
            self.on_node_click(node)
        return True

    def enter_detail(self, focus_id: str) -> None:
        """Show the neighbourhood of focus_id; an unknown id shows an empty view."""
        if focus_id not in self._snapshot:
            logger.warning(f"Detail view requested for unknown node {focus_id!r}")
        self._view = ViewState.detail(focus_id, selected_node_id=self._view.selected_node_id)
        self._restart()

    def back_to_overview(self) -> bool:
        if self._view.is_overview:
            return False
        self._view = ViewState.overview(selected_node_id=self._view.selected_node_id)
        self._restart()
        return True

    def clear_selection(self) -> None:
        if self._view.selected_node_id is not None:
            self._view = ViewState(
                mode=self._view.mode,
                focus_node_id=self._view.focus_node_id,
            )
            self._notify()

    def set_search(self, term: str | None) -> bool:
        """
        Narrow the current view to concepts whose label or description
        contains term. The filter stays on across view switches until
        cleared or a new graph is loaded.

        Returns:
            True if the displayed graph changed
        """
        term = (term or "").strip() or None
        if term == self._search:
            return False
        self._search = term
        logger.debug(f"Search set to {term!r}")
        self._restart()
        return True

    # ------------------------------------------------------------------
    # Playback clock
    # ------------------------------------------------------------------

    def set_clock(self, t: float) -> list[str]:
        """Recompute activation for playback time t; returns the changed ids."""
        changed = self.activation.update(self._snapshot, t)
        if changed:
            self._notify()
        return changed

    def seek_to_node(self, node_id: str) -> float | None:
        """Ask the host to play from the node's first listed reference."""
        node = self._snapshot.get(node_id)
        if node is None or not node.timestamps:
            return None
        t = node.timestamps[0]
        if self.on_seek is not None:
            self.on_seek(t)
        return t

    def seek_timeline(self, t: float) -> float:
        t = max(0.0, t)
        if self.on_seek is not None:
            self.on_seek(t)
        return t

    # ------------------------------------------------------------------
    # Pointer gestures
    # ------------------------------------------------------------------

    def pointer_down(self, node_id: str, x: float, y: float) -> None:
        if node_id not in self._nodes_by_id():
            return
        self._apply_gestures(self.gestures.press(node_id, x, y))

    def pointer_move(self, x: float, y: float) -> None:
        self._apply_gestures(self.gestures.move(x, y))

    def pointer_up(self, x: float, y: float) -> None:
        self._apply_gestures(self.gestures.release(x, y))

    def _nodes_by_id(self) -> set[str]:
        return {node.id for node in self._nodes}

    def _apply_gestures(self, outcomes: list[GestureOutcome]) -> None:
        simulation = self._simulation
        for outcome in outcomes:
            if outcome.kind == "click":
                self.click(outcome.node_id)
                continue
            if simulation is None:
                continue

            if outcome.kind == "drag_start":
                position = simulation.position(outcome.node_id)
                if position is not None:
                    simulation.pin(outcome.node_id, *position)
                simulation.set_alpha_target(simulation.params.drag_alpha_target)
            elif outcome.kind == "drag_move":
                x, y = self.viewport.screen_to_model((outcome.x, outcome.y))
                simulation.pin(outcome.node_id, x, y)
            elif outcome.kind == "drag_end":
                simulation.set_alpha_target(0.0)
                simulation.unpin(outcome.node_id)
            self._notify()

    # ------------------------------------------------------------------
    # Camera
    # ------------------------------------------------------------------

    def _reheat(self) -> None:
        if self._simulation is not None:
            self._simulation.reheat(1.0)

    def zoom_in(self) -> None:
        self.viewport.zoom_in()
        self._notify()

    def zoom_out(self) -> None:
        self.viewport.zoom_out()
        self._notify()

    def reset_view(self) -> None:
        self.viewport.reset()
        self._notify()

    def pan(self, dx: float, dy: float) -> None:
        self.viewport.pan(dx, dy)
        self._notify()

    def wheel_zoom(self, x: float, y: float, factor: float) -> None:
        self.viewport.zoom_at((x, y), factor)
        self._notify()

    def resize(self, width: float, height: float) -> None:
        """New canvas size; takes effect for the next layout restart."""
        self.viewport.resize(width, height)
        self.frame = LayoutFrame(width=width, height=height)
        self._notify()

    # ------------------------------------------------------------------
    # Commands and frames
    # ------------------------------------------------------------------

    def submit(self, command: Command) -> None:
        self.commands.put(command)
        if self.on_activity is not None:
            self.on_activity()

    def dispatch(self, command: Command) -> None:
        """Apply one command immediately."""
        if isinstance(command, NodeClick):
            self.click(command.node_id)
        elif isinstance(command, PointerDown):
            self.pointer_down(command.node_id, command.x, command.y)
        elif isinstance(command, PointerMove):
            self.pointer_move(command.x, command.y)
        elif isinstance(command, PointerUp):
            self.pointer_up(command.x, command.y)
        elif isinstance(command, BackToOverview):
            self.back_to_overview()
        elif isinstance(command, ZoomIn):
            self.zoom_in()
        elif isinstance(command, ZoomOut):
            self.zoom_out()
        elif isinstance(command, ResetView):
            self.reset_view()
        elif isinstance(command, Pan):
            self.pan(command.dx, command.dy)
        elif isinstance(command, WheelZoom):
            self.wheel_zoom(command.x, command.y, command.factor)
        elif isinstance(command, ClockTick):
            self.set_clock(command.time)
        elif isinstance(command, SetSearch):
            self.set_search(command.term)
        else:
            raise TypeError(f"Unknown command: {command!r}")

    def process_commands(self) -> int:
        """Drain the queue in submission order; returns how many ran."""
        commands = self.commands.drain()
        for command in commands:
            self.dispatch(command)
        return len(commands)

    def tick(self, now: float | None = None) -> bool:
        """
        Advance one frame: commands, one layout step, camera animation.

        Returns:
            True if anything visible changed since the previous frame
        """
        processed = self.process_commands()

        moved = False
        simulation = self._simulation
        if simulation is not None and simulation.active:
            simulation.tick()
            moved = True

        animating = self.viewport.animating
        self.viewport.advance(now)

        changed = moved or animating or self._dirty or processed > 0
        self._dirty = False
        return changed

    def run_layout(self, max_ticks: int = 1000) -> int:
        """Cool the current layout synchronously; returns ticks run."""
        if self._simulation is None:
            return 0
        ticks = self._simulation.run(max_ticks)
        if ticks:
            self._dirty = True
        return ticks

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def positions(self) -> dict[str, tuple[float, float]]:
        return self._simulation.positions() if self._simulation else {}

    def view_stats(self) -> ViewStats:
        return compute_view_stats(self._nodes, self._edges, self._view.mode, self.focus_node)

    def scene(self) -> RenderScene:
        """Styled snapshot of the current frame."""
        simulation = self._simulation
        pinned = (
            {node_id for node_id in simulation.node_ids if simulation.is_pinned(node_id)}
            if simulation
            else set()
        )
        view = self.view_state
        return build_scene(
            self._nodes,
            self._edges,
            self.positions(),
            view,
            view.transform,
            pinned=pinned,
            focus=self.focus_node,
        )
