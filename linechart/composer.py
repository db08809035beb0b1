from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Executor
from dataclasses import dataclass
import logging
import queue
import threading
from typing import Any
import weakref

import numpy as np

from linechart.config import ChartConfig
from linechart.curves import solve_control_points
from linechart.geometry import ChartBounds, map_points
from linechart.layout import (
    GridLine,
    GridSpec,
    LabelPlacement,
    axis_lines,
    bottom_labels,
    horizontal_grid,
    side_labels,
    vertical_grid,
)
from linechart.paths import build_paths
from linechart.provider import DataSnapshot
from linechart.raster import apply_vertical_alpha, draw_line, draw_polyline, draw_text, fill_gradient, new_canvas
from linechart.scene import AnimationSpec, JoinBarrier, LayerNode, LayerSlot, SceneTree
from linechart.series import ChartType, ControlPointPair, ValueRange


LOGGER = logging.getLogger(__name__)

FILL_TOP_ALPHA = 0.6
FILL_BOTTOM_ALPHA = 0.0
STROKE_TOP_ALPHA = 0.7
STROKE_BOTTOM_ALPHA = 1.0
FILL_FADE_DURATION = 0.7


class PresentationQueue:
    """Serial queue backed by one thread; owns every write to presented state."""

    def __init__(self, name: str = "linechart-presentation") -> None:
        self._name = name
        self._queue: queue.Queue[Callable[[], None] | None] = queue.Queue()
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()
        self._stopped = False

    def start(self) -> None:
        with self._lock:
            if self._stopped:
                raise RuntimeError("presentation queue is stopped")
            self._ensure_thread_locked()

    def stop(self, timeout: float = 1.0) -> None:
        with self._lock:
            self._stopped = True
            thread = self._thread
            self._thread = None
        if thread is None:
            return
        self._queue.put(None)
        if thread is not threading.current_thread():
            thread.join(timeout=timeout)

    def submit(self, fn: Callable[..., Any], *args: Any) -> None:
        with self._lock:
            if self._stopped:
                LOGGER.debug("presentation queue stopped; dropping %r", fn)
                return
            self._ensure_thread_locked()
            self._queue.put(lambda: fn(*args))

    def _ensure_thread_locked(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()

    def is_current(self) -> bool:
        return self._thread is not None and threading.current_thread() is self._thread

    def _run(self) -> None:
        while True:
            job = self._queue.get()
            if job is None:
                break
            try:
                job()
            except Exception as exc:  # noqa: BLE001
                LOGGER.exception("presentation job failed: %s", exc)


class RenderToken:
    """Handle a render pass checks before touching its chart."""

    def __init__(self, generation: int, owner: Any) -> None:
        self.generation = generation
        self._owner = weakref.ref(owner)
        self._expired = threading.Event()

    def expire(self) -> None:
        self._expired.set()

    @property
    def owner(self) -> Any | None:
        if self._expired.is_set():
            return None
        return self._owner()

    @property
    def is_valid(self) -> bool:
        return self.owner is not None


@dataclass(frozen=True)
class RenderRequest:
    snapshot: DataSnapshot
    value_range: ValueRange
    bounds: ChartBounds
    config: ChartConfig

    @property
    def canvas_size(self) -> tuple[int, int]:
        return max(1, int(round(self.bounds.width))), max(1, int(round(self.bounds.height)))


LayerCallback = Callable[[LayerNode], None]
CompletionCallback = Callable[[SceneTree, np.ndarray], None]


class SceneComposer:
    """Fans a render pass out to layer tasks and assembles the tree once all of them report."""

    def __init__(self, presentation: PresentationQueue, executor: Executor, *, steps_per_curve: int = 16) -> None:
        if steps_per_curve <= 0:
            raise ValueError("steps_per_curve must be > 0")
        self._presentation = presentation
        self._executor = executor
        self._steps_per_curve = steps_per_curve

    def render(
        self,
        request: RenderRequest,
        token: RenderToken,
        on_complete: CompletionCallback,
        *,
        barrier: JoinBarrier | None = None,
    ) -> JoinBarrier:
        barrier = barrier if barrier is not None else JoinBarrier()
        pending: dict[LayerSlot, LayerNode] = {}
        config = request.config

        def post(node: LayerNode) -> None:
            assert self._presentation.is_current()
            pending[node.slot] = node
            barrier.leave()

        def deliver(node: LayerNode) -> None:
            self._presentation.submit(post, node)

        tasks: list[tuple[LayerSlot, Callable[[RenderRequest, LayerCallback], None], bool]] = [
            (LayerSlot.AXIS, self._draw_axis, False)
        ]
        if config.show_vertical_grid:
            tasks.append((LayerSlot.VERTICAL_GRID, self._draw_vertical_grid, False))
        if config.show_horizontal_grid:
            tasks.append((LayerSlot.HORIZONTAL_GRID, self._draw_horizontal_grid, False))
        if config.show_side_labels:
            tasks.append((LayerSlot.SIDE_LABELS, self._draw_side_labels, True))
        if config.show_bottom_labels:
            tasks.append((LayerSlot.BOTTOM_LABELS, self._draw_bottom_labels, True))
        tasks.append((LayerSlot.DATA, self._draw_chart, False))

        barrier.enter(len(tasks))
        LOGGER.debug("render generation=%d fanning out %d tasks", token.generation, len(tasks))
        for slot, task, on_presentation in tasks:
            job = _guarded(slot, task, request, deliver)
            if on_presentation:
                self._presentation.submit(job)
            else:
                self._executor.submit(job)

        def assemble() -> None:
            if not token.is_valid:
                LOGGER.debug("render generation=%d finished after its chart went away; dropped", token.generation)
                return
            tree = SceneTree()
            for slot in LayerSlot:
                node = pending.get(slot)
                if node is not None:
                    tree.place(node)
            width, height = request.canvas_size
            frame = tree.composite(width, height, config.background_color)
            on_complete(tree, frame)

        barrier.notify(lambda: self._presentation.submit(assemble))
        return barrier

    def _draw_axis(self, request: RenderRequest, done: LayerCallback) -> None:
        bounds = request.bounds
        lines: tuple[GridLine, ...] = ()
        if len(request.snapshot.series) > 0:
            lines = axis_lines(graph_width=bounds.graph_width, graph_height=bounds.graph_height)
        self._draw_lines(request, LayerSlot.AXIS, lines, done)

    def _draw_vertical_grid(self, request: RenderRequest, done: LayerCallback) -> None:
        bounds = request.bounds
        snapshot = request.snapshot
        spec = vertical_grid(
            len(snapshot.series),
            snapshot.vertical_line_count,
            graph_width=bounds.graph_width,
            graph_height=bounds.graph_height,
            dash_patterns=snapshot.vertical_dash_patterns,
        )
        self._draw_grid(request, LayerSlot.VERTICAL_GRID, spec, done)

    def _draw_horizontal_grid(self, request: RenderRequest, done: LayerCallback) -> None:
        bounds = request.bounds
        snapshot = request.snapshot
        spec = horizontal_grid(
            len(snapshot.series),
            snapshot.horizontal_line_count,
            graph_width=bounds.graph_width,
            graph_height=bounds.graph_height,
            dash_patterns=snapshot.horizontal_dash_patterns,
        )
        self._draw_grid(request, LayerSlot.HORIZONTAL_GRID, spec, done)

    def _draw_grid(self, request: RenderRequest, slot: LayerSlot, spec: GridSpec, done: LayerCallback) -> None:
        self._draw_lines(request, slot, spec.lines, done)

    def _draw_lines(
        self,
        request: RenderRequest,
        slot: LayerSlot,
        lines: tuple[GridLine, ...],
        done: LayerCallback,
    ) -> None:
        parent = LayerNode(slot=slot, lines=lines)
        if not lines:
            done(parent)
            return
        config = request.config
        width, height = request.canvas_size
        lock = threading.Lock()
        group = JoinBarrier()
        group.enter(len(lines))

        def draw_one(line: GridLine) -> None:
            try:
                canvas = new_canvas(width, height)
                draw_line(
                    canvas,
                    line.start.x,
                    line.start.y,
                    line.end.x,
                    line.end.y,
                    color=config.grid_color,
                    width=config.grid_width,
                    dash_pattern=line.dash_pattern,
                )
                with lock:
                    parent.insert_child(LayerNode(slot=slot, rgba=canvas, order=line.index, lines=(line,)))
            finally:
                group.leave()

        for line in lines:
            self._executor.submit(_logged(draw_one), line)
        group.notify(lambda: done(parent))

    def _draw_side_labels(self, request: RenderRequest, done: LayerCallback) -> None:
        bounds = request.bounds
        placements = side_labels(
            request.value_range,
            request.snapshot.side_label_count,
            width=bounds.width,
            side_space=request.config.side_space,
            graph_height=bounds.graph_height,
        )
        done(self._label_layer(request, LayerSlot.SIDE_LABELS, placements))

    def _draw_bottom_labels(self, request: RenderRequest, done: LayerCallback) -> None:
        bounds = request.bounds
        placements = bottom_labels(
            request.snapshot.series,
            request.snapshot.bottom_label_count,
            graph_width=bounds.graph_width,
            graph_height=bounds.graph_height,
            padding=bounds.padding,
        )
        done(self._label_layer(request, LayerSlot.BOTTOM_LABELS, placements))

    def _label_layer(self, request: RenderRequest, slot: LayerSlot, placements: tuple[LabelPlacement, ...]) -> LayerNode:
        if not placements:
            return LayerNode(slot=slot)
        width, height = request.canvas_size
        canvas = new_canvas(width, height)
        for label in placements:
            draw_text(
                canvas,
                label.position.x,
                label.position.y,
                label.text,
                request.config.labels_color,
                anchor=label.anchor,
                font_size_px=request.config.label_font_size,
            )
        return LayerNode(slot=slot, rgba=canvas, labels=placements)

    def _draw_chart(self, request: RenderRequest, done: LayerCallback) -> None:
        config = request.config
        bounds = request.bounds
        points = map_points(request.snapshot.series, request.value_range, bounds)
        control_points: tuple[ControlPointPair, ...] = ()
        if config.chart_type is ChartType.CURVED:
            control_points = solve_control_points(points, max_y=bounds.graph_height)
        paths = build_paths(points, control_points, config.chart_type, baseline=bounds.baseline)
        node = LayerNode(slot=LayerSlot.DATA, paths=paths)
        if paths.stroke.is_empty:
            done(node)
            return

        width, height = request.canvas_size
        fill_canvas = new_canvas(width, height)
        fill_gradient(
            fill_canvas,
            paths.fill.flatten(self._steps_per_curve),
            config.tint_color,
            top_alpha=FILL_TOP_ALPHA,
            bottom_alpha=FILL_BOTTOM_ALPHA,
        )
        stroke_canvas = new_canvas(width, height)
        vertices = paths.stroke.flatten(self._steps_per_curve)
        if vertices.shape[0] == 1:
            vertices = np.repeat(vertices, 2, axis=0)
        draw_polyline(stroke_canvas, vertices[:, 0], vertices[:, 1], color=config.tint_color, width=config.line_width)
        apply_vertical_alpha(stroke_canvas, STROKE_TOP_ALPHA, STROKE_BOTTOM_ALPHA)

        node.insert_child(
            LayerNode(
                slot=LayerSlot.DATA,
                rgba=fill_canvas,
                order=0,
                animations=(AnimationSpec("opacity", 0.0, 1.0, FILL_FADE_DURATION, timing="easeOut"),),
            )
        )
        node.insert_child(
            LayerNode(
                slot=LayerSlot.DATA,
                rgba=stroke_canvas,
                order=1,
                animations=(AnimationSpec("strokeEnd", 0.0, 1.0, config.animation_duration),),
            )
        )
        done(node)


def _guarded(
    slot: LayerSlot,
    task: Callable[[RenderRequest, LayerCallback], None],
    request: RenderRequest,
    done: LayerCallback,
) -> Callable[[], None]:
    def run() -> None:
        delivered = False

        def once(node: LayerNode) -> None:
            nonlocal delivered
            delivered = True
            done(node)

        try:
            task(request, once)
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("%s layer task failed: %s", slot.name, exc)
            if not delivered:
                done(LayerNode(slot=slot))

    return run


def _logged(fn: Callable[..., None]) -> Callable[..., None]:
    def run(*args: Any) -> None:
        try:
            fn(*args)
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("layer sub-task failed: %s", exc)

    return run
