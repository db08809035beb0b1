from __future__ import annotations

from concurrent.futures import Executor, ThreadPoolExecutor
import logging
import threading
import weakref

import numpy as np

from linechart.composer import PresentationQueue, RenderRequest, RenderToken, SceneComposer
from linechart.config import ChartConfig
from linechart.errors import RenderInProgressError
from linechart.geometry import ChartBounds, calculate_sizes, compute_value_range
from linechart.provider import ChartDataSource, ChartDelegate, snapshot_data_source
from linechart.scene import JoinBarrier, SceneTree
from linechart.series import ValueRange
from linechart.surface import ChartSurface


LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


class RenderTicket:
    """Tracks one render pass from fan-out to the finish notification."""

    def __init__(self, generation: int) -> None:
        self.generation = generation
        self.barrier: JoinBarrier | None = None
        self.scene: SceneTree | None = None
        self._done = threading.Event()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    @property
    def join_count(self) -> int:
        return 0 if self.barrier is None else self.barrier.left

    def wait(self, timeout: float | None = None) -> bool:
        return self._done.wait(timeout=timeout)

    def _complete(self, scene: SceneTree) -> None:
        self.scene = scene
        self._done.set()


class LineChart:
    def __init__(
        self,
        width: int,
        height: int,
        *,
        config: ChartConfig | None = None,
        data_source: ChartDataSource | None = None,
        delegate: ChartDelegate | None = None,
        presentation: PresentationQueue | None = None,
        executor: Executor | None = None,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be > 0")
        self.width = int(width)
        self.height = int(height)
        self.config = config or ChartConfig()
        self.data_source = data_source
        self.delegate = delegate
        self._owns_presentation = presentation is None
        self._presentation = presentation or PresentationQueue()
        self._owns_executor = executor is None
        self._executor = executor
        self._surface = ChartSurface(self.height, self.width, background=self.config.background_color)
        self._lock = threading.Lock()
        self._generation = 0
        self._in_flight: RenderTicket | None = None
        self._last_ticket: RenderTicket | None = None
        self._token: RenderToken | None = None
        self._scene = SceneTree()
        self._bounds: ChartBounds | None = None
        self._value_range = ValueRange(min=None, max=None)
        self._closed = False

    @property
    def scene(self) -> SceneTree:
        return self._scene

    @property
    def surface(self) -> ChartSurface:
        return self._surface

    @property
    def bounds(self) -> ChartBounds | None:
        return self._bounds

    @property
    def value_range(self) -> ValueRange:
        return self._value_range

    @property
    def last_ticket(self) -> RenderTicket | None:
        return self._last_ticket

    @property
    def is_rendering(self) -> bool:
        with self._lock:
            return self._in_flight is not None

    def reload_data(self, executor: Executor | None = None) -> RenderTicket | None:
        """Start an asynchronous render pass; returns None when there is no data source."""
        source = self.data_source
        if source is None:
            LOGGER.debug("reload_data skipped: no data source")
            return None
        with self._lock:
            if self._closed:
                raise RuntimeError("chart is closed")
            if self._in_flight is not None:
                raise RenderInProgressError(
                    f"render generation {self._in_flight.generation} has not finished; overlapping renders are not supported"
                )
            self._generation += 1
            ticket = RenderTicket(self._generation)
            self._in_flight = ticket
            self._last_ticket = ticket

        try:
            if self.delegate is not None:
                self.delegate.did_start_render(self)
            config = self.config
            bounds = calculate_sizes(self.width, self.height, config)
            snapshot = snapshot_data_source(source, self)
            value_range = compute_value_range(snapshot.series)
        except Exception:
            with self._lock:
                self._in_flight = None
            raise

        self._bounds = bounds
        self._value_range = value_range
        token = RenderToken(ticket.generation, self)
        self._token = token
        request = RenderRequest(snapshot=snapshot, value_range=value_range, bounds=bounds, config=config)
        composer = SceneComposer(self._presentation, executor or self._default_executor())
        LOGGER.debug(
            "render generation=%d started; items=%d range=(%s, %s)",
            ticket.generation,
            len(snapshot.series),
            value_range.min,
            value_range.max,
        )
        # weak so a dropped chart lets its token lapse mid-render
        finish = weakref.WeakMethod(self._finish)

        def on_complete(tree: SceneTree, frame: np.ndarray) -> None:
            bound = finish()
            if bound is not None:
                bound(ticket, token, tree, frame)

        ticket.barrier = JoinBarrier()
        try:
            composer.render(
                request,
                token,
                on_complete,
                barrier=ticket.barrier,
            )
        except Exception:
            token.expire()
            with self._lock:
                self._in_flight = None
            raise
        return ticket

    def close(self) -> None:
        """Tear the chart down; an in-flight render never delivers its finish notification."""
        with self._lock:
            self._closed = True
            self._in_flight = None
            token = self._token
        if token is not None:
            token.expire()
        if self._owns_presentation:
            self._presentation.stop()
        if self._owns_executor and self._executor is not None:
            self._executor.shutdown(wait=False)

    def _default_executor(self) -> Executor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=DEFAULT_MAX_WORKERS, thread_name_prefix="linechart-worker")
        return self._executor

    def _finish(self, ticket: RenderTicket, token: RenderToken, tree: SceneTree, frame: np.ndarray) -> None:
        if not token.is_valid:
            return
        # old tree is replaced only now, in one step
        self._scene = tree
        self._surface.commit_frame(frame)
        with self._lock:
            if self._in_flight is ticket:
                self._in_flight = None
        LOGGER.debug("render generation=%d finished; joined=%d", ticket.generation, ticket.join_count)
        try:
            if self.delegate is not None:
                self.delegate.did_finish_render(self)
        finally:
            ticket._complete(tree)
