from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from fractals.base import DEFAULT_CONFIG, ColorMapperConfig, Viewport
from rendering.core import Renderer
from rendering.engines.full_frame import FullFrameEngine
from rendering.engines.progressive import ProgressiveEngine
from rendering.events import (CancelledEvent, FrameEvent, LogEvent,
                              PartialFrameEvent, StartedEvent)
from rendering.session import RenderSession
from utils.enums import EngineMode

logger = logging.getLogger(__name__)


class RenderService:
    """
    Caller-facing owner of the renders for one logical target (a view or a
    wallpaper surface):
      - at most one session runs at a time,
      - start/cancel/restart lifecycle,
      - event dispatch (started/partial/finished/cancelled/log),
      - events from superseded sessions are dropped, except on_cancelled.
    """

    def __init__(
        self,
        renderer: Optional[Renderer] = None,
        config: ColorMapperConfig = DEFAULT_CONFIG,
    ) -> None:
        self.renderer = renderer or Renderer()
        self.config = config
        self.engine_mode = EngineMode.PROGRESSIVE

        self._session: Optional[RenderSession] = None
        self._render_seq = 0
        self._lock = threading.RLock()

        # Callbacks
        self.on_started: Optional[Callable[[StartedEvent], None]] = None
        self.on_partial_frame: Optional[Callable[[PartialFrameEvent], None]] = None
        self.on_finished: Optional[Callable[[FrameEvent], None]] = None
        self.on_cancelled: Optional[Callable[[CancelledEvent], None]] = None
        self.on_log: Optional[Callable[[LogEvent], None]] = None

    # ---------------------------------------------------------------------
    # Configuration
    # ---------------------------------------------------------------------

    def set_config(self, config: ColorMapperConfig) -> None:
        """Used by the next start(); a running session keeps its own config."""
        config.validate()
        self.config = config

    def set_engine_mode(self, mode: EngineMode) -> None:
        self.engine_mode = mode
        if mode == EngineMode.FULL_FRAME:
            self.renderer.set_engine(FullFrameEngine())
        else:
            self.renderer.set_engine(ProgressiveEngine())

    @property
    def session(self) -> Optional[RenderSession]:
        return self._session

    @property
    def is_rendering(self) -> bool:
        s = self._session
        return s is not None and s.is_running and not s.cancel_requested

    # ---------------------------------------------------------------------
    # Lifecycle
    # ---------------------------------------------------------------------

    def start(
        self,
        viewport: Viewport,
        config: Optional[ColorMapperConfig] = None,
        delay: float = 0.0,
    ) -> RenderSession:
        """
        Start rendering `viewport`. Any running session is cancelled and
        joined first, so two sessions never paint for the same target.
        """
        with self._lock:
            # Built before anything changes: invalid input leaves the current render alone.
            session = RenderSession(viewport, config or self.config,
                                    renderer=self.renderer,
                                    start_delay=delay,
                                    seq=self._render_seq + 1)
            self._render_seq = session.seq
            previous, self._session = self._session, session
            self._wire(session)

        self._stop(previous)
        logger.debug("Starting render %d: %s", session.seq, viewport)
        return session.start()

    def cancel(self, handle: Optional[RenderSession] = None) -> None:
        with self._lock:
            session = handle or self._session
            if session is not None:
                session.cancel()

    def restart(
        self,
        viewport: Viewport,
        config: Optional[ColorMapperConfig] = None,
        delay: float = 0.0,
    ) -> RenderSession:
        return self.start(viewport, config, delay)

    def shutdown(self) -> None:
        # A callback may start a new session while the current one winds down.
        while True:
            with self._lock:
                session = self._session
            self._stop(session)
            with self._lock:
                if self._session is session:
                    return

    def wait(self, timeout: Optional[float] = None) -> bool:
        session = self._session
        return session is None or session.wait(timeout)

    # ---------------------------------------------------------------------
    # Internals
    # ---------------------------------------------------------------------

    @staticmethod
    def _stop(session: Optional[RenderSession]) -> None:
        if session is None:
            return
        session.cancel()
        session.wait()

    def _is_current(self, seq: int) -> bool:
        return seq == self._render_seq

    def _wire(self, session: RenderSession) -> None:
        def forward(name: str):
            def handler(evt) -> None:
                # Cancellation of a superseded session is still reported.
                if name != "on_cancelled" and not self._is_current(session.seq):
                    return
                cb = getattr(self, name)
                if cb is not None:
                    cb(evt)
            return handler

        session.on_started = forward("on_started")
        session.on_partial_frame = forward("on_partial_frame")
        session.on_finished = forward("on_finished")
        session.on_cancelled = forward("on_cancelled")
        session.on_log = forward("on_log")
