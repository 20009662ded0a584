from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from fractals.base import ColorMapperConfig, Viewport
from rendering.buffer import FrameBuffer
from rendering.cancel import CancelToken
from rendering.core import Renderer
from rendering.events import (CancelledEvent, FrameEvent, LogEvent,
                              PartialFrameEvent, StartedEvent)
from utils.enums import SessionState

logger = logging.getLogger(__name__)


class RenderSession:
    """
    One background render of one viewport into one freshly sized buffer.

    States: IDLE -> RUNNING -> FINISHED | CANCELLED. A session is never
    reused; apply a new viewport by starting a new session.

    Callbacks run on the worker thread:
      on_started(StartedEvent), on_partial_frame(PartialFrameEvent),
      on_finished(FrameEvent), on_cancelled(CancelledEvent), on_log(LogEvent)
    """

    def __init__(
        self,
        viewport: Viewport,
        config: ColorMapperConfig,
        *,
        renderer: Optional[Renderer] = None,
        start_delay: float = 0.0,
        seq: int = 0,
    ) -> None:
        # Invalid input is reported here, before any thread exists.
        viewport.validate()
        config.validate()
        if start_delay < 0:
            start_delay = 0.0

        self.viewport = viewport
        self.config = config
        self.renderer = renderer or Renderer()
        self.start_delay = float(start_delay)
        self.seq = int(seq)

        self.buffer = FrameBuffer(viewport.width, viewport.height)

        self._token = CancelToken()
        self._state = SessionState.IDLE
        self._state_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._start_time: Optional[float] = None
        self.result = None

        # Callbacks
        self.on_started: Optional[Callable[[StartedEvent], None]] = None
        self.on_partial_frame: Optional[Callable[[PartialFrameEvent], None]] = None
        self.on_finished: Optional[Callable[[FrameEvent], None]] = None
        self.on_cancelled: Optional[Callable[[CancelledEvent], None]] = None
        self.on_log: Optional[Callable[[LogEvent], None]] = None

    # ---------------------------------------------------------------------
    # Lifecycle
    # ---------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == SessionState.RUNNING

    @property
    def cancel_requested(self) -> bool:
        return self._token.is_cancelled()

    def start(self) -> RenderSession:
        with self._state_lock:
            if self._state == SessionState.CANCELLED and self._thread is None:
                # Cancelled before it ever ran.
                return self
            if self._state != SessionState.IDLE:
                raise RuntimeError(f"Session {self.seq} already {self._state.name.lower()}; sessions are not reused.")
            self._state = SessionState.RUNNING
            self._start_time = time.time()
            thread = threading.Thread(target=self._run, name=f"render-session-{self.seq}",
                                      daemon=True)
            thread.start()
            # Published only once started, so wait() never joins an unstarted thread.
            self._thread = thread
        return self

    def cancel(self) -> None:
        """Request cancellation; safe to call repeatedly or after the session ended."""
        self._token.cancel()
        with self._state_lock:
            if self._state != SessionState.IDLE:
                return
            self._state = SessionState.CANCELLED
        # Never started: there is no worker to report it.
        self._emit(self.on_cancelled, CancelledEvent(self.seq, 0.0))

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Join the worker. Returns True once the session has ended."""
        with self._state_lock:
            thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        return self._state in (SessionState.FINISHED, SessionState.CANCELLED)

    # ---------------------------------------------------------------------
    # Worker
    # ---------------------------------------------------------------------

    def _elapsed(self) -> float:
        if self._start_time is None:
            return 0.0
        return round(time.time() - self._start_time, 3)

    def _emit(self, cb, evt) -> None:
        if cb is not None:
            cb(evt)

    def _log(self, message: str, level: int = logging.INFO) -> None:
        logger.log(level, message)
        self._emit(self.on_log, LogEvent(message, level=level))

    def _on_partial(self, block: int, row: int) -> None:
        self._emit(self.on_partial_frame,
                   PartialFrameEvent(self.buffer, self.buffer.width,
                                     self.buffer.height, self.seq, block, row))

    def _finish(self, state: SessionState) -> None:
        with self._state_lock:
            self._state = state

    def _run(self) -> None:
        vp = self.viewport
        try:
            self._emit(self.on_started, StartedEvent(vp.width, vp.height, self.seq))

            if self._token.sleep(self.start_delay):
                self._finish(SessionState.CANCELLED)
                self._emit(self.on_cancelled, CancelledEvent(self.seq, self._elapsed()))
                return

            self.result = self.renderer.render(vp, self.config, self.buffer,
                                               cancel_cb=self._token,
                                               on_partial=self._on_partial)
        except Exception as e:
            logger.exception("Render session %d failed", self.seq)
            self._emit(self.on_log, LogEvent(f"[RenderSession] Render error: {e}", level=logging.ERROR))
            self._finish(SessionState.CANCELLED)
            self._emit(self.on_cancelled, CancelledEvent(self.seq, self._elapsed()))
            return

        if self.result.completed:
            self._finish(SessionState.FINISHED)
            self._log(f"Render time: {self._elapsed()}s")
            self._emit(self.on_finished,
                       FrameEvent(self.buffer.snapshot(), int(vp.width), int(vp.height),
                                  self.seq, self._elapsed()))
        else:
            self._finish(SessionState.CANCELLED)
            self._log(f"Render {self.seq} cancelled after {self._elapsed()}s", level=logging.DEBUG)
            self._emit(self.on_cancelled, CancelledEvent(self.seq, self._elapsed()))
