import threading

import pytest

from fractals.base import ColorMapperConfig, Viewport
from rendering.engines.full_frame import FullFrameEngine
from rendering.engines.progressive import ProgressiveEngine
from rendering.service import RenderService
from utils.enums import EngineMode, SessionState
from utils.errors import ConfigError

CONFIG = ColorMapperConfig(max_iterations=50)
TIMEOUT = 60.0


def make_service():
    service = RenderService(config=CONFIG)
    events = []
    lock = threading.Lock()

    def record(kind):
        def cb(evt):
            with lock:
                events.append((kind, evt.seq))
        return cb

    service.on_started = record("started")
    service.on_partial_frame = record("partial")
    service.on_finished = record("finished")
    service.on_cancelled = record("cancelled")
    return service, events


def test_start_returns_running_handle():
    service, events = make_service()
    session = service.start(Viewport(width=16, height=16))
    assert session.seq == 1
    assert service.session is session
    assert service.wait(TIMEOUT)
    assert session.state == SessionState.FINISHED
    assert ("finished", 1) in events


def test_restart_cancels_previous_session():
    service, events = make_service()
    first = service.start(Viewport(width=16, height=16), delay=30.0)
    second = service.restart(Viewport(zoom=2.0, width=16, height=16))

    # The previous worker has been joined before the new one starts.
    assert first.state == SessionState.CANCELLED
    assert second.wait(TIMEOUT)
    assert second.state == SessionState.FINISHED

    assert ("cancelled", 1) in events
    assert ("finished", 1) not in events
    assert ("finished", 2) in events


def test_events_from_superseded_sessions_are_dropped():
    service, events = make_service()
    first = service.start(Viewport(width=16, height=16), delay=30.0)
    service.start(Viewport(width=8, height=8))
    service.wait(TIMEOUT)
    seqs = {seq for kind, seq in events if kind in ("partial", "finished")}
    assert seqs == {2}
    assert first.state == SessionState.CANCELLED


def test_cancel_is_safe_without_session():
    service, events = make_service()
    service.cancel()
    service.shutdown()
    assert events == []


def test_cancel_handle_and_current():
    service, events = make_service()
    session = service.start(Viewport(width=16, height=16), delay=30.0)
    service.cancel(session)
    service.cancel()
    assert session.wait(5.0)
    assert session.state == SessionState.CANCELLED
    assert events.count(("cancelled", 1)) == 1


def test_invalid_viewport_keeps_current_render():
    service, events = make_service()
    session = service.start(Viewport(width=16, height=16), delay=30.0)
    with pytest.raises(ConfigError):
        service.start(Viewport(zoom=-1.0, width=16, height=16))
    assert service.session is session
    assert not session.cancel_requested
    service.shutdown()
    assert session.state == SessionState.CANCELLED


def test_set_config_validates():
    service, _ = make_service()
    with pytest.raises(ConfigError):
        service.set_config(ColorMapperConfig(saturation=2.0))
    assert service.config == CONFIG


def test_engine_mode_switch():
    service, events = make_service()
    service.set_engine_mode(EngineMode.FULL_FRAME)
    assert isinstance(service.renderer.engine, FullFrameEngine)
    session = service.start(Viewport(width=12, height=12))
    assert session.wait(TIMEOUT)
    assert session.result.levels == [1]
    service.set_engine_mode(EngineMode.PROGRESSIVE)
    assert isinstance(service.renderer.engine, ProgressiveEngine)


def test_restart_from_finished_callback():
    service, _ = make_service()
    done = threading.Event()
    seen = []

    def on_finished(evt):
        seen.append(evt.seq)
        if evt.seq == 1:
            service.restart(Viewport(zoom=3.0, width=8, height=8))
        else:
            done.set()

    service.on_finished = on_finished
    service.start(Viewport(width=8, height=8))
    assert done.wait(TIMEOUT)
    assert seen == [1, 2]
    service.shutdown()
