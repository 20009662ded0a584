import random
import threading
import time

from api.wallpaper import WallpaperDriver, random_viewport
from fractals.base import WALLPAPER_CONFIG, ColorMapperConfig
from utils.enums import SessionState

TIMEOUT = 60.0


def test_random_viewport_is_seeded_and_bounded():
    a = random_viewport(200, 100, random.Random(42))
    b = random_viewport(200, 100, random.Random(42))
    assert a == b
    assert (a.width, a.height) == (200, 100)
    assert a.zoom >= 0.5
    for seed in range(50):
        vp = random_viewport(200, 100, random.Random(seed))
        vp.validate()
        assert vp.zoom <= 25.0


def test_wallpaper_uses_dim_colors():
    assert (WALLPAPER_CONFIG.saturation, WALLPAPER_CONFIG.brightness) == (0.5, 0.5)


def test_driver_keeps_rendering_new_scenes():
    driver = WallpaperDriver(12, 12, config=ColorMapperConfig(max_iterations=30,
                                                                saturation=0.5,
                                                                brightness=0.5),
                             admire_delay=0.0, rng=random.Random(1))
    frames = []
    enough = threading.Event()

    def on_frame(evt):
        frames.append(evt.seq)
        if len(frames) >= 3:
            enough.set()

    driver.on_frame = on_frame
    driver.set_visible(True)
    try:
        assert enough.wait(TIMEOUT)
    finally:
        driver.stop()
    assert frames[:3] == sorted(frames[:3])
    assert len(set(frames)) == len(frames)
    assert driver.frames >= 3


def test_driver_stops_when_hidden():
    driver = WallpaperDriver(8, 8, admire_delay=30.0, rng=random.Random(2))
    done = threading.Event()
    driver.on_frame = lambda evt: done.set()
    driver.set_visible(True)
    assert done.wait(TIMEOUT)
    # The next scene may be waiting out its admire delay; stopping cancels it.
    driver.set_visible(False)
    started = time.time()
    driver.stop()
    assert time.time() - started < 10.0
    assert driver.service.session.state != SessionState.RUNNING
    assert not driver.service.is_rendering


def test_set_size_randomises_view():
    driver = WallpaperDriver(8, 8, admire_delay=0.0, rng=random.Random(3))
    session = driver.set_size(10, 6)
    assert (session.viewport.width, session.viewport.height) == (10, 6)
    assert session.config == driver.config
    driver.stop()
