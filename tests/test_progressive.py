import numpy as np
import pytest

from coloring.hsv import HsvColoring
from fractals.base import ColorMapperConfig, Viewport
from fractals.mandelbrot import MandelbrotFractal
from fractals.window import ComplexWindow
from rendering.buffer import FrameBuffer
from rendering.cancel import CancelToken
from rendering.engines.full_frame import FullFrameEngine
from rendering.engines.progressive import (ProgressiveEngine, block_levels,
                                           initial_block_size)

CONFIG = ColorMapperConfig(max_iterations=100)


class RecordingBuffer(FrameBuffer):
    def __init__(self, width, height):
        super().__init__(width, height)
        self.writes = []

    def fill_block(self, x, y, size, color):
        self.writes.append((x, y, size))
        return super().fill_block(x, y, size, color)


def render(engine, width, height, buffer=None, cancel_cb=None, config=CONFIG):
    window = ComplexWindow.from_viewport(Viewport(width=width, height=height))
    buffer = buffer or FrameBuffer(width, height)
    result = engine.render(MandelbrotFractal(), HsvColoring(), config, window,
                           buffer, cancel_cb=cancel_cb)
    return result, buffer


@pytest.mark.parametrize("w,h,expected", [
    (1, 1, 1), (2, 1, 2), (256, 256, 256), (300, 200, 512),
    (257, 3, 512), (5, 17, 32), (1920, 1080, 2048),
])
def test_initial_block_covers_image(w, h, expected):
    assert initial_block_size(w, h) == expected


@pytest.mark.parametrize("w,h", [(1, 1), (3, 5), (64, 64), (100, 37), (1920, 1080)])
def test_block_levels_are_decreasing_powers_of_two(w, h):
    levels = block_levels(w, h)
    assert levels[-1] == 1
    assert levels[0] >= max(w, h)
    for a, b in zip(levels, levels[1:]):
        assert a == 2 * b


@pytest.mark.parametrize("w,h", [(1, 1), (2, 3), (7, 5), (16, 16), (33, 17), (40, 64)])
def test_every_pixel_is_painted(w, h):
    buffer = RecordingBuffer(w, h)
    result, _ = render(ProgressiveEngine(), w, h, buffer=buffer)
    assert result.completed
    assert result.levels == block_levels(w, h)

    covered = np.zeros((h, w), dtype=bool)
    for x, y, size in buffer.writes:
        covered[max(y, 0):min(y + size, h), max(x, 0):min(x + size, w)] = True
    assert covered.all()
    # Blocks starting outside the image are never evaluated.
    assert all(x < w and y < h for x, y, _ in buffer.writes)
    assert result.blocks_painted == len(buffer.writes)


def test_blocks_sample_their_own_corner():
    buffer = RecordingBuffer(16, 16)
    render(ProgressiveEngine(), 16, 16, buffer=buffer)
    first_level = [(x, y, s) for x, y, s in buffer.writes if s == 8]
    assert sorted(first_level) == [(0, 8, 8), (8, 0, 8), (8, 8, 8)]
    assert buffer.writes[0] == (0, 0, 16)


def test_final_frame_matches_full_frame_render():
    _, progressive = render(ProgressiveEngine(), 64, 48)
    _, full = render(FullFrameEngine(), 64, 48)
    assert np.array_equal(progressive.snapshot(), full.snapshot())


def test_partial_frames_emitted_per_row():
    rows = []
    engine = ProgressiveEngine(on_partial=lambda block, row: rows.append((block, row)))
    render(engine, 8, 4)
    # initial block, then one per grid row at each level
    assert rows[0] == (8, 0)
    assert (4, 0) in rows
    assert [r for r in rows if r[0] == 1] == [(1, 0), (1, 2)]
    assert len(rows) == 1 + 1 + 1 + 2


def test_coarse_preview_is_uniform_block():
    snapshots = []
    holder = {}

    def on_partial(block, row):
        if block == 32:
            snapshots.append(holder["buffer"].snapshot())

    buffer = FrameBuffer(32, 32)
    holder["buffer"] = buffer
    render(ProgressiveEngine(on_partial=on_partial), 32, 32, buffer=buffer)
    first = snapshots[0]
    assert (first == first[0, 0]).all()


def test_cancel_stops_painting_immediately():
    token = CancelToken()
    buffer = RecordingBuffer(64, 64)
    state = {"rows": 0}

    def on_partial(block, row):
        state["rows"] += 1
        if state["rows"] == 4:
            token.cancel()
            state["writes_at_cancel"] = len(buffer.writes)

    result, _ = render(ProgressiveEngine(on_partial=on_partial), 64, 64,
                       buffer=buffer, cancel_cb=token)
    assert not result.completed
    assert result.levels[-1] > 1
    assert len(buffer.writes) == state["writes_at_cancel"]


def test_cancel_before_start_leaves_buffer_untouched():
    token = CancelToken()
    token.cancel()
    buffer = RecordingBuffer(8, 8)
    result, _ = render(ProgressiveEngine(), 8, 8, buffer=buffer, cancel_cb=token)
    assert not result.completed
    assert buffer.writes == []


def test_end_to_end_center_black_corner_colored():
    config = ColorMapperConfig(max_iterations=300, escape_radius_sq=4.0)
    result, buffer = render(ProgressiveEngine(), 256, 256, config=config)
    assert result.completed
    frame = buffer.snapshot()
    assert tuple(frame[128, 128]) == (0, 0, 0)
    assert tuple(frame[0, 0]) != (0, 0, 0)
    assert not (frame == 255).all(axis=2).any()
