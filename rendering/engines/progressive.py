from __future__ import annotations

from typing import Callable, List, Optional

from coloring.base import ColoringStrategy
from coloring.hsv import WHITE
from fractals.base import ColorMapperConfig, Fractal
from fractals.window import ComplexWindow
from rendering.buffer import FrameBuffer
from rendering.engines.base import BaseRenderEngine, ScanResult


def initial_block_size(width: int, height: int) -> int:
    """Smallest power of two that is at least max(width, height)."""
    size_max = max(int(width), int(height))
    shifts = 0
    while size_max > 1:
        size_max >>= 1
        shifts += 1
    block = 1 << shifts
    if block < max(int(width), int(height)):
        block <<= 1
    return block


def block_levels(width: int, height: int) -> List[int]:
    block = initial_block_size(width, height)
    levels = [block]
    while block > 1:
        block >>= 1
        levels.append(block)
    return levels


class ProgressiveEngine(BaseRenderEngine):
    """
    Coarse-to-fine rendering:
      - One block covering the whole image gives the first color at once.
      - Each pass halves the block size. Within every cell of the previous
        pass it paints the three quarters other than the top-left one, which
        already holds the color sampled at that same corner.
      - Every block is one evaluator call at its top-left pixel, filled with
        a single color.
      - A partial frame is emitted after every grid row; cancellation is
        polled per cell and per row.
    """

    def render(
        self,
        fractal: Fractal,
        coloring: ColoringStrategy,
        config: ColorMapperConfig,
        window: ComplexWindow,
        buffer: FrameBuffer,
        cancel_cb: Optional[Callable[[], bool]] = None,
    ) -> ScanResult:
        W, H = window.width, window.height
        re_min, im_min, step = window.re_min, window.im_min, window.step
        escape_value = fractal.escape_value
        color = coloring.color
        cancelled = cancel_cb or (lambda: False)
        result = ScanResult()

        def plot(x: int, y: int, size: int) -> None:
            if x >= W or y >= H:
                return
            value = escape_value(re_min + x * step, im_min + y * step, config)
            if buffer.fill_block(x, y, size, color(value, config)):
                result.blocks_painted += 1

        if cancelled():
            return result
        buffer.clear(WHITE)

        block = initial_block_size(W, H)
        result.levels.append(block)
        plot(0, 0, block)
        self.emit_partial(block, 0)

        while block > 1:
            block2 = block
            block = block2 >> 1
            result.levels.append(block)

            y1 = 0
            while y1 < H:
                y2 = y1 + block
                x1 = 0
                while x1 < W:
                    if cancelled():
                        return result
                    x2 = x1 + block
                    plot(x1, y2, block)
                    plot(x2, y1, block)
                    plot(x2, y2, block)
                    x1 += block2

                if cancelled():
                    return result
                self.emit_partial(block, y1)
                y1 += block2

        if cancelled():
            return result
        result.completed = True
        return result
