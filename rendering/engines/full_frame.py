from __future__ import annotations

from typing import Callable, Optional

from coloring.base import ColoringStrategy
from fractals.base import ColorMapperConfig, Fractal
from fractals.window import ComplexWindow
from rendering.buffer import FrameBuffer
from rendering.engines.base import BaseRenderEngine, ScanResult


class FullFrameEngine(BaseRenderEngine):
    """
    Full-frame rendering strategy:
      - Evaluates every pixel in one parallel kernel call.
      - Colors the whole grid and commits it to the buffer in one write.
      - Emits a single partial frame (block size 1) once committed.
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
        result = ScanResult()
        # If the caller already cancelled (e.g., a new render started), leave the buffer untouched.
        if cancel_cb is not None and cancel_cb():
            return result

        values = fractal.escape_grid(window.re_min, window.im_min, window.step,
                                     window.width, window.height, config)
        rgb = coloring.apply(values, config)

        if cancel_cb is not None and cancel_cb():
            return result
        buffer.write(rgb)
        result.levels.append(1)
        result.blocks_painted = window.width * window.height
        self.emit_partial(1, 0)
        result.completed = True
        return result
