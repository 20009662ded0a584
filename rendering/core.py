from __future__ import annotations

import copy
from typing import Callable, Optional

from coloring.base import ColoringStrategy
from coloring.hsv import HsvColoring
from fractals.base import (REFERENCE_SQUARE, ColorMapperConfig, Fractal,
                           ReferenceRect, Viewport)
from fractals.mandelbrot import MandelbrotFractal
from fractals.window import ComplexWindow
from rendering.buffer import FrameBuffer
from rendering.engines.base import BaseRenderEngine, ScanResult
from rendering.engines.progressive import ProgressiveEngine


class Renderer:

    """
    Facade that binds together:
      - the fractal + coloring strategy,
      - the render engine (strategy),
      - the reference rectangle shown at zoom 1
    """

    def __init__(
        self,
        fractal: Optional[Fractal] = None,
        coloring: Optional[ColoringStrategy] = None,
        *,
        engine: Optional[BaseRenderEngine] = None,
        reference: ReferenceRect = REFERENCE_SQUARE,
    ):
        self.fractal = fractal or MandelbrotFractal()
        self.coloring = coloring or HsvColoring()
        self.engine = engine or ProgressiveEngine()
        self.reference = reference

    def set_engine(self, engine: BaseRenderEngine) -> None:
        """Swap rendering strategy."""
        self.engine = engine

    def window(self, vp: Viewport) -> ComplexWindow:
        return ComplexWindow.from_viewport(vp, self.reference)

    def render(
        self,
        vp: Viewport,
        config: ColorMapperConfig,
        buffer: FrameBuffer,
        cancel_cb: Optional[Callable[[], bool]] = None,
        on_partial: Optional[Callable[[int, int], None]] = None,
    ) -> ScanResult:
        """
        Paint `buffer` for the viewport, blocking until done or cancelled.
        """
        config.validate()
        window = self.window(vp)
        # Per-render copy: a superseded session may still be unwinding on the shared engine.
        engine = copy.copy(self.engine)
        engine.on_partial = on_partial
        return engine.render(self.fractal, self.coloring, config,
                                  window, buffer, cancel_cb=cancel_cb)
