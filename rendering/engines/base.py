from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from coloring.base import ColoringStrategy
from fractals.base import ColorMapperConfig, Fractal
from fractals.window import ComplexWindow
from rendering.buffer import FrameBuffer


@dataclass
class ScanResult:
    completed: bool = False
    levels: List[int] = field(default_factory=list)   # block sizes, in pass order
    blocks_painted: int = 0


class BaseRenderEngine:
    """
    Base class for render engines (full-frame, progressive).

    Responsibilities:
      - Decide *how* to visit the image (strategy),
      - Paint colors into the frame buffer,
      - Report partial progress via on_partial (if applicable).
    """

    def __init__(self, on_partial: Optional[Callable[[int, int], None]] = None) -> None:
        # Called with (block, row) after each committed grid row.
        self.on_partial: Optional[Callable[[int, int], None]] = on_partial

    def emit_partial(self, block: int, row: int) -> None:
        cb = self.on_partial
        if callable(cb):
            cb(int(block), int(row))

    def render(
        self,
        fractal: Fractal,
        coloring: ColoringStrategy,
        config: ColorMapperConfig,
        window: ComplexWindow,
        buffer: FrameBuffer,
        cancel_cb: Optional[Callable[[], bool]] = None,
    ) -> ScanResult:
        """
        Subclasses paint `buffer` for `window`, polling cancel_cb as they go,
        and return a ScanResult with completed=False when cancelled.
        """
        raise NotImplementedError("BaseRenderEngine.render() must be implemented by subclasses.")
