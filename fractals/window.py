from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from fractals.base import REFERENCE_SQUARE, ReferenceRect, Viewport


@dataclass(frozen=True)
class ComplexWindow:
    """
    Region of the complex plane covered by the output image.

    The reference rectangle is fitted inside the image at zoom 1 so the
    shorter image dimension governs the scale; the longer axis shows extra
    plane on both sides. Both axes share one per-pixel step, so the fractal
    is never stretched.
    """
    re_min: float
    re_max: float
    im_min: float
    im_max: float
    step: float
    width: int
    height: int

    @classmethod
    def from_viewport(cls, viewport: Viewport,
                      reference: ReferenceRect = REFERENCE_SQUARE) -> ComplexWindow:
        viewport.validate()
        w, h = int(viewport.width), int(viewport.height)
        zoom = float(viewport.zoom)

        # Pixels per unit at zoom 1.
        scale0 = min(w / reference.re_size, h / reference.im_size)

        # Fitted reference rect, centered in the image.
        re_min0 = reference.re_min - (w / scale0 - reference.re_size) / 2.0
        im_min0 = reference.im_min - (h / scale0 - reference.im_size) / 2.0

        # Zoom scales plane coordinates about the origin; pan is in pixels.
        scale = scale0 * zoom
        step = 1.0 / scale
        re_min = re_min0 / zoom + viewport.pan_x / scale
        im_min = im_min0 / zoom + viewport.pan_y / scale

        return cls(re_min=re_min,
                   re_max=re_min + w * step,
                   im_min=im_min,
                   im_max=im_min + h * step,
                   step=step,
                   width=w,
                   height=h)

    def pixel_to_complex(self, x: float, y: float) -> Tuple[float, float]:
        return self.re_min + x * self.step, self.im_min + y * self.step

    def complex_to_pixel(self, c_re: float, c_im: float) -> Tuple[int, int]:
        px = int((c_re - self.re_min) / self.step)
        py = int((c_im - self.im_min) / self.step)
        return px, py
