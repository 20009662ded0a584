from dataclasses import dataclass

import numpy as np

from fractals.base import ColorMapperConfig, EscapeResult, Fractal
from kernel_sources.cpu.mandelbrot import (escape_value, mandelbrot_escape,
                                           mandelbrot_iter, mandelbrot_smooth)
from utils.enums import ColoringMode


@dataclass
class MandelbrotFractal(Fractal):
    """
    Plot the Mandelbrot set, `z := z * z + c`.

    http://en.wikipedia.org/wiki/Mandelbrot_set
    """
    name: str = "mandelbrot"

    def evaluate(self, c_re: float, c_im: float,
                 config: ColorMapperConfig) -> EscapeResult:
        bailout = float(config.escape_radius_sq)
        n, mag_sq = mandelbrot_escape(float(c_re), float(c_im),
                                      int(config.max_iterations), bailout)
        return EscapeResult(iterations=int(n),
                            final_magnitude_sq=float(mag_sq),
                            escaped=bool(mag_sq >= bailout))

    def escape_value(self, c_re: float, c_im: float,
                     config: ColorMapperConfig) -> float:
        bailout = float(config.escape_radius_sq)
        n, mag_sq = mandelbrot_escape(float(c_re), float(c_im),
                                      int(config.max_iterations), bailout)
        return float(escape_value(n, mag_sq, bailout,
                                  config.coloring == ColoringMode.SMOOTH))

    def escape_grid(self, re_min: float, im_min: float, step: float,
                    width: int, height: int,
                    config: ColorMapperConfig) -> np.ndarray:
        bailout = float(config.escape_radius_sq)
        iter_raw = np.zeros((height, width), dtype=np.int64)
        mag_sq = np.zeros((height, width), dtype=np.float64)
        mandelbrot_iter(float(re_min), float(im_min), float(step),
                        int(config.max_iterations), bailout, iter_raw, mag_sq)

        values = np.zeros((height, width), dtype=np.float64)
        mandelbrot_smooth(bailout, config.coloring == ColoringMode.SMOOTH,
                          iter_raw, mag_sq, values)
        return values
