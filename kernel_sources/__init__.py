# Kernel sources package
from kernel_sources.cpu.mandelbrot import (mandelbrot_escape, mandelbrot_iter,
                                           escape_value, mandelbrot_smooth)

__all__ = [
    "mandelbrot_escape",
    "mandelbrot_iter",
    "escape_value",
    "mandelbrot_smooth",
]
__version__ = "0.3.0"
