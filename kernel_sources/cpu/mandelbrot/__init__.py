from kernel_sources.cpu.mandelbrot.iter import mandelbrot_escape, mandelbrot_iter
from kernel_sources.cpu.mandelbrot.smooth import escape_value, mandelbrot_smooth

__all__ = [
    "mandelbrot_escape",
    "mandelbrot_iter",
    "escape_value",
    "mandelbrot_smooth",
]
