import numpy as np
from numba import njit, prange

from coloring.base import RGB, ColoringStrategy
from fractals.base import ColorMapperConfig

BLACK = (0, 0, 0)
WHITE = (255, 255, 255)


@njit(cache=True)
def hsv_to_rgb(h, s, v):
    """h in [0, 360), s and v in [0, 1]; returns 0-255 components."""
    c = v * s
    hp = h / 60.0
    x = c * (1.0 - abs(hp % 2.0 - 1.0))
    sector = int(hp)
    if sector == 0:
        r1, g1, b1 = c, x, 0.0
    elif sector == 1:
        r1, g1, b1 = x, c, 0.0
    elif sector == 2:
        r1, g1, b1 = 0.0, c, x
    elif sector == 3:
        r1, g1, b1 = 0.0, x, c
    elif sector == 4:
        r1, g1, b1 = x, 0.0, c
    else:
        r1, g1, b1 = c, 0.0, x
    m = v - c
    return (int((r1 + m) * 255.0 + 0.5),
            int((g1 + m) * 255.0 + 0.5),
            int((b1 + m) * 255.0 + 0.5))


@njit(cache=True)
def map_color(value, density, hue_range, saturation, brightness):
    if value == 0.0:
        return hsv_to_rgb(0.0, 0.0, 0.0)
    # Python float modulo: the result takes the sign of hue_range.
    hue = (value * density) % hue_range
    if hue >= hue_range:
        hue = 0.0
    return hsv_to_rgb(hue, saturation, brightness)


@njit(cache=True, parallel=True)
def map_colors(values, density, hue_range, saturation, brightness, rgb):
    H, W = values.shape
    for y in prange(H):
        for x in range(W):
            r, g, b = map_color(values[y, x], density, hue_range,
                                saturation, brightness)
            rgb[y, x, 0] = r
            rgb[y, x, 1] = g
            rgb[y, x, 2] = b


class HsvColoring(ColoringStrategy):
    """
    Escape value -> hue around the color circle; interior points are black.
    """

    def color(self, value: float, config: ColorMapperConfig) -> RGB:
        r, g, b = map_color(float(value), float(config.density),
                            float(config.hue_range),
                            float(config.saturation), float(config.brightness))
        return int(r), int(g), int(b)

    def apply(self, values: np.ndarray, config: ColorMapperConfig) -> np.ndarray:
        h, w = values.shape
        rgb = np.zeros((h, w, 3), dtype=np.uint8)
        map_colors(values.astype(np.float64, copy=False),
                   float(config.density), float(config.hue_range),
                   float(config.saturation), float(config.brightness), rgb)
        return rgb
