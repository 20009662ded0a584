import math

from numba import njit, prange

LOG2 = math.log(2.0)


@njit(cache=True)
def escape_value(n, mag_sq, bailout, smooth):
    # Interior points (cap reached without escaping) map to the 0.0 sentinel.
    if mag_sq < bailout:
        return 0.0
    if not smooth:
        return float(n)
    r = math.sqrt(mag_sq)
    # log(log(r)) needs r > 1; an infinite r gives a non-finite nu.
    if not r > 1.0:
        return float(n)
    nu = n + 1.0 - math.log(math.log(r)) / LOG2
    if math.isfinite(nu):
        return nu
    return float(n)


@njit(cache=True, parallel=True)
def mandelbrot_smooth(bailout, smooth, iter_raw, mag_sq, values):
    H, W = iter_raw.shape
    for y in prange(H):
        for x in range(W):
            values[y, x] = escape_value(iter_raw[y, x], mag_sq[y, x],
                                        bailout, smooth)
