from numba import njit, prange


@njit(cache=True)
def mandelbrot_escape(c_re, c_im, max_iter, bailout):
    """
    Iterate z := z*z + c from z = 0 until |z|^2 reaches the bailout or the
    iteration cap is hit. Returns (iterations, |z|^2).
    """
    z_re = 0.0
    z_im = 0.0
    z_re_sq = 0.0
    z_im_sq = 0.0
    n = 0
    while True:
        z_im = 2.0 * z_re * z_im + c_im
        z_re = z_re_sq - z_im_sq + c_re
        z_re_sq = z_re * z_re
        z_im_sq = z_im * z_im
        n += 1
        if n >= max_iter or z_re_sq + z_im_sq >= bailout:
            break
    return n, z_re_sq + z_im_sq


@njit(cache=True, parallel=True)
def mandelbrot_iter(re_min, im_min, step, max_iter, bailout,
                    iter_raw, mag_sq):
    H, W = iter_raw.shape
    for y in prange(H):
        c_im = im_min + y * step
        for x in range(W):
            c_re = re_min + x * step
            n, m = mandelbrot_escape(c_re, c_im, max_iter, bailout)
            iter_raw[y, x] = n
            mag_sq[y, x] = m
