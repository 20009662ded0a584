from __future__ import annotations

import threading
from typing import Tuple

import numpy as np

from utils.errors import BufferAllocationError, ConfigError


class FrameBuffer:
    """
    RGB pixel buffer shared between one render worker and its presenter.

    The worker is the only writer. Each block fill and each snapshot runs
    under the same lock, so a presenter never sees a block half-painted.
    """

    def __init__(self, width: int, height: int) -> None:
        width, height = int(width), int(height)
        if width <= 0 or height <= 0:
            raise ConfigError(f"image size must be positive, got {width}x{height}.")
        try:
            self.data = np.empty((height, width, 3), dtype=np.uint8)
        except (MemoryError, ValueError) as e:
            raise BufferAllocationError(
                f"Cannot allocate {width}x{height} frame buffer: {e}") from e
        self.width = width
        self.height = height
        self._lock = threading.Lock()

    @property
    def shape(self) -> Tuple[int, int]:
        return self.height, self.width

    def clear(self, color=(255, 255, 255)) -> None:
        with self._lock:
            self.data[:, :] = color

    def fill_block(self, x: int, y: int, size: int, color) -> bool:
        """
        Paint the square block at (x, y), clipped to the buffer.
        Returns False when the block lies entirely outside the image.
        """
        x0, y0 = max(x, 0), max(y, 0)
        x1, y1 = min(x + size, self.width), min(y + size, self.height)
        if x0 >= x1 or y0 >= y1:
            return False
        with self._lock:
            self.data[y0:y1, x0:x1] = color
        return True

    def snapshot(self) -> np.ndarray:
        with self._lock:
            return self.data.copy()

    def write(self, rgb: np.ndarray) -> None:
        """Replace the whole frame in one locked write."""
        if rgb.shape != self.data.shape:
            raise ValueError(f"frame shape {rgb.shape} does not match buffer {self.data.shape}")
        with self._lock:
            self.data[...] = rgb
