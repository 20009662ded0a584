from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import List

import numpy as np

from utils.enums import ColoringMode
from utils.errors import ConfigError


@dataclass(frozen=True)
class Viewport:
    """
    Pan and zoom onto the complex plane plus the size of the output image.

    Pan offsets are screen-space pixels at zoom 1. The viewport is produced
    by the UI layer before each render and never changes while one runs.
    """
    pan_x: float = 0.0
    pan_y: float = 0.0
    zoom: float = 1.0
    width: int = 1
    height: int = 1

    def validate(self) -> None:
        errors: List[str] = []
        if not np.isfinite(self.zoom) or self.zoom <= 0:
            errors.append(f"zoom must be > 0, got {self.zoom!r}.")
        if not (np.isfinite(self.pan_x) and np.isfinite(self.pan_y)):
            errors.append(f"pan must be finite, got ({self.pan_x!r}, {self.pan_y!r}).")
        if int(self.width) <= 0 or int(self.height) <= 0:
            errors.append(f"image size must be positive, got {self.width}x{self.height}.")
        if errors:
            raise ConfigError(" ".join(errors))

    # ---- Gesture transforms ---------------------------------------------

    def translated(self, dx: float, dy: float) -> Viewport:
        """Pan by a pixel delta."""
        return replace(self, pan_x=self.pan_x + dx, pan_y=self.pan_y + dy)

    def scaled(self, factor: float) -> Viewport:
        """
        Zoom by `factor` about the plane origin.
        The pan offset is scaled too, so a pan applied earlier keeps pointing
        at the same feature.
        """
        if factor <= 0:
            raise ConfigError(f"zoom factor must be > 0, got {factor!r}.")
        return replace(self, pan_x=self.pan_x * factor,
                       pan_y=self.pan_y * factor,
                       zoom=self.zoom * factor)

    def resized(self, width: int, height: int) -> Viewport:
        return replace(self, width=int(width), height=int(height))


@dataclass(frozen=True)
class ReferenceRect:
    """Region of the complex plane shown at zoom 1 with no pan."""
    re_min: float
    re_max: float
    im_min: float
    im_max: float

    @property
    def re_size(self) -> float:
        return self.re_max - self.re_min

    @property
    def im_size(self) -> float:
        return self.im_max - self.im_min


REFERENCE_SQUARE = ReferenceRect(-2.0, 2.0, -2.0, 2.0)
REFERENCE_CLASSIC = ReferenceRect(-2.1, 1.0, -1.2, 1.2)


@dataclass(frozen=True)
class ColorMapperConfig:
    """
    Per-session coloring and iteration settings.
    Density stretches the escape value along the hue circle.
    Saturation and brightness are HSV components in [0, 1].
    Max_iterations and escape_radius_sq bound the escape-time recurrence.
    Hue_range is the span of hues cycled through (360 for the full circle).
    """
    density: float = 10.0
    saturation: float = 1.0
    brightness: float = 1.0
    max_iterations: int = 300
    escape_radius_sq: float = 4.0
    hue_range: float = 360.0
    coloring: ColoringMode = ColoringMode.SMOOTH

    def validate(self) -> None:
        errors: List[str] = []
        if not self.density > 0:
            errors.append(f"density must be > 0, got {self.density!r}.")
        if not 0.0 <= self.saturation <= 1.0:
            errors.append(f"saturation must be within [0, 1], got {self.saturation!r}.")
        if not 0.0 <= self.brightness <= 1.0:
            errors.append(f"brightness must be within [0, 1], got {self.brightness!r}.")
        if int(self.max_iterations) < 1:
            errors.append(f"max_iterations must be >= 1, got {self.max_iterations!r}.")
        if not self.escape_radius_sq > 0:
            errors.append(f"escape_radius_sq must be > 0, got {self.escape_radius_sq!r}.")
        if not 0.0 < self.hue_range <= 360.0:
            errors.append(f"hue_range must be within (0, 360], got {self.hue_range!r}.")
        if not isinstance(self.coloring, ColoringMode):
            errors.append(f"coloring must be a ColoringMode, got {self.coloring!r}.")
        if errors:
            raise ConfigError(" ".join(errors))


DEFAULT_CONFIG = ColorMapperConfig()
# Dimmer palette used by the live wallpaper so icons stay readable on top.
WALLPAPER_CONFIG = ColorMapperConfig(saturation=0.5, brightness=0.5)


@dataclass(frozen=True)
class EscapeResult:
    iterations: int
    final_magnitude_sq: float
    escaped: bool


class Fractal(ABC):
    """
    An abstract base class for escape-time fractals.
    """
    name: str

    @abstractmethod
    def evaluate(self, c_re: float, c_im: float,
                 config: ColorMapperConfig) -> EscapeResult: ...

    @abstractmethod
    def escape_value(self, c_re: float, c_im: float,
                     config: ColorMapperConfig) -> float:
        """
        Continuous value fed to the color mapper; 0.0 marks interior points.
        """
        ...

    @abstractmethod
    def escape_grid(self, re_min: float, im_min: float, step: float,
                    width: int, height: int,
                    config: ColorMapperConfig) -> np.ndarray: ...
