from abc import ABC, abstractmethod
from typing import Tuple

import numpy as np

from fractals.base import ColorMapperConfig

RGB = Tuple[int, int, int]


class ColoringStrategy(ABC):
    @abstractmethod
    def color(self, value: float, config: ColorMapperConfig) -> RGB:
        ...

    @abstractmethod
    def apply(self, values: np.ndarray, config: ColorMapperConfig) -> np.ndarray:
        ...
