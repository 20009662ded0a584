from dataclasses import dataclass
import numpy as np
from typing import Optional

from rendering.buffer import FrameBuffer

@dataclass(frozen=True)
class StartedEvent:
    width: int
    height: int
    seq: int        # generation / render sequence number

@dataclass(frozen=True)
class PartialFrameEvent:
    data: FrameBuffer   # live buffer; snapshot() for a consistent copy
    width: int
    height: int
    seq: int
    block: int          # block size of the pass being painted
    row: int            # top pixel row of the grid row just completed

@dataclass(frozen=True)
class FrameEvent:
    data: np.ndarray
    width: int
    height: int
    seq: int
    elapsed: float

@dataclass(frozen=True)
class CancelledEvent:
    seq: int
    elapsed: float

@dataclass(frozen=True)
class LogEvent:
    message: str
    level: Optional[int]
