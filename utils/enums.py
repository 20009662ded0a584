from enum import Enum, auto

class ColoringMode(Enum):
    SMOOTH = auto()
    BANDED = auto()

class EngineMode(Enum):
    FULL_FRAME = auto()
    PROGRESSIVE = auto()

class SessionState(Enum):
    IDLE = auto()
    RUNNING = auto()
    FINISHED = auto()
    CANCELLED = auto()
