from enum import Enum, IntEnum, auto


class Sense(IntEnum):
    MINIMIZE = 1
    MAXIMIZE = -1


class SearchState(Enum):
    INITIALIZING = auto()
    EXPLORING = auto()
    EXHAUSTED = auto()


DEFAULT_ABS_TOL = 0.0
DEFAULT_REL_TOL = 1e-7
DEFAULT_PRINT_INTERVAL = 100
DEFAULT_INT_TOL = 1e-6
