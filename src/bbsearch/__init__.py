__all__ = [
    "BnBSolution",
    "BnBNode",
    "BnBProblem",
    "SearchParams",
    "Sense",
    "SearchState",
    "MINIMIZE",
    "MAXIMIZE",
    "BranchAndBound",
    "SearchStats",
    "search",
    "fathom",
    "relative_gap",
    "NodeQueue",
    "SearchQueue",
    "BnBError",
    "ContractViolation",
    "InstanceFormatError",
]

from .base import BnBSolution, BnBNode, BnBProblem
from .params import SearchParams
from .constants import Sense, SearchState
from .search import BranchAndBound, SearchStats, search
from .fathom import fathom, relative_gap
from .queue import NodeQueue, SearchQueue
from .exceptions import BnBError, ContractViolation, InstanceFormatError

MINIMIZE = Sense.MINIMIZE
MAXIMIZE = Sense.MAXIMIZE
