from __future__ import annotations

import dataclasses
from dataclasses import dataclass

from .constants import DEFAULT_ABS_TOL, DEFAULT_PRINT_INTERVAL, DEFAULT_REL_TOL


@dataclass(frozen=True)
class SearchParams:
    """
    Tunable knobs of a branch-and-bound run.

    Attributes:
        abs_tol: Nodes whose bound beats the incumbent by less than this are pruned.
        rel_tol: Nodes whose bound beats the incumbent by at most
            ``rel_tol * |bound|`` are pruned.
        print_interval: Log a status line every this many bounded nodes
            (0 disables status output).
        debug: Emit a trace of every search step at DEBUG level.
    """

    abs_tol: float = DEFAULT_ABS_TOL
    rel_tol: float = DEFAULT_REL_TOL
    print_interval: int = DEFAULT_PRINT_INTERVAL
    debug: bool = False

    def __post_init__(self):
        if not self.abs_tol >= 0:
            raise ValueError(f"abs_tol must be non-negative, got {self.abs_tol}")
        if not self.rel_tol >= 0:
            raise ValueError(f"rel_tol must be non-negative, got {self.rel_tol}")
        if self.print_interval < 0:
            raise ValueError(
                f"print_interval must be non-negative, got {self.print_interval}"
            )

    def replace(self, **changes) -> SearchParams:
        return dataclasses.replace(self, **changes)
