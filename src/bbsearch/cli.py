"""Command line driver: solve a knapsack instance file."""

from __future__ import annotations

import argparse
import logging
import time
from typing import List

from .constants import DEFAULT_ABS_TOL, DEFAULT_REL_TOL
from .exceptions import InstanceFormatError
from .params import SearchParams
from .problems.knapsack import read_knapsack, translate_solution
from .search import BranchAndBound

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bbsearch-knapsack",
        description="Solve a 0/1 knapsack instance by best-first branch-and-bound",
    )
    parser.add_argument(
        "instance",
        help="Instance file: capacity on the first line, then 'name weight value' lines",
    )
    parser.add_argument("--abs-tol", type=float, default=DEFAULT_ABS_TOL)
    parser.add_argument("--rel-tol", type=float, default=DEFAULT_REL_TOL)
    parser.add_argument(
        "--print-interval",
        type=int,
        default=1000,
        help="Log a status line every N bounded nodes (0 disables)",
    )
    parser.add_argument(
        "--no-integral-tol",
        action="store_true",
        help="Do not raise the absolute tolerance to the gcd of the item values",
    )
    parser.add_argument("--debug", action="store_true", help="Trace every search step")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser


def main(argv: List[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    log_level = "DEBUG" if args.debug else args.log_level
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    params = SearchParams(
        abs_tol=args.abs_tol,
        rel_tol=args.rel_tol,
        print_interval=args.print_interval,
        debug=args.debug,
    )

    logger.info(f"Reading problem {args.instance}")
    try:
        problem = read_knapsack(args.instance, params)
    except (OSError, InstanceFormatError) as e:
        logger.error(f"Could not read instance: {e}")
        return 1
    logger.info(f"Read problem with {problem.num_items} items")

    if not args.no_integral_tol:
        problem.use_integral_tolerance()

    logger.info("Setup complete, starting search")
    start = time.perf_counter()
    engine = BranchAndBound(problem)
    solution, num_bounded = engine.run()
    elapsed = time.perf_counter() - start

    logger.info(
        f"After bounding {num_bounded} subproblems, the result has value "
        f"{solution.value:f}"
    )
    logger.info(f"Time is {elapsed:f} seconds")
    by_number, by_name = translate_solution(solution, problem)
    logger.info(f"Chosen items: {', '.join(by_name) if by_name else '(none)'}")
    logger.debug(f"Chosen item numbers: {by_number}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
