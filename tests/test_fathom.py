"""Tests for the fathoming rule and gap reporting."""
import math

import pytest

from bbsearch import fathom, relative_gap
from bbsearch.constants import Sense
from bbsearch.exceptions import ContractViolation
from conftest import make_stub


def test_bound_no_better_than_incumbent_is_pruned():
    """Test a bound no better than the incumbent is fathomed."""
    problem = make_stub(Sense.MINIMIZE, incumbent=10.0)
    assert fathom(10.0, problem)
    assert fathom(11.0, problem)
    assert not fathom(9.0, problem)


def test_maximize_direction():
    """Test fathoming when maximizing."""
    problem = make_stub(Sense.MAXIMIZE, incumbent=90.0)
    assert not fathom(105.0, problem)
    assert fathom(90.0, problem)
    assert fathom(60.0, problem)


def test_absolute_tolerance():
    """Test the absolute tolerance is a strict bound on the gap."""
    problem = make_stub(Sense.MINIMIZE, incumbent=10.0, abs_tol=2.0)
    assert fathom(9.0, problem)
    # A gap equal to abs_tol is not "smaller than" it
    assert not fathom(8.0, problem)


def test_relative_tolerance_scales_with_bound():
    """Test the relative tolerance is scaled by the bound."""
    problem = make_stub(Sense.MINIMIZE, incumbent=10.0, rel_tol=0.25)
    assert fathom(8.0, problem)  # gap 2 <= 0.25 * 8
    assert not fathom(7.0, problem)  # gap 3 > 0.25 * 7


def test_relative_tolerance_falls_back_to_incumbent_when_bound_is_zero():
    """Test a zero bound scales the relative tolerance by the incumbent."""
    problem = make_stub(Sense.MINIMIZE, incumbent=1.0, rel_tol=2.0)
    assert fathom(0.0, problem)

    problem = make_stub(Sense.MINIMIZE, incumbent=5.0, rel_tol=0.5)
    assert not fathom(0.0, problem)


def test_infeasible_sentinel_is_always_pruned():
    """Test the infeasible sentinel bound is fathomed unconditionally."""
    # No incumbent yet: inf - inf must not leak a NaN into the decision
    problem = make_stub(Sense.MINIMIZE, incumbent=math.inf)
    assert fathom(math.inf, problem)

    problem = make_stub(Sense.MAXIMIZE, incumbent=-math.inf, rel_tol=1.0)
    assert fathom(-math.inf, problem)


def test_no_incumbent_never_prunes_finite_bound():
    """Test nothing finite is fathomed before an incumbent exists."""
    problem = make_stub(Sense.MINIMIZE, incumbent=math.inf, abs_tol=1e6, rel_tol=10.0)
    assert not fathom(3.0, problem)
    assert not fathom(0.0, problem)


def test_unbounded_relaxation_is_kept():
    """Test an unbounded relaxation is never fathomed."""
    problem = make_stub(Sense.MINIMIZE, incumbent=5.0, rel_tol=1.0)
    assert not fathom(-math.inf, problem)

    problem = make_stub(Sense.MINIMIZE, incumbent=math.inf, rel_tol=1.0)
    assert not fathom(-math.inf, problem)


def test_nan_bound_is_a_contract_violation():
    """Test a NaN bound raises ContractViolation."""
    problem = make_stub()
    with pytest.raises(ContractViolation):
        fathom(float("nan"), problem)


def test_relative_gap():
    """Test the relative gap used in status lines."""
    assert relative_gap(9.0, 10.0, Sense.MINIMIZE) == pytest.approx(1 / 9)
    assert relative_gap(105.0, 90.0, Sense.MAXIMIZE) == pytest.approx(15 / 105)
    assert relative_gap(0.0, 4.0, Sense.MINIMIZE) == pytest.approx(1.0)
    assert relative_gap(0.0, 0.0, Sense.MINIMIZE) == 0.0
    assert relative_gap(3.0, math.inf, Sense.MINIMIZE) == math.inf
