from typing import Sequence
from typing_extensions import TypedDict

import numpy as np

from lslmsr.config import MAX_STEPS
from lslmsr.engine.state import Market
from lslmsr.engine.trades import quote_trade
from lslmsr.utils import WAD

DEFAULT_STEPS_GRID = (1, 2, 4, 8, 16, 32, 64)


class ConvergenceProfile(TypedDict):
    steps: np.ndarray
    costs: np.ndarray  # signed quote cost in units (float)
    rel_change: np.ndarray  # |c[k] - c[k-1]| / |c[k]|, length len(steps) - 1


def step_convergence(
    market: Market,
    outcome: int,
    quantity: int,
    steps_grid: Sequence[int] = DEFAULT_STEPS_GRID,
    is_buy: bool = True,
) -> ConvergenceProfile:
    """
    Quote the same trade at increasing step counts.

    For LIQUIDITY_SCALED markets the left-endpoint error shrinks roughly as
    1/steps, so rel_change should decay toward zero. FIXED markets give a
    flat profile.
    """
    if len(steps_grid) < 2:
        raise ValueError("steps_grid needs at least two entries")
    if list(steps_grid) != sorted(set(steps_grid)):
        raise ValueError("steps_grid must be strictly increasing")

    steps = np.asarray(steps_grid, dtype=np.int64)
    costs = np.array(
        [quote_trade(market, outcome, quantity, int(s), is_buy, MAX_STEPS)['cost'] / WAD for s in steps],
        dtype=np.float64,
    )
    diffs = np.abs(np.diff(costs))
    denom = np.abs(costs[1:])
    rel_change = np.divide(diffs, denom, out=np.zeros_like(diffs), where=denom > 0)
    return {'steps': steps, 'costs': costs, 'rel_change': rel_change}


def converges(profile: ConvergenceProfile, rel_tol: float = 1e-3) -> bool:
    """Final refinement within rel_tol and no refinement larger than the first one."""
    rel = profile['rel_change']
    if rel.size == 0:
        return True
    return bool(rel[-1] <= rel_tol and np.all(rel[1:] <= rel[0] + 1e-15))
