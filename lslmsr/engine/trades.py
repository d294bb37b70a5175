from typing import List
from typing_extensions import TypedDict

from lslmsr.config import MAX_STEPS
from lslmsr.engine.amm_math import cost_delta, prices, unit_delta
from lslmsr.engine.params import Mechanism, validate_outcome, validate_steps
from lslmsr.engine.state import Market
from lslmsr.engine.stepped import simulate_trade
from lslmsr.utils import validate_size


class Quote(TypedDict):
    cost: int  # signed C(after) - C(before); a sell payout is -cost
    q_after: List[int]
    b_after: int
    prices_after: List[int]


def quote_trade(
    market: Market,
    outcome: int,
    quantity: int,
    steps: int,
    is_buy: bool,
    max_steps: int = MAX_STEPS,
) -> Quote:
    """
    Prices a trade without touching the market.

    FIXED markets use the closed-form cost difference at b0 (steps is validated
    but does not affect the result). LIQUIDITY_SCALED markets go through the
    stepped simulator.
    """
    validate_outcome(outcome, market['n_outcomes'])
    validate_steps(steps, max_steps)
    validate_size(quantity)

    q = list(market['q'])
    if market['mechanism'] == Mechanism.FIXED:
        b = market['b0']
        signed_qty = quantity if is_buy else -quantity
        cost = cost_delta(q, unit_delta(market['n_outcomes'], outcome, signed_qty), b)
        q[outcome] += signed_qty
        return {'cost': cost, 'q_after': q, 'b_after': b, 'prices_after': prices(q, b)}

    sim = simulate_trade(q, outcome, quantity, steps, market['b0'], market['alpha'], is_buy, max_steps)
    return {
        'cost': sim['cost'],
        'q_after': sim['q_after'],
        'b_after': sim['b_after'],
        'prices_after': prices(sim['q_after'], sim['b_after']),
    }
