from typing import List

from lslmsr.errors import ExpInputTooLargeError, NotEnoughQToSellError
from lslmsr.utils import WAD, EXP_MAX_INPUT, checked_add, exp_wad, ln_wad, wad_div, wad_mul


def exp_terms(q: List[int], b: int) -> List[int]:
    """
    Computes e^(q_i / b) for every outcome.
    Rejects any exponent above EXP_MAX_INPUT before evaluating.
    """
    xs = [wad_div(q_i, b) for q_i in q]
    for x in xs:
        if x > EXP_MAX_INPUT:
            raise ExpInputTooLargeError(x, EXP_MAX_INPUT)
    return [exp_wad(x) for x in xs]


def sum_terms(terms: List[int]) -> int:
    total = 0
    for term in terms:
        total = checked_add(total, term)
    return total


def log_sum_exp(q: List[int], b: int) -> int:
    """L = ln(sum_i e^(q_i / b))."""
    return ln_wad(sum_terms(exp_terms(q, b)))


def prices(q: List[int], b: int) -> List[int]:
    """
    Softmax prices p_i = e_i / sum(e).
    Uses the same exponentials as the cost function, so sum(p) is one unit minus at most n ticks.
    """
    terms = exp_terms(q, b)
    total = sum_terms(terms)
    return [wad_div(term, total) for term in terms]


def cost_absolute(q: List[int], b: int) -> int:
    """C(q) = b * ln(sum_i e^(q_i / b))."""
    return wad_mul(b, log_sum_exp(q, b))


def cost_delta(q: List[int], delta: List[int], b: int) -> int:
    """
    Signed cost C(q + delta) - C(q) at fixed b.
    Positive means the trader pays. Rejects deltas that drive any outcome negative.
    """
    if len(delta) != len(q):
        raise ValueError(f"Delta length {len(delta)} does not match outcome count {len(q)}")
    if not any(delta):
        return 0
    q_after = []
    for q_i, d_i in zip(q, delta):
        if q_i + d_i < 0:
            raise NotEnoughQToSellError(q_i, -d_i)
        q_after.append(q_i + d_i)
    return cost_absolute(q_after, b) - cost_absolute(q, b)


def unit_delta(n_outcomes: int, outcome: int, quantity: int) -> List[int]:
    delta = [0] * n_outcomes
    delta[outcome] = quantity
    return delta


def price_sum_error(p: List[int]) -> int:
    """Ticks by which sum(p) misses one unit."""
    return WAD - sum(p)
