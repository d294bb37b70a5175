import logging
from typing import List
from typing_extensions import TypedDict

from lslmsr.config import MAX_STEPS
from lslmsr.errors import NotEnoughQToSellError
from lslmsr.engine.amm_math import cost_absolute
from lslmsr.engine.liquidity import b_of_t, total_liquidity
from lslmsr.engine.params import validate_steps
from lslmsr.utils import validate_size

logger = logging.getLogger(__name__)


class SimulationResult(TypedDict):
    cost: int  # signed: positive for a buy, negative for a sell
    q_after: List[int]
    b_after: int


def split_chunks(quantity: int, steps: int) -> List[int]:
    """Equal chunks; the last one absorbs the integer-division remainder."""
    chunk = quantity // steps
    return [chunk] * (steps - 1) + [quantity - chunk * (steps - 1)]


def simulate_trade(
    q: List[int],
    outcome: int,
    quantity: int,
    steps: int,
    b0: int,
    alpha: int,
    is_buy: bool,
    max_steps: int = MAX_STEPS,
) -> SimulationResult:
    """
    Approximates the path-dependent LS-LMSR cost of trading `quantity` of `outcome`.

    The trade is applied in `steps` sequential chunks. Each chunk is priced at the
    liquidity implied by the vector *before* that chunk (left endpoint), so later
    chunks see the b grown by earlier ones. The caller's vector is never mutated;
    the returned q_after is a fresh working buffer.
    """
    validate_steps(steps, max_steps)
    validate_size(quantity)

    work = list(q)
    total_cost = 0
    for k, chunk in enumerate(split_chunks(quantity, steps)):
        b_now = b_of_t(b0, alpha, total_liquidity(work))
        cost_before = cost_absolute(work, b_now)
        if is_buy:
            work[outcome] += chunk
        else:
            if work[outcome] < chunk:
                raise NotEnoughQToSellError(work[outcome], chunk)
            work[outcome] -= chunk
        cost_after = cost_absolute(work, b_now)
        total_cost += cost_after - cost_before
        logger.debug(f"step {k}: chunk={chunk} b={b_now} dC={cost_after - cost_before}")

    b_after = b_of_t(b0, alpha, total_liquidity(work))
    return {'cost': total_cost, 'q_after': work, 'b_after': b_after}
