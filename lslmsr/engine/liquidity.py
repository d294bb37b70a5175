from typing import List

from lslmsr.engine.params import Mechanism
from lslmsr.utils import wad_mul


def b_of_t(b0: int, alpha: int, total: int) -> int:
    """
    Liquidity schedule b(T) = b0 + alpha * T.
    Non-decreasing in T for alpha >= 0, so deeper markets move less per unit traded.
    """
    return b0 + wad_mul(alpha, total)


def total_liquidity(q: List[int]) -> int:
    return sum(q)


def effective_b(mechanism: Mechanism, b0: int, alpha: int, q: List[int]) -> int:
    """b_eff at the current outcome vector: b0 for FIXED, b(T) for LIQUIDITY_SCALED."""
    if mechanism == Mechanism.FIXED:
        return b0
    return b_of_t(b0, alpha, total_liquidity(q))
