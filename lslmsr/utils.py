import json
import time
from decimal import Decimal, ROUND_HALF_UP, getcontext
from typing import Any, Dict

import mpmath as mp
import numpy as np

from lslmsr.errors import (
    ExpInputTooLargeError,
    FixedPointDomainError,
    FixedPointOverflowError,
    InvalidQuantityError,
)

getcontext().prec = 28
mp.mp.dps = 30

# One fixed-point unit: 18 fractional decimal digits.
WAD = 10**18
MAX_UINT256 = 2**256 - 1

# 192 * ln(2) in WAD: the input ceiling of the on-chain exp2-based fixed-point exp.
EXP_MAX_INPUT = 133_084258667509499440

# Working precision for exp/ln; exp(EXP_MAX_INPUT) * WAD has 76 integer digits.
EXP_WORK_DPS = 96

# Human inputs are rounded to this many decimals before scaling.
INPUT_DECIMALS = 6


def get_current_ms() -> int:
    return int(time.time() * 1000)


def to_wad(x: int | float | str | Decimal) -> int:
    """Convert a human number (e.g. 2.5) to fixed-point ticks, rounded to 6 decimals."""
    d = Decimal(str(x)).quantize(Decimal(f'1e-{INPUT_DECIMALS}'), rounding=ROUND_HALF_UP)
    return int(d * (10**INPUT_DECIMALS)) * (WAD // 10**INPUT_DECIMALS)


def from_wad(x: int) -> Decimal:
    return Decimal(x) / Decimal(WAD)


def wad_mul(a: int, b: int) -> int:
    return a * b // WAD


def wad_div(a: int, b: int) -> int:
    if b == 0:
        raise FixedPointDomainError("division by zero")
    return a * WAD // b


def checked_add(a: int, b: int) -> int:
    total = a + b
    if total > MAX_UINT256:
        raise FixedPointOverflowError(f"{a} + {b} exceeds 256 bits")
    return total


def exp_wad(x: int) -> int:
    """
    Fixed-point e^x for 0 <= x <= EXP_MAX_INPUT.

    Result is the floor of the exact value in ticks; inputs above the maximum
    are rejected rather than allowed to overflow.
    """
    if x < 0:
        raise FixedPointDomainError(f"exp input must be non-negative, got {x}")
    if x > EXP_MAX_INPUT:
        raise ExpInputTooLargeError(x, EXP_MAX_INPUT)
    with mp.workdps(EXP_WORK_DPS):
        return int(mp.floor(mp.exp(mp.mpf(x) / WAD) * WAD))


def ln_wad(x: int) -> int:
    """Fixed-point natural log for x > 0. Negative for x < WAD."""
    if x <= 0:
        raise FixedPointDomainError(f"ln input must be positive, got {x}")
    with mp.workdps(EXP_WORK_DPS):
        return int(mp.floor(mp.log(mp.mpf(x) / WAD) * WAD))


def validate_size(s: int) -> None:
    if isinstance(s, bool) or not isinstance(s, int) or s <= 0:
        raise InvalidQuantityError(s)


def _per_mille(slippage_pct: float | str | Decimal) -> int:
    # 0.5% -> 5 per mille, half-up like the trading front end
    return int((Decimal(str(slippage_pct)) * 10).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def max_cost_with_slippage(cost: int, slippage_pct: float | str | Decimal) -> int:
    """Upper bound to submit with a buy quoted at `cost`."""
    return cost * (1000 + _per_mille(slippage_pct)) // 1000


def min_payout_with_slippage(payout: int, slippage_pct: float | str | Decimal) -> int:
    """Lower bound to submit with a sell quoted at `payout`."""
    return payout * (1000 - _per_mille(slippage_pct)) // 1000


def serialize_state(state: Dict[str, Any]) -> str:
    def default_handler(obj: Any) -> Any:
        if isinstance(obj, Decimal):
            return str(obj)
        if isinstance(obj, (np.integer,)):
            return int(obj)
        if isinstance(obj, (np.float64, np.float32)):
            return float(obj)
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        raise TypeError(f"Object of type {type(obj)} is not JSON serializable")
    return json.dumps(state, default=default_handler)


def deserialize_state(json_str: str) -> Dict[str, Any]:
    return json.loads(json_str)
