from enum import IntEnum
from typing import TypedDict

from lslmsr.config import MAX_STEPS
from lslmsr.errors import (
    InvalidBaseLiquidityError,
    InvalidMechanismError,
    InvalidOutcomeCountError,
    InvalidOutcomeError,
    InvalidSlopeError,
    StepsOutOfRangeError,
)

MIN_OUTCOMES = 2
MAX_OUTCOMES = 5


class Mechanism(IntEnum):
    """Pricing mechanism tag; values match the on-chain uint8 encoding."""
    FIXED = 0
    LIQUIDITY_SCALED = 1


class MarketParams(TypedDict):
    """Immutable per-market parameters. b0 and alpha are fixed-point ints."""
    mechanism: Mechanism
    n_outcomes: int
    b0: int
    alpha: int


def parse_mechanism(mechanism: object) -> Mechanism:
    if isinstance(mechanism, bool) or not isinstance(mechanism, int):
        raise InvalidMechanismError(mechanism)
    try:
        return Mechanism(mechanism)
    except ValueError:
        raise InvalidMechanismError(mechanism) from None


def validate_market_params(
    mechanism: object,
    n_outcomes: int,
    b0: int,
    alpha: int,
) -> MarketParams:
    """
    Validate creation inputs and return normalized parameters.

    alpha is inert for the FIXED mechanism and is stored as 0.
    """
    mech = parse_mechanism(mechanism)
    if isinstance(n_outcomes, bool) or not isinstance(n_outcomes, int) or not (MIN_OUTCOMES <= n_outcomes <= MAX_OUTCOMES):
        raise InvalidOutcomeCountError(n_outcomes)
    if isinstance(b0, bool) or not isinstance(b0, int) or b0 <= 0:
        raise InvalidBaseLiquidityError(b0)
    if mech == Mechanism.FIXED:
        alpha = 0
    elif isinstance(alpha, bool) or not isinstance(alpha, int) or alpha < 0:
        raise InvalidSlopeError(alpha)
    return {'mechanism': mech, 'n_outcomes': n_outcomes, 'b0': b0, 'alpha': alpha}


def validate_steps(steps: int, max_steps: int = MAX_STEPS) -> None:
    if isinstance(steps, bool) or not isinstance(steps, int) or not (1 <= steps <= max_steps):
        raise StepsOutOfRangeError(steps, max_steps)


def validate_outcome(outcome: int, n_outcomes: int) -> None:
    if isinstance(outcome, bool) or not isinstance(outcome, int) or not (0 <= outcome < n_outcomes):
        raise InvalidOutcomeError(outcome, n_outcomes)
