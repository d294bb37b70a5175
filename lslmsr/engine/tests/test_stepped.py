import pytest
from typing import List

from lslmsr.errors import InvalidQuantityError, NotEnoughQToSellError, StepsOutOfRangeError
from lslmsr.engine.amm_math import cost_absolute, cost_delta, unit_delta
from lslmsr.engine.liquidity import b_of_t, effective_b, total_liquidity
from lslmsr.engine.params import Mechanism
from lslmsr.engine.stepped import simulate_trade, split_chunks
from lslmsr.utils import to_wad


@pytest.fixture
def b0() -> int:
    return to_wad(5)


@pytest.fixture
def alpha() -> int:
    return to_wad(0.1)


@pytest.fixture
def q2() -> List[int]:
    return [to_wad(4), to_wad(1)]


def test_b_of_t_affine(b0, alpha):
    assert b_of_t(b0, alpha, 0) == b0
    assert b_of_t(b0, alpha, to_wad(10)) == to_wad(6)
    assert b_of_t(b0, 0, to_wad(1000)) == b0


def test_b_of_t_non_decreasing(b0, alpha):
    values = [b_of_t(b0, alpha, to_wad(t)) for t in range(0, 50, 5)]
    assert values == sorted(values)


def test_effective_b_by_mechanism(b0, alpha, q2):
    assert total_liquidity(q2) == to_wad(5)
    assert effective_b(Mechanism.FIXED, b0, alpha, q2) == b0
    assert effective_b(Mechanism.LIQUIDITY_SCALED, b0, alpha, q2) == to_wad(5.5)


def test_split_chunks_remainder_in_last():
    assert split_chunks(10, 3) == [3, 3, 4]
    assert split_chunks(2, 4) == [0, 0, 0, 2]
    assert split_chunks(12, 1) == [12]
    assert sum(split_chunks(to_wad(7), 64)) == to_wad(7)


@pytest.mark.parametrize("steps", [1, 7, 64])
def test_alpha_zero_matches_fixed_cost(q2, b0, steps):
    qty = to_wad(3)
    sim = simulate_trade(q2, 0, qty, steps, b0, 0, True)
    assert sim['cost'] == cost_delta(q2, unit_delta(2, 0, qty), b0)
    assert sim['b_after'] == b0

    sell = simulate_trade(q2, 1, to_wad(1), steps, b0, 0, False)
    assert sell['cost'] == cost_delta(q2, unit_delta(2, 1, -to_wad(1)), b0)


def test_single_step_prices_at_pre_trade_b(q2, b0, alpha):
    qty = to_wad(2)
    sim = simulate_trade(q2, 1, qty, 1, b0, alpha, True)
    b_start = b_of_t(b0, alpha, total_liquidity(q2))
    assert sim['cost'] == cost_delta(q2, unit_delta(2, 1, qty), b_start)
    assert sim['q_after'] == [to_wad(4), to_wad(3)]
    assert sim['b_after'] == b_of_t(b0, alpha, to_wad(7))


def test_two_steps_reevaluate_b_between_chunks(q2, b0, alpha):
    qty = to_wad(2)
    sim = simulate_trade(q2, 0, qty, 2, b0, alpha, True)

    first_b = b_of_t(b0, alpha, total_liquidity(q2))
    mid = [to_wad(5), to_wad(1)]
    second_b = b_of_t(b0, alpha, total_liquidity(mid))
    expected = (cost_absolute(mid, first_b) - cost_absolute(q2, first_b)) + \
        (cost_absolute([to_wad(6), to_wad(1)], second_b) - cost_absolute(mid, second_b))
    assert second_b > first_b
    assert sim['cost'] == expected


def test_caller_vector_not_mutated(q2, b0, alpha):
    original = list(q2)
    simulate_trade(q2, 0, to_wad(1), 8, b0, alpha, True)
    simulate_trade(q2, 0, to_wad(1), 8, b0, alpha, False)
    assert q2 == original


def test_cost_sign_by_direction(q2, b0, alpha):
    assert simulate_trade(q2, 0, to_wad(1), 4, b0, alpha, True)['cost'] > 0
    assert simulate_trade(q2, 0, to_wad(1), 4, b0, alpha, False)['cost'] < 0


def test_sell_below_zero_rejected(q2, b0, alpha):
    with pytest.raises(NotEnoughQToSellError):
        simulate_trade(q2, 1, to_wad(2), 4, b0, alpha, False)
    # Exactly the available amount is fine
    sim = simulate_trade(q2, 1, to_wad(1), 4, b0, alpha, False)
    assert sim['q_after'][1] == 0


@pytest.mark.parametrize("steps", [0, -1, 65])
def test_steps_out_of_range(q2, b0, alpha, steps):
    with pytest.raises(StepsOutOfRangeError):
        simulate_trade(q2, 0, to_wad(1), steps, b0, alpha, True)


def test_lower_step_ceiling(q2, b0, alpha):
    with pytest.raises(StepsOutOfRangeError):
        simulate_trade(q2, 0, to_wad(1), 16, b0, alpha, True, max_steps=8)


def test_zero_quantity_rejected(q2, b0, alpha):
    with pytest.raises(InvalidQuantityError):
        simulate_trade(q2, 0, 0, 4, b0, alpha, True)


def test_step_convergence():
    b0 = to_wad(5)
    alpha = to_wad(0.1)
    costs = [simulate_trade([0, 0], 0, to_wad(10), s, b0, alpha, True)['cost'] for s in (1, 2, 4, 8, 16, 32, 64)]
    diffs = [abs(b - a) for a, b in zip(costs, costs[1:])]
    assert diffs[-1] < diffs[0]
    assert diffs[-1] < diffs[2]
    assert diffs[-1] / costs[-1] < 1e-2
