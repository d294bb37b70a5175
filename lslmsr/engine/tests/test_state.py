import pytest

from lslmsr.errors import MarketNotFoundError
from lslmsr.engine.params import Mechanism, validate_market_params
from lslmsr.engine.state import (
    EngineState,
    get_b_eff,
    get_market,
    get_meta,
    get_prices,
    get_total,
    get_user_shares,
    init_state,
    new_market,
    pricing_view,
    snapshot_market,
)
from lslmsr.utils import WAD, to_wad


@pytest.fixture
def state() -> EngineState:
    st = init_state()
    new_market(st, validate_market_params(Mechanism.FIXED, 3, to_wad(5), 0))
    new_market(st, validate_market_params(Mechanism.LIQUIDITY_SCALED, 2, to_wad(5), to_wad(0.5)))
    return st


def test_init_state_empty():
    assert init_state() == {'markets': [], 'next_id': 0}


def test_new_market_sequential_ids(state):
    assert [m['market_id'] for m in state['markets']] == [0, 1]
    assert state['next_id'] == 2


def test_new_market_zero_initialized(state):
    market = get_market(state, 0)
    assert market['q'] == [0, 0, 0]
    assert market['collateral'] == 0
    assert market['closed'] is False
    assert market['shares'] == {}


@pytest.mark.parametrize("bad", [-1, 2, 99, True, '0'])
def test_get_market_not_found(state, bad):
    with pytest.raises(MarketNotFoundError):
        get_market(state, bad)


def test_get_meta(state):
    assert get_meta(get_market(state, 1)) == {
        'mechanism': Mechanism.LIQUIDITY_SCALED,
        'n_outcomes': 2,
        'b0': to_wad(5),
        'alpha': to_wad(0.5),
        'collateral': 0,
        'closed': False,
    }


def test_derived_quantities(state):
    fixed = get_market(state, 0)
    scaled = get_market(state, 1)
    fixed['q'] = [to_wad(1), to_wad(2), 0]
    scaled['q'] = [to_wad(1), to_wad(3)]

    assert get_total(fixed) == to_wad(3)
    assert get_b_eff(fixed) == to_wad(5)
    assert get_total(scaled) == to_wad(4)
    assert get_b_eff(scaled) == to_wad(7)
    p = get_prices(scaled)
    assert p[1] > p[0]
    assert WAD - sum(p) <= 2


def test_user_shares_default_zero(state):
    market = get_market(state, 0)
    assert get_user_shares(market, 'alice', 1) == 0
    market['shares']['alice'] = [0, to_wad(2), 0]
    assert get_user_shares(market, 'alice', 1) == to_wad(2)


def test_snapshot_is_independent(state):
    market = get_market(state, 0)
    market['shares']['alice'] = [1, 0, 0]
    snap = snapshot_market(market)
    snap['q'][0] = 123
    snap['shares']['alice'][0] = 5
    assert market['q'][0] == 0
    assert market['shares']['alice'][0] == 1


def test_pricing_view_omits_share_ledger(state):
    market = get_market(state, 1)
    market['q'] = [to_wad(2), 0]
    market['shares'] = {f'user{i}': [to_wad(2), 0] for i in range(50)}
    view = pricing_view(market)
    assert 'shares' not in view
    assert get_prices(view) == get_prices(market)
    assert get_meta(view) == get_meta(market)
    view['q'][0] = 0
    assert market['q'] == [to_wad(2), 0]
