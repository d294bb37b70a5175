import copy
from typing_extensions import TypedDict
from typing import List, Dict

from lslmsr.errors import MarketNotFoundError
from lslmsr.engine.amm_math import prices
from lslmsr.engine.liquidity import effective_b, total_liquidity
from lslmsr.engine.params import MarketParams, Mechanism


class MarketMeta(TypedDict):
    mechanism: Mechanism
    n_outcomes: int
    b0: int
    alpha: int
    collateral: int
    closed: bool


class Market(TypedDict):
    market_id: int
    mechanism: Mechanism
    n_outcomes: int
    b0: int
    alpha: int
    collateral: int
    closed: bool
    q: List[int]
    shares: Dict[str, List[int]]  # user -> quantity held per outcome


class MarketView(TypedDict):
    """Pricing-relevant fields of a Market; no share ledger."""
    market_id: int
    mechanism: Mechanism
    n_outcomes: int
    b0: int
    alpha: int
    collateral: int
    closed: bool
    q: List[int]


class EngineState(TypedDict):
    markets: List[Market]
    next_id: int


def init_state() -> EngineState:
    return {'markets': [], 'next_id': 0}


def new_market(state: EngineState, market_params: MarketParams) -> Market:
    """
    Append a market with a zero outcome vector and zero collateral.
    Ids are sequential and never reused.
    """
    market: Market = {
        'market_id': state['next_id'],
        'mechanism': market_params['mechanism'],
        'n_outcomes': market_params['n_outcomes'],
        'b0': market_params['b0'],
        'alpha': market_params['alpha'],
        'collateral': 0,
        'closed': False,
        'q': [0] * market_params['n_outcomes'],
        'shares': {},
    }
    state['markets'].append(market)
    state['next_id'] += 1
    return market


def get_market(state: EngineState, market_id: int) -> Market:
    if isinstance(market_id, bool) or not isinstance(market_id, int) or not (0 <= market_id < len(state['markets'])):
        raise MarketNotFoundError(market_id)
    return state['markets'][market_id]


def get_meta(market: Market) -> MarketMeta:
    return {
        'mechanism': market['mechanism'],
        'n_outcomes': market['n_outcomes'],
        'b0': market['b0'],
        'alpha': market['alpha'],
        'collateral': market['collateral'],
        'closed': market['closed'],
    }


def get_total(market: Market) -> int:
    return total_liquidity(market['q'])


def get_b_eff(market: Market) -> int:
    return effective_b(market['mechanism'], market['b0'], market['alpha'], market['q'])


def get_prices(market: Market) -> List[int]:
    return prices(market['q'], get_b_eff(market))


def get_user_shares(market: Market, user: str, outcome: int) -> int:
    held = market['shares'].get(user)
    if held is None:
        return 0
    return held[outcome]


def snapshot_market(market: Market) -> Market:
    """Independent deep copy, share ledger included."""
    return copy.deepcopy(market)


def pricing_view(market: Market) -> MarketView:
    """Copy of the fields quotes and reads need; O(n_outcomes) regardless of holders."""
    return {
        'market_id': market['market_id'],
        'mechanism': market['mechanism'],
        'n_outcomes': market['n_outcomes'],
        'b0': market['b0'],
        'alpha': market['alpha'],
        'collateral': market['collateral'],
        'closed': market['closed'],
        'q': list(market['q']),
    }
