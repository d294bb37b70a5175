import logging
import threading
import uuid
from typing import List, Optional, Tuple
from typing_extensions import TypedDict

from lslmsr.config import EngineParams, get_engine_params, validate_engine_params
from lslmsr.errors import (
    EngineError,
    InsufficientMarketCollateralError,
    MarketClosedError,
    SellExceedsHoldingsError,
    SlippageExceededError,
)
from lslmsr.engine.collateral import InMemoryCollateral
from lslmsr.engine.params import validate_market_params, validate_outcome
from lslmsr.engine.state import (
    EngineState,
    MarketMeta,
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
from lslmsr.engine.trades import Quote, quote_trade
from lslmsr.utils import get_current_ms, serialize_state, validate_size

logger = logging.getLogger(__name__)


class TradeRecord(TypedDict):
    trade_id: str
    market_id: int
    user: str
    outcome: int
    direction: str  # 'BUY' or 'SELL'
    quantity: int
    amount: int  # cost paid (BUY) or payout received (SELL)
    total_liquidity: int
    b_eff: int
    ts_ms: int


class MarketMaker:
    """
    Registry of LMSR / LS-LMSR markets with serialized trade application.

    Each market's outcome vector, collateral and share ledger form one
    consistency unit guarded by that market's lock. Quotes price a snapshot
    outside the lock. A trade either commits fully or leaves no trace.
    """

    def __init__(self, collateral: Optional[InMemoryCollateral] = None, params: Optional[EngineParams] = None) -> None:
        self.params = params if params is not None else get_engine_params()
        validate_engine_params(self.params)
        self.collateral = collateral if collateral is not None else InMemoryCollateral()
        self.account = self.params['amm_account']
        self._state: EngineState = init_state()
        self._registry_lock = threading.Lock()
        self._market_locks: List[threading.Lock] = []
        self._trades: List[TradeRecord] = []
        self._trades_lock = threading.Lock()

    @property
    def collateral_token(self) -> InMemoryCollateral:
        return self.collateral

    @property
    def market_count(self) -> int:
        with self._registry_lock:
            return len(self._state['markets'])

    def _lock_for(self, market_id: int) -> threading.Lock:
        with self._registry_lock:
            get_market(self._state, market_id)
            return self._market_locks[market_id]

    def _steps(self, steps: Optional[int]) -> int:
        return self.params['default_steps'] if steps is None else steps

    def create_market(self, mechanism: int, n_outcomes: int, b0: int, alpha: int = 0) -> int:
        market_params = validate_market_params(mechanism, n_outcomes, b0, alpha)
        with self._registry_lock:
            market = new_market(self._state, market_params)
            self._market_locks.append(threading.Lock())
        logger.info(
            f"Created market {market['market_id']}: mechanism={market['mechanism'].name} "
            f"n={market['n_outcomes']} b0={market['b0']} alpha={market['alpha']}"
        )
        return market['market_id']

    def state(self, market_id: int) -> Tuple[MarketMeta, List[int], int, int, List[int]]:
        """(meta, q, T, b_eff, prices) from a consistent snapshot."""
        with self._lock_for(market_id):
            market = pricing_view(get_market(self._state, market_id))
        return get_meta(market), market['q'], get_total(market), get_b_eff(market), get_prices(market)

    def prices(self, market_id: int) -> List[int]:
        with self._lock_for(market_id):
            market = pricing_view(get_market(self._state, market_id))
        return get_prices(market)

    def _quote(self, market_id: int, outcome: int, quantity: int, steps: Optional[int], is_buy: bool) -> Quote:
        with self._lock_for(market_id):
            market = pricing_view(get_market(self._state, market_id))
        return quote_trade(market, outcome, quantity, self._steps(steps), is_buy, self.params['max_steps'])

    def quote_buy(self, market_id: int, outcome: int, quantity: int, steps: Optional[int] = None) -> Tuple[int, List[int]]:
        quote = self._quote(market_id, outcome, quantity, steps, True)
        return quote['cost'], quote['prices_after']

    def quote_sell(self, market_id: int, outcome: int, quantity: int, steps: Optional[int] = None) -> Tuple[int, List[int]]:
        quote = self._quote(market_id, outcome, quantity, steps, False)
        return -quote['cost'], quote['prices_after']

    def buy(
        self,
        market_id: int,
        user: str,
        outcome: int,
        quantity: int,
        steps: Optional[int],
        max_cost: int,
    ) -> TradeRecord:
        with self._lock_for(market_id):
            market = get_market(self._state, market_id)
            try:
                quote = quote_trade(market, outcome, quantity, self._steps(steps), True, self.params['max_steps'])
                if market['closed']:
                    raise MarketClosedError(market_id)
                cost = quote['cost']
                if cost > max_cost:
                    raise SlippageExceededError(cost, max_cost, True)
                # Only fallible external step; nothing has been mutated yet.
                self.collateral.transfer_from(self.account, user, self.account, cost)
            except EngineError as e:
                logger.warning(f"Rejected BUY on market {market_id} by {user}: {e}")
                raise

            market['q'] = quote['q_after']
            market['collateral'] += cost
            held = market['shares'].setdefault(user, [0] * market['n_outcomes'])
            held[outcome] += quantity
            record = self._record(market_id, user, outcome, 'BUY', quantity, cost, quote)

        logger.info(f"BUY market={market_id} user={user} outcome={outcome} qty={quantity} cost={cost} b_eff={quote['b_after']}")
        return record

    def sell(
        self,
        market_id: int,
        user: str,
        outcome: int,
        quantity: int,
        steps: Optional[int],
        min_payout: int,
    ) -> TradeRecord:
        with self._lock_for(market_id):
            market = get_market(self._state, market_id)
            try:
                validate_outcome(outcome, market['n_outcomes'])
                validate_size(quantity)
                held = get_user_shares(market, user, outcome)
                if held < quantity:
                    raise SellExceedsHoldingsError(held, quantity)
                if market['closed']:
                    raise MarketClosedError(market_id)
                quote = quote_trade(market, outcome, quantity, self._steps(steps), False, self.params['max_steps'])
                payout = -quote['cost']
                if payout < 0 or payout < min_payout:
                    raise SlippageExceededError(payout, min_payout, False)
                if payout > market['collateral']:
                    raise InsufficientMarketCollateralError(market['collateral'], payout)
                self.collateral.transfer(self.account, user, payout)
            except EngineError as e:
                logger.warning(f"Rejected SELL on market {market_id} by {user}: {e}")
                raise

            market['q'] = quote['q_after']
            market['collateral'] -= payout
            market['shares'][user][outcome] -= quantity
            record = self._record(market_id, user, outcome, 'SELL', quantity, payout, quote)

        logger.info(f"SELL market={market_id} user={user} outcome={outcome} qty={quantity} payout={payout} b_eff={quote['b_after']}")
        return record

    def user_shares(self, market_id: int, user: str, outcome: int) -> int:
        with self._lock_for(market_id):
            market = get_market(self._state, market_id)
            validate_outcome(outcome, market['n_outcomes'])
            return get_user_shares(market, user, outcome)

    def close_market(self, market_id: int) -> None:
        """Open -> Closed. Closing an already closed market is a no-op."""
        with self._lock_for(market_id):
            market = get_market(self._state, market_id)
            if market['closed']:
                logger.info(f"Market {market_id} already closed")
                return
            market['closed'] = True
        logger.info(f"Closed market {market_id}")

    def _record(self, market_id: int, user: str, outcome: int, direction: str, quantity: int, amount: int, quote: Quote) -> TradeRecord:
        record: TradeRecord = {
            'trade_id': str(uuid.uuid4()),
            'market_id': market_id,
            'user': user,
            'outcome': outcome,
            'direction': direction,
            'quantity': quantity,
            'amount': amount,
            'total_liquidity': sum(quote['q_after']),
            'b_eff': quote['b_after'],
            'ts_ms': get_current_ms(),
        }
        with self._trades_lock:
            self._trades.append(record)
        return record

    def trades(self, market_id: Optional[int] = None) -> List[TradeRecord]:
        with self._trades_lock:
            return [dict(t) for t in self._trades if market_id is None or t['market_id'] == market_id]

    def export_state(self) -> EngineState:
        """Deep copy of every market, each taken under its own lock."""
        with self._registry_lock:
            locks = list(self._market_locks)
            markets = list(self._state['markets'])
            next_id = self._state['next_id']
        copies = []
        for lock, market in zip(locks, markets):
            with lock:
                copies.append(snapshot_market(market))
        return {'markets': copies, 'next_id': next_id}

    def snapshot_json(self) -> str:
        return serialize_state(self.export_state())
