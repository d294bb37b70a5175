from .params import Mechanism, MarketParams
from .state import EngineState, Market, MarketMeta
from .trades import Quote, quote_trade
from .amm import MarketMaker, TradeRecord
from .collateral import InMemoryCollateral
