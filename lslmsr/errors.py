"""Engine error taxonomy.

Every rejection carries a stable integer code.

Code ranges:
  1xxx: Validation (malformed caller input)
  2xxx: Economic (holdings, negative exposure, slippage)
  3xxx: Numeric domain
  4xxx: Lifecycle / lookup
  5xxx: Collateral ledger
"""


class EngineError(ValueError):
    """Base engine error."""

    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(message)


# --- 1xxx: Validation ---

class InvalidOutcomeError(EngineError):
    def __init__(self, outcome: int, n_outcomes: int) -> None:
        super().__init__(1001, f"Invalid outcome {outcome} for market with {n_outcomes} outcomes")


class InvalidOutcomeCountError(EngineError):
    def __init__(self, n_outcomes: int) -> None:
        super().__init__(1002, f"Outcome count must be in [2, 5], got {n_outcomes}")


class InvalidMechanismError(EngineError):
    def __init__(self, mechanism: object) -> None:
        super().__init__(1003, f"Unrecognized mechanism: {mechanism!r}")


class InvalidBaseLiquidityError(EngineError):
    def __init__(self, b0: object) -> None:
        super().__init__(1004, f"Base liquidity must be a positive fixed-point int, got {b0!r}")


class InvalidSlopeError(EngineError):
    def __init__(self, alpha: object) -> None:
        super().__init__(1005, f"Liquidity slope must be a non-negative fixed-point int, got {alpha!r}")


class StepsOutOfRangeError(EngineError):
    def __init__(self, steps: int, max_steps: int) -> None:
        super().__init__(1006, f"Steps must be in [1, {max_steps}], got {steps}")


class InvalidQuantityError(EngineError):
    def __init__(self, quantity: object) -> None:
        super().__init__(1007, f"Invalid quantity: {quantity!r}. Must be positive.")


# --- 2xxx: Economic ---

class SellExceedsHoldingsError(EngineError):
    def __init__(self, held: int, requested: int) -> None:
        super().__init__(2001, f"Sell exceeds holdings: held {held}, requested {requested}")


class NotEnoughQToSellError(EngineError):
    def __init__(self, available: int, requested: int) -> None:
        super().__init__(2002, f"Not enough outcome quantity to sell: available {available}, requested {requested}")


class SlippageExceededError(EngineError):
    def __init__(self, amount: int, bound: int, is_buy: bool) -> None:
        if is_buy:
            detail = f"cost {amount} exceeds max_cost {bound}"
        else:
            detail = f"payout {amount} below min_payout {bound}"
        super().__init__(2003, f"Slippage exceeded: {detail}")


class InsufficientMarketCollateralError(EngineError):
    def __init__(self, held: int, payout: int) -> None:
        super().__init__(2004, f"Market collateral {held} cannot cover payout {payout}")


# --- 3xxx: Numeric domain ---

class ExpInputTooLargeError(EngineError):
    def __init__(self, x: int, max_input: int) -> None:
        super().__init__(3001, f"Exponent input {x} exceeds maximum {max_input}")


class FixedPointDomainError(EngineError):
    def __init__(self, detail: str) -> None:
        super().__init__(3002, f"Fixed-point domain error: {detail}")


class FixedPointOverflowError(EngineError):
    def __init__(self, detail: str) -> None:
        super().__init__(3003, f"Fixed-point overflow: {detail}")


# --- 4xxx: Lifecycle ---

class MarketNotFoundError(EngineError):
    def __init__(self, market_id: int) -> None:
        super().__init__(4001, f"Market not found: {market_id}")


class MarketClosedError(EngineError):
    def __init__(self, market_id: int) -> None:
        super().__init__(4002, f"Market is closed: {market_id}")


# --- 5xxx: Collateral ---

class CollateralTransferError(EngineError):
    """Base for failures of the external collateral ledger."""


class InsufficientBalanceError(CollateralTransferError):
    def __init__(self, account: str, required: int, available: int) -> None:
        super().__init__(
            5001,
            f"Insufficient collateral balance for {account}: required {required}, available {available}",
        )


class InsufficientAllowanceError(CollateralTransferError):
    def __init__(self, owner: str, spender: str, required: int, available: int) -> None:
        super().__init__(
            5002,
            f"Insufficient allowance from {owner} to {spender}: required {required}, available {available}",
        )
