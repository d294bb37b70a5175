import logging
import threading
from typing import Dict, Tuple

from lslmsr.errors import InsufficientAllowanceError, InsufficientBalanceError
from lslmsr.utils import MAX_UINT256, validate_size

logger = logging.getLogger(__name__)


class InMemoryCollateral:
    """
    Fungible collateral ledger with ERC20-style balance/allowance semantics.

    Stands in for the external collateral asset. An allowance of MAX_UINT256
    is treated as unlimited and never decremented.
    """

    def __init__(self, symbol: str = 'COL') -> None:
        self.symbol = symbol
        self._balances: Dict[str, int] = {}
        self._allowances: Dict[Tuple[str, str], int] = {}
        self._lock = threading.Lock()

    def balance_of(self, account: str) -> int:
        with self._lock:
            return self._balances.get(account, 0)

    def allowance(self, owner: str, spender: str) -> int:
        with self._lock:
            return self._allowances.get((owner, spender), 0)

    def total_supply(self) -> int:
        with self._lock:
            return sum(self._balances.values())

    def mint(self, account: str, amount: int) -> None:
        validate_size(amount)
        with self._lock:
            self._balances[account] = self._balances.get(account, 0) + amount
        logger.debug(f"Minted {amount} {self.symbol} to {account}")

    def approve(self, owner: str, spender: str, amount: int) -> None:
        if amount < 0 or amount > MAX_UINT256:
            raise ValueError(f"Invalid allowance amount: {amount}")
        with self._lock:
            self._allowances[(owner, spender)] = amount

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        with self._lock:
            self._move(sender, recipient, amount)

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int) -> None:
        """Move `amount` from `owner` to `recipient` using `spender`'s allowance."""
        with self._lock:
            allowed = self._allowances.get((owner, spender), 0)
            if allowed < amount:
                raise InsufficientAllowanceError(owner, spender, amount, allowed)
            self._move(owner, recipient, amount)
            if allowed != MAX_UINT256:
                self._allowances[(owner, spender)] = allowed - amount

    def _move(self, sender: str, recipient: str, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"Invalid transfer amount: {amount}")
        available = self._balances.get(sender, 0)
        if available < amount:
            raise InsufficientBalanceError(sender, amount, available)
        self._balances[sender] = available - amount
        self._balances[recipient] = self._balances.get(recipient, 0) + amount
