"""
Token custody ledger.

Implements TokenLedger[Holder, TokenId] -> Amount for tokens held by the admin
layer (e.g. sent to it by mistake) and swept out by the owner.
"""

from typing import Dict, Tuple


# Type aliases
Holder = str  # account identity, 0x-prefixed hex
TokenId = str  # token contract identity, 0x-prefixed hex
Amount = int  # Non-negative integer (arbitrary precision)


class TokenLedger:
    """
    Balance table mapping (holder, token) -> amount.

    Zero balances are not stored. Callers that need a stable order sort keys
    explicitly (see `farm_admin.integration.snapshot`).
    """

    def __init__(self):
        self._balances: Dict[Tuple[Holder, TokenId], Amount] = {}

    def get(self, holder: Holder, token: TokenId) -> Amount:
        """Balance for (holder, token). Returns 0 if not found."""
        return self._balances.get((holder, token), 0)

    def set(self, holder: Holder, token: TokenId, amount: Amount) -> None:
        """
        Set balance for (holder, token).

        Raises:
            ValueError: If amount is negative
        """
        if amount < 0:
            raise ValueError(f"Balance cannot be negative: {amount}")
        if amount == 0:
            self._balances.pop((holder, token), None)
        else:
            self._balances[(holder, token)] = amount

    def credit(self, holder: Holder, token: TokenId, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"Credit must be non-negative: {amount}")
        self.set(holder, token, self.get(holder, token) + amount)

    def debit(self, holder: Holder, token: TokenId, amount: Amount) -> None:
        """
        Raises:
            ValueError: If amount is negative or the balance is insufficient
        """
        if amount < 0:
            raise ValueError(f"Debit must be non-negative: {amount}")
        current = self.get(holder, token)
        if current < amount:
            raise ValueError(f"Insufficient balance: {current} < {amount}")
        self.set(holder, token, current - amount)

    def transfer(self, src: Holder, dst: Holder, token: TokenId, amount: Amount) -> None:
        self.debit(src, token, amount)
        self.credit(dst, token, amount)

    def balances_of(self, holder: Holder) -> Dict[TokenId, Amount]:
        return {token: amount for (h, token), amount in self._balances.items() if h == holder}

    def get_all_balances(self) -> Dict[Tuple[Holder, TokenId], Amount]:
        return dict(self._balances)

    def copy(self) -> "TokenLedger":
        out = TokenLedger()
        out._balances = dict(self._balances)
        return out

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TokenLedger):
            return NotImplemented
        return self._balances == other._balances

    def __repr__(self) -> str:
        return f"TokenLedger({len(self._balances)} entries)"
