"""Account balances with reserves, an existential deposit and issuance tracking."""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping
from dataclasses import dataclass

from .runtime import DispatchError


class InsufficientBalance(DispatchError):
    """An account has too little free balance for the operation."""


@dataclass
class _Account:
    free: int = 0
    reserved: int = 0

    @property
    def total(self) -> int:
        return self.free + self.reserved


class Imbalance:
    """Funds counted in total issuance that no account holds yet.

    Split it, or hand it to ``Balances.resolve_creating``. Whatever it still
    holds when it is discarded is burned from the total issuance.
    """

    __slots__ = ("_amount", "_ledger")

    def __init__(self, amount: int, ledger: Balances) -> None:
        self._amount = amount
        self._ledger = ledger

    def peek(self) -> int:
        """The amount this imbalance holds."""
        return self._amount

    def split(self, amount: int) -> tuple[Imbalance, Imbalance]:
        """Split into ``amount`` (capped at what is held) and the rest.

        This imbalance is emptied; the two returned ones carry its funds.
        """
        if amount < 0:
            raise ValueError("amount cannot be negative")
        first = min(amount, self._amount)
        rest = self._amount - first
        self._amount = 0
        return Imbalance(first, self._ledger), Imbalance(rest, self._ledger)

    def _take(self) -> int:
        amount, self._amount = self._amount, 0
        return amount

    def __repr__(self) -> str:
        return f"Imbalance({self._amount})"

    def __del__(self) -> None:
        amount = getattr(self, "_amount", 0)
        if amount:
            self._amount = 0
            self._ledger._burn(amount)


class Balances:
    """Free and reserved balances of accounts, with a total issuance.

    Accounts whose total balance falls below the existential deposit are
    removed and their dust is burned.
    """

    def __init__(
        self,
        existential_deposit: int,
        endowed: Mapping[Hashable, int] | Iterable[tuple[Hashable, int]] = (),
    ) -> None:
        if existential_deposit < 0:
            raise ValueError("existential deposit cannot be negative")
        self._existential_deposit = existential_deposit
        self._accounts: dict[Hashable, _Account] = {}
        self._issuance = 0
        items = endowed.items() if isinstance(endowed, Mapping) else endowed
        for who, amount in items:
            if amount < existential_deposit or amount <= 0:
                raise ValueError(
                    "the balance of any account should always be at least "
                    "the existential deposit"
                )
            if who in self._accounts:
                raise ValueError(f"duplicate balance for account {who!r}")
            self._accounts[who] = _Account(free=amount)
            self._issuance += amount

    def free_balance(self, who: Hashable) -> int:
        account = self._accounts.get(who)
        return account.free if account else 0

    def reserved_balance(self, who: Hashable) -> int:
        account = self._accounts.get(who)
        return account.reserved if account else 0

    def total_issuance(self) -> int:
        return self._issuance

    def minimum_balance(self) -> int:
        return self._existential_deposit

    def issue(self, amount: int) -> Imbalance:
        """Create new funds; they count in total issuance at once."""
        if amount < 0:
            raise ValueError("amount cannot be negative")
        self._issuance += amount
        return Imbalance(amount, self)

    def resolve_creating(self, who: Hashable, imbalance: Imbalance) -> None:
        """Deposit an imbalance into ``who``, creating the account if needed.

        A deposit too small to create a new account is burned.
        """
        amount = imbalance._take()
        if amount == 0:
            return
        account = self._accounts.get(who)
        if account is None:
            if amount < self._existential_deposit:
                self._burn(amount)
                return
            account = self._accounts[who] = _Account()
        account.free += amount

    def make_free_balance_be(self, who: Hashable, amount: int) -> None:
        """Force the free balance of ``who``, adjusting total issuance."""
        if amount < 0:
            raise ValueError("amount cannot be negative")
        account = self._accounts.get(who)
        if account is None:
            if amount < self._existential_deposit or amount == 0:
                return
            account = self._accounts[who] = _Account()
        self._issuance += amount - account.free
        account.free = amount
        self._settle(who)

    def transfer(
        self, source: Hashable, dest: Hashable, amount: int, keep_alive: bool
    ) -> None:
        """Move free funds from ``source`` to ``dest``.

        With ``keep_alive`` the source may not fall below the existential
        deposit; otherwise it is removed if it does.
        """
        if amount < 0:
            raise ValueError("amount cannot be negative")
        if amount == 0 or source == dest:
            return
        src = self._accounts.get(source)
        if src is None or src.free < amount:
            raise InsufficientBalance(f"account {source!r} cannot pay {amount}")
        dst = self._accounts.get(dest)
        if (dst.total if dst else 0) + amount < self._existential_deposit:
            raise DispatchError("destination would stay below the existential deposit")
        if keep_alive and src.total - amount < self._existential_deposit:
            raise DispatchError("transfer would kill the source account")
        src.free -= amount
        if dst is None:
            dst = self._accounts[dest] = _Account()
        dst.free += amount
        self._settle(source)

    def reserve(self, who: Hashable, amount: int) -> None:
        """Move ``amount`` from free to reserved balance."""
        if amount < 0:
            raise ValueError("amount cannot be negative")
        if amount == 0:
            return
        account = self._accounts.get(who)
        if account is None or account.free < amount:
            raise InsufficientBalance(f"account {who!r} cannot reserve {amount}")
        account.free -= amount
        account.reserved += amount

    def unreserve(self, who: Hashable, amount: int) -> int:
        """Move up to ``amount`` back to free balance; return what was left over."""
        if amount < 0:
            raise ValueError("amount cannot be negative")
        account = self._accounts.get(who)
        if account is None:
            return amount
        actual = min(amount, account.reserved)
        account.reserved -= actual
        account.free += actual
        return amount - actual

    def slash_reserved(self, who: Hashable, amount: int) -> tuple[Imbalance, int]:
        """Take up to ``amount`` from reserved balance.

        Returns the slashed funds and the part of ``amount`` that could not
        be slashed.
        """
        if amount < 0:
            raise ValueError("amount cannot be negative")
        account = self._accounts.get(who)
        if account is None:
            return Imbalance(0, self), amount
        actual = min(amount, account.reserved)
        account.reserved -= actual
        self._settle(who)
        return Imbalance(actual, self), amount - actual

    def _settle(self, who: Hashable) -> None:
        account = self._accounts.get(who)
        if account is None:
            return
        if account.total == 0 or account.total < self._existential_deposit:
            del self._accounts[who]
            self._burn(account.total)

    def _burn(self, amount: int) -> None:
        self._issuance -= amount