"""Chain environment: origins, block state, event log and native balances."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

U64_MAX = 2**64 - 1


class DispatchError(Exception):
    """Base class for every error a dispatched call can fail with."""


class BadOrigin(DispatchError):
    """The call was not made by a signed account."""


class ArithmeticUnderflow(DispatchError):
    """A balance would drop below zero."""


class ArithmeticOverflow(DispatchError):
    """A balance would exceed the largest representable amount."""


class NotExpendable(DispatchError):
    """The withdrawal would reap an account that must be kept alive."""


class Preservation(enum.Enum):
    """How a withdrawal may treat the existence of the paying account."""

    EXPENDABLE = "expendable"
    PROTECT = "protect"
    PRESERVE = "preserve"


@dataclass(frozen=True)
class Origin:
    """Who a call comes from: a signed account, or nobody."""

    account: int | None = None

    @classmethod
    def signed(cls, account: int) -> Origin:
        return cls(account)

    @classmethod
    def none(cls) -> Origin:
        return cls(None)

    @property
    def is_signed(self) -> bool:
        return self.account is not None


def ensure_signed(origin: Origin) -> int:
    """Return the signing account of ``origin`` or raise :class:`BadOrigin`."""
    if origin.account is None:
        raise BadOrigin("origin is not signed")
    return origin.account


def _check_amount(amount: int) -> None:
    if not 0 <= amount <= U64_MAX:
        raise ValueError(f"amount out of range: {amount}")


class System:
    """Block context and event log."""

    def __init__(self, parent_hash: bytes = bytes(32)) -> None:
        self.block_number = 0
        self.parent_hash = bytes(parent_hash)
        self.extrinsic_index: int | None = None
        self.events: list[Any] = []

    def set_block_number(self, number: int) -> None:
        if not 0 <= number <= U64_MAX:
            raise ValueError(f"block number out of range: {number}")
        self.block_number = number

    def deposit_event(self, event: Any) -> None:
        """Record ``event``; nothing is recorded while at block zero."""
        if self.block_number == 0:
            return
        self.events.append(event)

    def last_event(self) -> Any:
        return self.events[-1] if self.events else None

    def snapshot(self) -> tuple:
        return (self.block_number, self.parent_hash, self.extrinsic_index, tuple(self.events))

    def restore(self, state: tuple) -> None:
        self.block_number, self.parent_hash, self.extrinsic_index, events = state
        self.events = list(events)


class Balances:
    """Native currency ledger with an existential deposit."""

    def __init__(self, existential_deposit: int = 1) -> None:
        if existential_deposit < 1:
            raise ValueError("existential deposit must be at least 1")
        self.existential_deposit = existential_deposit
        self._accounts: dict[int, int] = {}

    def balance(self, account: int) -> int:
        return self._accounts.get(account, 0)

    def total_balance(self, account: int) -> int:
        return self.balance(account)

    def _store(self, account: int, value: int) -> None:
        if value == 0:
            self._accounts.pop(account, None)
        else:
            self._accounts[account] = value

    def mint_into(self, account: int, amount: int) -> int:
        """Create ``amount`` new funds in ``account`` and return the amount minted."""
        _check_amount(amount)
        new_balance = self.balance(account) + amount
        if new_balance > U64_MAX:
            raise ArithmeticOverflow("balance overflow")
        if new_balance < self.existential_deposit:
            raise DispatchError("balance below existential deposit")
        self._store(account, new_balance)
        return amount

    def transfer(self, source: int, dest: int, amount: int, preservation: Preservation) -> int:
        """Move ``amount`` from ``source`` to ``dest`` and return the amount moved."""
        _check_amount(amount)
        if amount == 0:
            return 0
        available = self.balance(source)
        if amount > available:
            raise ArithmeticUnderflow("insufficient balance")
        remaining = available - amount
        if remaining < self.existential_deposit and preservation is not Preservation.EXPENDABLE:
            raise NotExpendable("transfer would reap the source account")
        if source == dest:
            return amount
        received = self.balance(dest) + amount
        if received > U64_MAX:
            raise ArithmeticOverflow("balance overflow")
        if received < self.existential_deposit:
            raise DispatchError("balance below existential deposit")
        self._store(source, remaining if remaining >= self.existential_deposit else 0)
        self._store(dest, received)
        return amount

    def snapshot(self) -> dict[int, int]:
        return dict(self._accounts)

    def restore(self, state: dict[int, int]) -> None:
        self._accounts = dict(state)