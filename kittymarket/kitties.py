"""Kitty marketplace: minting, ownership, pricing and sales."""

from __future__ import annotations

import hashlib
import struct
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, replace

from .chain import (
    U64_MAX,
    Balances,
    DispatchError,
    Origin,
    Preservation,
    System,
    ensure_signed,
)

U32_MAX = 2**32 - 1
MAX_OWNED = 100
DNA_LEN = 32


class KittyError(DispatchError):
    """A marketplace rule was broken; ``code`` names which one."""

    CODES = frozenset(
        {
            "TooManyKitties",
            "DuplicateKitty",
            "TooManyOwned",
            "TransferToSelf",
            "NoKitty",
            "NotOwner",
            "NotForSale",
            "MaxPriceTooLow",
        }
    )

    def __init__(self, code: str) -> None:
        if code not in self.CODES:
            raise ValueError(f"unknown kitty error: {code}")
        super().__init__(code)
        self.code = code


def _as_dna(dna: bytes | bytearray | list[int]) -> bytes:
    value = bytes(dna)
    if len(value) != DNA_LEN:
        raise ValueError(f"dna must be {DNA_LEN} bytes, got {len(value)}")
    return value


def _check_u64(value: int, what: str) -> None:
    if not 0 <= value <= U64_MAX:
        raise ValueError(f"{what} out of range: {value}")


@dataclass(frozen=True)
class Kitty:
    dna: bytes
    owner: int
    price: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "dna", _as_dna(self.dna))
        _check_u64(self.owner, "owner")
        if self.price is not None:
            _check_u64(self.price, "price")

    def encode(self) -> bytes:
        """Serialise as dna, little-endian u64 owner, optional u64 price."""
        price = b"\x00" if self.price is None else b"\x01" + struct.pack("<Q", self.price)
        return self.dna + struct.pack("<Q", self.owner) + price

    @classmethod
    def decode(cls, data: bytes) -> Kitty:
        data = bytes(data)
        header = DNA_LEN + 8 + 1
        if len(data) < header:
            raise ValueError("truncated kitty encoding")
        dna = data[:DNA_LEN]
        (owner,) = struct.unpack_from("<Q", data, DNA_LEN)
        flag = data[DNA_LEN + 8]
        if flag == 0:
            price, end = None, header
        elif flag == 1:
            if len(data) < header + 8:
                raise ValueError("truncated kitty price")
            (price,) = struct.unpack_from("<Q", data, header)
            end = header + 8
        else:
            raise ValueError(f"invalid option flag: {flag}")
        if len(data) != end:
            raise ValueError("trailing bytes after kitty encoding")
        return cls(dna, owner, price)

    @classmethod
    def max_encoded_len(cls) -> int:
        return DNA_LEN + 8 + 1 + 8


@dataclass(frozen=True)
class Created:
    owner: int


@dataclass(frozen=True)
class Transferred:
    source: int
    dest: int
    kitty_id: bytes


@dataclass(frozen=True)
class PriceSet:
    owner: int
    kitty_id: bytes
    new_price: int | None


@dataclass(frozen=True)
class Sold:
    buyer: int
    kitty_id: bytes
    price: int


class Kitties:
    """The marketplace state and the calls that change it.

    Every call is atomic: if it raises, no state is left changed.
    """

    def __init__(self, system: System, balances: Balances) -> None:
        self.system = system
        self.balances = balances
        self.count = 0
        self.registry: dict[bytes, Kitty] = {}
        self._owned: dict[int, list[bytes]] = {}

    def owned_by(self, account: int) -> list[bytes]:
        return list(self._owned.get(account, ()))

    def _set_owned(self, account: int, ids: list[bytes]) -> None:
        if ids:
            self._owned[account] = ids
        else:
            self._owned.pop(account, None)

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        saved = (
            self.count,
            dict(self.registry),
            {account: list(ids) for account, ids in self._owned.items()},
            self.system.snapshot(),
            self.balances.snapshot(),
        )
        try:
            yield
        except BaseException:
            self.count, self.registry, self._owned, system_state, balance_state = saved
            self.system.restore(system_state)
            self.balances.restore(balance_state)
            raise

    def mint(self, owner: int, dna: bytes) -> None:
        dna = _as_dna(dna)
        with self._transaction():
            if dna in self.registry:
                raise KittyError("DuplicateKitty")
            if self.count >= U32_MAX:
                raise KittyError("TooManyKitties")
            owned = self.owned_by(owner)
            if len(owned) >= MAX_OWNED:
                raise KittyError("TooManyOwned")
            owned.append(dna)
            self._set_owned(owner, owned)
            self.registry[dna] = Kitty(dna, owner)
            self.count += 1
            self.system.deposit_event(Created(owner))

    def do_transfer(self, source: int, dest: int, kitty_id: bytes) -> None:
        kitty_id = _as_dna(kitty_id)
        with self._transaction():
            if source == dest:
                raise KittyError("TransferToSelf")
            kitty = self.registry.get(kitty_id)
            if kitty is None:
                raise KittyError("NoKitty")
            if kitty.owner != source:
                raise KittyError("NotOwner")
            to_owned = self.owned_by(dest)
            if len(to_owned) >= MAX_OWNED:
                raise KittyError("TooManyKitties")
            to_owned.append(kitty_id)
            from_owned = self.owned_by(source)
            try:
                index = from_owned.index(kitty_id)
            except ValueError:
                raise KittyError("NoKitty") from None
            from_owned[index] = from_owned[-1]
            from_owned.pop()
            self.registry[kitty_id] = replace(kitty, owner=dest, price=None)
            self._set_owned(dest, to_owned)
            self._set_owned(source, from_owned)
            self.system.deposit_event(Transferred(source, dest, kitty_id))

    def do_set_price(self, caller: int, kitty_id: bytes, new_price: int | None) -> None:
        kitty_id = _as_dna(kitty_id)
        with self._transaction():
            kitty = self.registry.get(kitty_id)
            if kitty is None:
                raise KittyError("NoKitty")
            if kitty.owner != caller:
                raise KittyError("NotOwner")
            self.registry[kitty_id] = replace(kitty, price=new_price)
            self.system.deposit_event(PriceSet(caller, kitty_id, new_price))

    def do_buy_kitty(self, buyer: int, kitty_id: bytes, max_price: int) -> None:
        kitty_id = _as_dna(kitty_id)
        _check_u64(max_price, "max price")
        with self._transaction():
            kitty = self.registry.get(kitty_id)
            if kitty is None:
                raise KittyError("NoKitty")
            if kitty.price is None:
                raise KittyError("NotForSale")
            if max_price < kitty.price:
                raise KittyError("MaxPriceTooLow")
            price = kitty.price
            self.balances.transfer(buyer, kitty.owner, price, Preservation.PRESERVE)
            self.do_transfer(kitty.owner, buyer, kitty_id)
            self.system.deposit_event(Sold(buyer, kitty_id, price))

    def gen_dna(self) -> bytes:
        """Hash the block context and kitty count into a fresh 32-byte id."""
        index = self.system.extrinsic_index
        encoded_index = b"\x00" if index is None else b"\x01" + struct.pack("<I", index)
        payload = (
            self.system.parent_hash
            + struct.pack("<Q", self.system.block_number)
            + encoded_index
            + struct.pack("<I", self.count)
        )
        return hashlib.blake2b(payload, digest_size=32).digest()

    def create_kitty(self, origin: Origin) -> None:
        who = ensure_signed(origin)
        self.mint(who, self.gen_dna())

    def transfer(self, origin: Origin, to: int, kitty_id: bytes) -> None:
        who = ensure_signed(origin)
        self.do_transfer(who, to, kitty_id)

    def set_price(self, origin: Origin, kitty_id: bytes, new_price: int | None) -> None:
        who = ensure_signed(origin)
        self.do_set_price(who, kitty_id, new_price)

    def buy_kitty(self, origin: Origin, kitty_id: bytes, max_price: int) -> None:
        who = ensure_signed(origin)
        self.do_buy_kitty(who, kitty_id, max_price)


class Runtime:
    """A system, a balance ledger and a kitty marketplace wired together."""

    def __init__(self, existential_deposit: int = 1) -> None:
        self.system = System()
        self.balances = Balances(existential_deposit)
        self.kitties = Kitties(self.system, self.balances)