# kittymarket

An in-memory simulation of a marketplace for collectible kitties. Accounts
(plain integers) mint kitties with unique 32-byte DNA, transfer them to each
other, put them up for sale and buy them with a native currency kept by a
small balance ledger. It has no dependencies beyond the standard library.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from kittymarket.chain import Origin
from kittymarket.kitties import Runtime

ALICE, BOB = 1, 2

runtime = Runtime()
runtime.system.set_block_number(1)  # events are only recorded after block 0

runtime.kitties.create_kitty(Origin.signed(ALICE))
kitty_id = runtime.kitties.owned_by(ALICE)[0]

runtime.kitties.set_price(Origin.signed(ALICE), kitty_id, 1337)
runtime.balances.mint_into(BOB, 100_000)
runtime.kitties.buy_kitty(Origin.signed(BOB), kitty_id, 1337)

assert runtime.kitties.owned_by(BOB) == [kitty_id]
assert runtime.balances.balance(ALICE) == 1337
assert runtime.balances.balance(BOB) == 100_000 - 1337
print(runtime.system.last_event())  # Sold(buyer=2, kitty_id=..., price=1337)
```

## `kittymarket.chain`

The environment the marketplace runs in.

- `Origin` — who a call comes from: `Origin.signed(account)` or
  `Origin.none()`. `ensure_signed(origin)` returns the account or raises
  `BadOrigin`.
- `System` — block number, parent hash, extrinsic index and an event log.
  `set_block_number(number)` sets the block; `deposit_event(event)` appends to
  the log, except while the block number is 0, when nothing is recorded;
  `last_event()` returns the newest event or `None`. `snapshot()` and
  `restore(state)` save and bring back its state.
- `Balances(existential_deposit=1)` — the native currency, amounts limited to
  unsigned 64-bit values. `mint_into(account, amount)`, `balance(account)`,
  `total_balance(account)` and `transfer(source, dest, amount, preservation)`,
  plus `snapshot()` / `restore(state)`. A transfer that would overdraw raises
  `ArithmeticUnderflow`; one that would leave the payer below the existential
  deposit raises `NotExpendable` unless `Preservation.EXPENDABLE` is given, in
  which case the account is emptied; overflowing a balance raises
  `ArithmeticOverflow`; a resulting balance below the existential deposit
  otherwise raises `DispatchError`.
- `DispatchError` is the base class of every error a call raises.

## `kittymarket.kitties`

The marketplace.

- `Kitty(dna, owner, price=None)` — frozen record. `encode()` gives the 32
  DNA bytes, the owner as a little-endian u64, then `0x00` for no price or
  `0x01` followed by the price as a little-endian u64. `Kitty.decode(data)`
  reverses it and rejects truncated input, bad option flags and trailing
  bytes. `Kitty.max_encoded_len()` is 49.
- Events: `Created(owner)`, `Transferred(source, dest, kitty_id)`,
  `PriceSet(owner, kitty_id, new_price)` and `Sold(buyer, kitty_id, price)`.
- `KittyError` — a `DispatchError` whose `code` is one of `TooManyKitties`,
  `DuplicateKitty`, `TooManyOwned`, `TransferToSelf`, `NoKitty`, `NotOwner`,
  `NotForSale` or `MaxPriceTooLow`.
- `Kitties(system, balances)`:
  - `create_kitty(origin)`, `transfer(origin, to, kitty_id)`,
    `set_price(origin, kitty_id, new_price)` and
    `buy_kitty(origin, kitty_id, max_price)` check the origin is signed and
    then call the matching account-level method.
  - `mint(owner, dna)`, `do_transfer(source, dest, kitty_id)`,
    `do_set_price(caller, kitty_id, new_price)` and
    `do_buy_kitty(buyer, kitty_id, max_price)` take accounts directly.
  - `gen_dna()` hashes the parent hash, block number, extrinsic index and
    kitty count with BLAKE2b into a 32-byte id.
  - `owned_by(account)` lists the DNA of the kitties an account holds; an
    account can hold at most 100. The total number of kitties is capped at
    2³² − 1 and kept in `count`; the kitties themselves are in `registry`.
  - A transfer or sale clears the kitty's price. A sale pays the seller
    the asking price, keeping the buyer's account alive.
  - Every call is atomic: if it raises, the marketplace, the event log and
    the balances are left as they were.
- `Runtime(existential_deposit=1)` — a `System`, a `Balances` and a
  `Kitties` wired together as `system`, `balances` and `kitties`.

## What it does not do

Everything lives in memory for the life of the objects: there is no storage
on disk, no network, no block production and no command-line program. Blocks
advance only when `System.set_block_number` is called.