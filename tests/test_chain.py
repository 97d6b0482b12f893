import pytest

from kittymarket.chain import (
    ArithmeticOverflow,
    ArithmeticUnderflow,
    Balances,
    BadOrigin,
    DispatchError,
    NotExpendable,
    Origin,
    Preservation,
    System,
    ensure_signed,
)

ALICE = 1
BOB = 2


def test_signed_origin_yields_account():
    assert ensure_signed(Origin.signed(ALICE)) == ALICE


def test_none_origin_is_bad():
    origin = Origin.none()
    assert origin.is_signed is False
    with pytest.raises(BadOrigin):
        ensure_signed(origin)


def test_bad_origin_is_dispatch_error():
    with pytest.raises(DispatchError):
        ensure_signed(Origin.none())


def test_events_not_recorded_at_block_zero():
    system = System()
    system.deposit_event("ignored")
    assert system.last_event() is None
    assert system.events == []


def test_events_recorded_after_block_set():
    system = System()
    system.set_block_number(1)
    system.deposit_event("first")
    system.deposit_event("second")
    assert system.last_event() == "second"
    assert system.events == ["first", "second"]


def test_negative_block_number_rejected():
    with pytest.raises(ValueError):
        System().set_block_number(-1)


def test_system_snapshot_restore():
    system = System()
    system.set_block_number(1)
    system.deposit_event("kept")
    state = system.snapshot()
    system.set_block_number(5)
    system.deposit_event("dropped")
    system.restore(state)
    assert system.block_number == 1
    assert system.events == ["kept"]


def test_mint_into_adds_balance():
    balances = Balances()
    assert balances.mint_into(ALICE, 1337) == 1337
    assert balances.balance(ALICE) == 1337
    assert balances.total_balance(ALICE) == 1337


def test_mint_below_existential_deposit_fails():
    balances = Balances(existential_deposit=10)
    with pytest.raises(DispatchError):
        balances.mint_into(ALICE, 5)
    assert balances.balance(ALICE) == 0


def test_mint_overflow():
    balances = Balances()
    balances.mint_into(ALICE, 2**64 - 1)
    with pytest.raises(ArithmeticOverflow):
        balances.mint_into(ALICE, 1)


def test_transfer_conserves_total():
    balances = Balances()
    balances.mint_into(ALICE, 1000)
    balances.transfer(ALICE, BOB, 300, Preservation.PRESERVE)
    assert balances.balance(ALICE) + balances.balance(BOB) == 1000
    assert balances.balance(BOB) == 300


def test_transfer_underflow():
    balances = Balances()
    with pytest.raises(ArithmeticUnderflow):
        balances.transfer(BOB, ALICE, 1337, Preservation.PRESERVE)


def test_transfer_whole_balance_preserved_fails():
    balances = Balances()
    balances.mint_into(BOB, 1337)
    with pytest.raises(NotExpendable):
        balances.transfer(BOB, ALICE, 1337, Preservation.PRESERVE)
    assert balances.balance(BOB) == 1337
    assert balances.balance(ALICE) == 0


def test_transfer_whole_balance_expendable_reaps():
    balances = Balances()
    balances.mint_into(BOB, 1337)
    balances.transfer(BOB, ALICE, 1337, Preservation.EXPENDABLE)
    assert balances.balance(BOB) == 0
    assert balances.balance(ALICE) == 1337
    assert BOB not in balances.snapshot()


def test_zero_transfer_is_noop():
    balances = Balances()
    assert balances.transfer(ALICE, BOB, 0, Preservation.PRESERVE) == 0
    assert balances.snapshot() == {}


def test_balances_snapshot_restore():
    balances = Balances()
    balances.mint_into(ALICE, 100)
    state = balances.snapshot()
    balances.mint_into(BOB, 100)
    balances.restore(state)
    assert balances.balance(BOB) == 0
    assert balances.balance(ALICE) == 100