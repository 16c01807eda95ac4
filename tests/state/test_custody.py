import pytest

from farm_admin.state.custody import TokenLedger

A = "0x" + "aa" * 20
B = "0x" + "bb" * 20
T1 = "0x" + "01" * 20
T2 = "0x" + "02" * 20


def test_credit_debit_transfer():
    ledger = TokenLedger()
    ledger.credit(A, T1, 100)
    ledger.transfer(A, B, T1, 40)
    assert ledger.get(A, T1) == 60
    assert ledger.get(B, T1) == 40
    ledger.debit(A, T1, 60)
    assert ledger.get_all_balances() == {(B, T1): 40}


def test_insufficient_balance():
    ledger = TokenLedger()
    ledger.credit(A, T1, 5)
    with pytest.raises(ValueError):
        ledger.debit(A, T1, 6)
    with pytest.raises(ValueError):
        ledger.credit(A, T1, -1)


def test_balances_of_and_copy():
    ledger = TokenLedger()
    ledger.credit(A, T1, 1)
    ledger.credit(A, T2, 2)
    ledger.credit(B, T2, 3)
    assert ledger.balances_of(A) == {T1: 1, T2: 2}
    clone = ledger.copy()
    clone.debit(A, T1, 1)
    assert ledger.get(A, T1) == 1
    assert clone != ledger
