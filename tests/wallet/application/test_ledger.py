"""Application tests for the Ledger and wallet commands."""

import pytest
from protean import current_domain
from storefront.errors import InsufficientFundsError, InvalidAmountError, UserNotFoundError
from storefront.identity.user import User
from storefront.wallet.entry import Direction, LedgerEntry, TransactionType
from storefront.wallet.ledger import ledger, ledger_history
from storefront.wallet.operations import deposit, withdraw


class TestLedgerCredit:
    def test_credit_returns_new_balance(self, make_user):
        user_id = make_user()
        assert ledger.credit(user_id, 30.0) == 30.0
        assert ledger.balance_of(user_id) == 30.0

    def test_credit_is_visible_to_next_read(self, make_user):
        user_id = make_user()
        ledger.credit(user_id, 12.5)
        assert current_domain.repository_for(User).get(user_id).wallet_balance == 12.5

    def test_unknown_user(self):
        with pytest.raises(UserNotFoundError) as exc_info:
            ledger.credit("nobody", 10)
        assert exc_info.value.kind == "NotFound"

    def test_unknown_user_is_reported_before_bad_amount(self):
        with pytest.raises(UserNotFoundError):
            ledger.credit("nobody", -1)

    def test_rejects_zero(self, make_user):
        user_id = make_user()
        with pytest.raises(InvalidAmountError) as exc_info:
            ledger.credit(user_id, 0)
        assert exc_info.value.kind == "ValidationError"


class TestLedgerDebit:
    def test_debit(self, make_user):
        user_id = make_user(balance=50)
        assert ledger.debit(user_id, 20) == 30

    def test_overdraft_leaves_balance_unchanged(self, make_user):
        user_id = make_user(balance=50)
        with pytest.raises(InsufficientFundsError):
            ledger.debit(user_id, 50.01)
        assert ledger.balance_of(user_id) == 50

    def test_unknown_user(self):
        with pytest.raises(UserNotFoundError):
            ledger.debit("nobody", 5)


class TestLedgerHistory:
    def test_every_movement_is_recorded_with_its_tag(self, make_user):
        user_id = make_user()
        ledger.credit(user_id, 40, transaction_type=TransactionType.DEPOSIT)
        ledger.debit(user_id, 15, transaction_type=TransactionType.ORDER_PLACEMENT, reference_id="chk-1")

        entries = current_domain.repository_for(LedgerEntry).history_for(user_id)
        assert len(entries) == 2
        debit = next(e for e in entries if e.direction == Direction.DEBIT.value)
        assert debit.amount == 15
        assert debit.balance_after == 25
        assert debit.transaction_type == "OrderPlacement"
        assert debit.reference_id == "chk-1"

    def test_failed_operations_leave_no_entry(self, make_user):
        user_id = make_user()
        with pytest.raises(InsufficientFundsError):
            ledger.debit(user_id, 1)
        assert ledger_history(user_id) == []

    def test_history_is_newest_first(self, make_user):
        user_id = make_user()
        deposit(user_id, 10)
        withdraw(user_id, 4)
        history = ledger_history(user_id)
        assert [e.transaction_type for e in history] == ["Withdrawal", "Deposit"]

    def test_history_for_unknown_user(self):
        with pytest.raises(UserNotFoundError):
            ledger_history("nobody")


class TestWalletOperations:
    def test_deposit(self, make_user):
        user_id = make_user()
        assert deposit(user_id, 100) == 100

    def test_withdraw_subtracts_the_requested_amount(self, make_user):
        user_id = make_user(balance=100)
        assert withdraw(user_id, 30) == 70

    def test_withdraw_more_than_balance(self, make_user):
        user_id = make_user(balance=10)
        with pytest.raises(InsufficientFundsError):
            withdraw(user_id, 11)
        assert ledger.balance_of(user_id) == 10

    def test_negative_deposit_is_not_a_withdrawal(self, make_user):
        user_id = make_user(balance=10)
        with pytest.raises(InvalidAmountError):
            deposit(user_id, -5)
        assert ledger.balance_of(user_id) == 10


class TestConcurrentWalletOperations:
    def test_parallel_deposits_lose_no_update(self, make_user, run_concurrently):
        user_id = make_user(balance=100.0)

        results = run_concurrently(*[lambda: deposit(user_id, 5.0)] * 8)

        assert not any(isinstance(r, Exception) for r in results)
        assert sorted(results) == [105.0, 110.0, 115.0, 120.0, 125.0, 130.0, 135.0, 140.0]
        assert ledger.balance_of(user_id) == 140.0

    def test_parallel_withdrawals_never_overdraw(self, make_user, run_concurrently):
        user_id = make_user(balance=30.0)

        results = run_concurrently(*[lambda: withdraw(user_id, 20.0)] * 4)

        assert results.count(10.0) == 1
        assert all(isinstance(r, InsufficientFundsError) for r in results if r != 10.0)
        assert ledger.balance_of(user_id) == 10.0

    def test_interleaved_deposits_and_withdrawals_reconcile(self, make_user, run_concurrently):
        user_id = make_user(balance=50.0)

        calls = [lambda: deposit(user_id, 10.0)] * 5 + [lambda: withdraw(user_id, 10.0)] * 5
        results = run_concurrently(*calls)

        assert not any(isinstance(r, Exception) for r in results)
        assert ledger.balance_of(user_id) == 50.0
        movements = [e for e in ledger_history(user_id) if e.transaction_type in ("Deposit", "Withdrawal")]
        # initial funding plus the ten concurrent movements
        assert len(movements) == 11
