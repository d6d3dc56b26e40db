from datetime import date
from decimal import Decimal

import pytest

from crud import payments as payments_crud
from crud.cashbook import get_balance
from crud.chart_of_accounts import get_account_by_code
from crud.invoices import create_obligation
from crud.obligations import get_outstanding_obligations
from exceptions import (
    InvalidAmountError,
    ObligationNotFoundError,
    OverpaymentError,
    PartyNotFoundError,
    PaymentNotFoundError,
)
from models.audit_log import AuditLog
from models.journal_entry import JournalEntry
from models.payment_tracking import PaymentStatus, PaymentType
from models.payments import AllocationStatus, JournalPostingStatus, Payment, PaymentDirection

PAY_DAY = date(2024, 1, 10)


def pay_customer(db, tenant_id, customer, amount, **kwargs):
    kwargs.setdefault("payment_date", PAY_DAY)
    return payments_crud.allocate_to_party(db, tenant_id, customer.id, amount, **kwargs)


def reload(db, *objects):
    for obj in objects:
        db.refresh(obj)
    return objects


class TestAllocateToParty:

    def test_partial_payment_clears_oldest_first(self, db, tenant_id, customer, customer_invoices):
        invoice_a, invoice_b = customer_invoices

        result = pay_customer(db, tenant_id, customer, 900)

        allocations = [(a.obligation_type, a.obligation_id, a.amount_allocated, a.status) for a in result["allocations"]]
        assert allocations == [
            ("sales_order", invoice_a.id, Decimal("500.00"), AllocationStatus.CLEARED),
            ("direct_sale", invoice_b.id, Decimal("400.00"), AllocationStatus.PARTIAL),
        ]
        reload(db, invoice_a, invoice_b)
        assert invoice_a.payment_status == PaymentStatus.PAID
        assert invoice_a.amount_due == Decimal("0")
        assert invoice_b.payment_status == PaymentStatus.PARTIAL
        assert invoice_b.amount_due == Decimal("300.00")
        assert result["overpaid_amount"] == Decimal("0")
        assert result["new_outstanding"] == Decimal("300.00")
        assert result["warning"] is None

    def test_payment_above_everything_owed_becomes_credit(self, db, tenant_id, customer, customer_invoices):
        invoice_a, invoice_b = customer_invoices

        result = pay_customer(db, tenant_id, customer, 1500)

        assert [a.status for a in result["allocations"]] == [AllocationStatus.CLEARED, AllocationStatus.CLEARED]
        reload(db, invoice_a, invoice_b, customer)
        assert invoice_a.payment_status == PaymentStatus.PAID
        assert invoice_b.payment_status == PaymentStatus.PAID
        assert result["overpaid_amount"] == Decimal("300.00")
        assert result["new_outstanding"] == Decimal("0")
        assert customer.overpaid_amount == Decimal("300.00")

    def test_small_payment_touches_only_the_oldest(self, db, tenant_id, customer, customer_invoices):
        invoice_a, invoice_b = customer_invoices

        result = pay_customer(db, tenant_id, customer, 100)

        assert [(a.obligation_id, a.amount_allocated) for a in result["allocations"]] == [(invoice_a.id, Decimal("100.00"))]
        assert [u["obligation_id"] for u in result["obligations_updated"]] == [invoice_a.id]
        reload(db, invoice_a, invoice_b)
        assert invoice_a.payment_status == PaymentStatus.PARTIAL
        assert invoice_a.amount_due == Decimal("400.00")
        assert invoice_b.amount_paid == Decimal("0")
        assert invoice_b.payment_status == PaymentStatus.PENDING
        assert result["overpaid_amount"] == Decimal("0")

    def test_outstanding_never_drifts_from_the_invoices(self, db, tenant_id, customer, customer_invoices):
        create_obligation(db, tenant_id, "sales_order", customer.id, Decimal("333.33"), date(2024, 1, 7))

        for amount in (Decimal("123.45"), Decimal("10.01"), Decimal("600"), Decimal("0.55")):
            result = pay_customer(db, tenant_id, customer, amount)
            resummed = sum(
                (o.amount_due for _, o in get_outstanding_obligations(db, tenant_id, customer.id, PaymentDirection.RECEIVED)),
                Decimal("0"),
            )
            assert resummed == result["new_outstanding"]

        db.refresh(customer)
        assert customer.current_receivable == result["new_outstanding"]

    def test_cleared_is_exact_while_paid_status_tolerates_a_paisa(self, db, tenant_id, customer, customer_invoices):
        invoice_a, invoice_b = customer_invoices

        result = pay_customer(db, tenant_id, customer, Decimal("499.99"))

        [allocation] = result["allocations"]
        assert allocation.obligation_id == invoice_a.id
        assert allocation.status == AllocationStatus.PARTIAL
        reload(db, invoice_a, invoice_b)
        assert invoice_a.payment_status == PaymentStatus.PAID
        assert invoice_a.amount_due == Decimal("0.01")
        assert invoice_b.payment_status == PaymentStatus.PENDING

    def test_one_payment_and_one_journal_entry(self, db, tenant_id, customer, customer_invoices):
        entries_before = db.query(JournalEntry).count()

        result = pay_customer(db, tenant_id, customer, 900, payment_mode="upi")

        payment = result["payment"]
        assert db.query(Payment).count() == 1
        assert db.query(JournalEntry).count() == entries_before + 1
        assert payment.journal_entry_status == JournalPostingStatus.SUCCESS

        entry = db.query(JournalEntry).filter(JournalEntry.id == payment.journal_entry_id).one()
        assert entry.entry_type == "payment_received"
        assert entry.reference_type == "Payment"
        assert entry.reference_id == payment.id
        assert entry.total_amount == Decimal("900.00")

        # UPI lands in Bank, which the cashbook counts as income
        assert get_balance(db, tenant_id, PAY_DAY).total_income == Decimal("900.00")

    def test_party_details_are_refreshed(self, db, tenant_id, customer, customer_invoices):
        pay_customer(db, tenant_id, customer, 250)

        db.refresh(customer)
        assert customer.last_payment_date == PAY_DAY
        assert customer.last_payment_amount == Decimal("250.00")
        assert customer.current_receivable == Decimal("950.00")

    def test_journal_failure_keeps_the_payment(self, db, tenant_id, customer, customer_invoices):
        receivable = get_account_by_code(db, "AR", tenant_id)
        receivable.is_active = False
        db.commit()

        result = pay_customer(db, tenant_id, customer, 900)

        payment = result["payment"]
        assert result["warning"].startswith("Payment recorded but journal entry failed")
        assert payment.journal_entry_status == JournalPostingStatus.FAILED
        assert "AR" in payment.journal_entry_error
        assert payment.journal_entry_id is None
        assert len(payment.allocations) == 2
        assert result["new_outstanding"] == Decimal("300.00")
        assert [p.id for p in payments_crud.get_failed_journal_payments(db, tenant_id)] == [payment.id]

    def test_vendor_payment_uses_payables(self, db, tenant_id, vendor):
        purchase = create_obligation(db, tenant_id, "purchase_order", vendor.id, 400, date(2024, 1, 2))
        direct = create_obligation(db, tenant_id, "direct_purchase", vendor.id, 100, date(2024, 1, 1))

        result = payments_crud.allocate_to_party(
            db, tenant_id, vendor.id, 550, payment_date=PAY_DAY, direction=PaymentDirection.MADE
        )

        assert [a.obligation_id for a in result["allocations"]] == [direct.id, purchase.id]
        assert result["overpaid_amount"] == Decimal("50.00")
        db.refresh(vendor)
        assert vendor.advance_paid_amount == Decimal("50.00")
        assert vendor.overpaid_amount == Decimal("0")
        assert vendor.current_payable == Decimal("0")

        entry = db.query(JournalEntry).filter(JournalEntry.id == result["payment"].journal_entry_id).one()
        assert entry.entry_type == "payment_made"
        assert get_balance(db, tenant_id, PAY_DAY).total_expense == Decimal("550.00")

    def test_rejects_bad_amounts_and_unknown_parties(self, db, tenant_id, customer):
        with pytest.raises(InvalidAmountError):
            pay_customer(db, tenant_id, customer, 0)
        with pytest.raises(PartyNotFoundError):
            payments_crud.allocate_to_party(db, tenant_id, 9999, 100)
        assert db.query(Payment).count() == 0


class TestRecordObligationPayment:

    def test_pays_one_invoice(self, db, tenant_id, customer, customer_invoices):
        invoice_a, invoice_b = customer_invoices

        result = payments_crud.record_obligation_payment(
            db, tenant_id, "direct_sale", invoice_b.id, 700, payment_date=PAY_DAY
        )

        assert [a.status for a in result["allocations"]] == [AllocationStatus.CLEARED]
        assert result["payment"].direction == PaymentDirection.RECEIVED
        assert result["new_outstanding"] == Decimal("500.00")
        reload(db, invoice_a, invoice_b)
        assert invoice_b.payment_status == PaymentStatus.PAID
        assert invoice_a.payment_status == PaymentStatus.PENDING

    def test_exact_amount_due_clears(self, db, tenant_id, customer, customer_invoices):
        invoice_a, _ = customer_invoices
        result = payments_crud.record_obligation_payment(db, tenant_id, "sales_order", invoice_a.id, Decimal("500.00"))
        assert result["allocations"][0].status == AllocationStatus.CLEARED

    def test_overpayment_is_rejected(self, db, tenant_id, customer, customer_invoices):
        invoice_a, _ = customer_invoices
        with pytest.raises(OverpaymentError):
            payments_crud.record_obligation_payment(db, tenant_id, "sales_order", invoice_a.id, Decimal("500.01"))
        assert db.query(Payment).count() == 0

    def test_settled_invoice_takes_no_more_money(self, db, tenant_id, customer, customer_invoices):
        invoice_a, _ = customer_invoices
        payments_crud.record_obligation_payment(db, tenant_id, "sales_order", invoice_a.id, 500, payment_date=PAY_DAY)
        entries = db.query(JournalEntry).count()

        with pytest.raises(OverpaymentError):
            payments_crud.record_obligation_payment(db, tenant_id, "sales_order", invoice_a.id, Decimal("0.01"), payment_date=PAY_DAY)

        db.refresh(invoice_a)
        assert invoice_a.amount_paid == Decimal("500.00")
        assert db.query(Payment).count() == 1
        assert db.query(JournalEntry).count() == entries
        assert get_balance(db, tenant_id, PAY_DAY).total_income == Decimal("500.00")

    def test_other_tenants_invoice_is_not_found(self, db, tenant_id, customer, customer_invoices):
        invoice_a, _ = customer_invoices
        with pytest.raises(ObligationNotFoundError):
            payments_crud.record_obligation_payment(db, "tenant-b", "sales_order", invoice_a.id, 100)

    def test_unknown_obligation_type(self, db, tenant_id):
        with pytest.raises(ValueError):
            payments_crud.record_obligation_payment(db, tenant_id, "invoice", 1, 100)


class TestDeletePayment:

    def test_delete_restores_invoices_but_not_the_ledger(self, db, tenant_id, customer, customer_invoices):
        invoice_a, invoice_b = customer_invoices
        result = pay_customer(db, tenant_id, customer, 900)
        payment_id = result["payment"].id
        entries = db.query(JournalEntry).count()

        payments_crud.delete_payment(db, tenant_id, payment_id, actor_id="tester")

        reload(db, invoice_a, invoice_b, customer)
        assert invoice_a.amount_due == Decimal("500.00")
        assert invoice_a.payment_status == PaymentStatus.PENDING
        assert invoice_b.amount_due == Decimal("700.00")
        assert customer.current_receivable == Decimal("1200.00")
        with pytest.raises(PaymentNotFoundError):
            payments_crud.get_payment(db, tenant_id, payment_id)

        # Known limitation: the payment's journal entry and cash movement stay
        assert db.query(JournalEntry).count() == entries
        assert get_balance(db, tenant_id, PAY_DAY).total_income == Decimal("900.00")

        log = db.query(AuditLog).filter(AuditLog.table_name == "payments").one()
        assert log.action == "DELETE"
        assert log.record_id == payment_id

    def test_deleted_payment_stays_readable_for_reconciliation(self, db, tenant_id, customer, customer_invoices):
        kept = pay_customer(db, tenant_id, customer, 100)["payment"]
        deleted = pay_customer(db, tenant_id, customer, 200)["payment"]

        payments_crud.delete_payment(db, tenant_id, deleted.id, actor_id="tester")

        found = payments_crud.get_payment(db, tenant_id, deleted.id, include_deleted=True)
        assert found.deleted_at is not None
        assert found.deleted_by == "tester"
        assert found.journal_entry_id is not None
        assert [p.id for p in payments_crud.get_deleted_payments(db, tenant_id)] == [deleted.id]
        assert [p.id for p in payments_crud.get_payments_for_party(db, tenant_id, customer.id)] == [kept.id]
        assert payments_crud.get_deleted_payments(db, "tenant-b") == []

    def test_delete_gives_back_carried_credit(self, db, tenant_id, customer, customer_invoices):
        result = pay_customer(db, tenant_id, customer, 1500)

        payments_crud.delete_payment(db, tenant_id, result["payment"].id)

        db.refresh(customer)
        assert customer.overpaid_amount == Decimal("0")
        assert customer.current_receivable == Decimal("1200.00")

    def test_delete_unknown_payment(self, db, tenant_id):
        with pytest.raises(PaymentNotFoundError):
            payments_crud.delete_payment(db, tenant_id, 42)


def test_cash_sale_is_settled_on_creation(db, tenant_id, customer):
    sale = create_obligation(db, tenant_id, "direct_sale", customer.id, 250, date(2024, 2, 1), payment_type=PaymentType.CASH)

    db.refresh(sale)
    assert sale.payment_status == PaymentStatus.PAID
    assert sale.amount_due == Decimal("0")
    assert get_outstanding_obligations(db, tenant_id, customer.id, PaymentDirection.RECEIVED) == []
    assert get_balance(db, tenant_id, date(2024, 2, 1)).total_income == Decimal("250.00")


def test_obligation_numbers_are_sequential_per_kind(db, tenant_id, customer):
    first = create_obligation(db, tenant_id, "sales_order", customer.id, 10, date(2024, 2, 1))
    second = create_obligation(db, tenant_id, "sales_order", customer.id, 10, date(2024, 2, 2))
    direct = create_obligation(db, tenant_id, "direct_sale", customer.id, 10, date(2024, 2, 2))

    assert (first.so_number, second.so_number, direct.sale_number) == (1, 2, 1)
