from datetime import date, timedelta
from decimal import Decimal

from crud import cashbook as cashbook_crud
from crud.manual_entries import record_manual_entry
from crud.audit_log import get_audit_logs
from models.cashbook_balance import CashbookBalance

D0 = date(2024, 4, 1)
D1 = D0 + timedelta(days=1)
D2 = D0 + timedelta(days=2)


def income(db, tenant_id, day, amount, mode="cash"):
    return record_manual_entry(db, tenant_id, day, "income", amount, payment_mode=mode, category="Scrap sale")


def expense(db, tenant_id, day, amount, mode="cash"):
    return record_manual_entry(db, tenant_id, day, "expense", amount, payment_mode=mode, category="Repairs")


def balance(db, tenant_id, day):
    row = cashbook_crud.get_balance(db, tenant_id, day)
    db.refresh(row)
    return row


def test_cash_posting_updates_the_day(db, tenant_id, chart):
    income(db, tenant_id, D0, 500)
    expense(db, tenant_id, D0, 120, mode="upi")

    day = balance(db, tenant_id, D0)
    assert day.opening_balance == Decimal("0")
    assert day.total_income == Decimal("500.00")
    assert day.total_expense == Decimal("120.00")
    assert day.closing_balance == Decimal("380.00")


def test_entries_without_cash_lines_leave_the_cashbook_alone(db, tenant_id, chart):
    from crud.journal_entry import post_journal_entry

    post_journal_entry(
        db, tenant_id, D0, "adjustment", "Manual", None, "reclass",
        [{"account_code": "WAGES", "debit": 50, "credit": 0}, {"account_code": "OTHER_EXPENSE", "debit": 0, "credit": 50}],
    )
    assert db.query(CashbookBalance).count() == 0


def test_new_day_opens_with_previous_closing(db, tenant_id, chart):
    income(db, tenant_id, D0, 300)
    income(db, tenant_id, D2, 50)

    assert balance(db, tenant_id, D2).opening_balance == Decimal("300.00")
    assert balance(db, tenant_id, D2).closing_balance == Decimal("350.00")


def test_back_dated_posting_cascades_into_later_days(db, tenant_id, chart):
    income(db, tenant_id, D0, 100)
    income(db, tenant_id, D1, 10)
    income(db, tenant_id, D2, 1)

    expense(db, tenant_id, D0, 40)

    assert balance(db, tenant_id, D0).closing_balance == Decimal("60.00")
    assert balance(db, tenant_id, D1).opening_balance == Decimal("60.00")
    assert balance(db, tenant_id, D1).closing_balance == Decimal("70.00")
    assert balance(db, tenant_id, D2).opening_balance == Decimal("70.00")
    assert balance(db, tenant_id, D2).closing_balance == Decimal("71.00")


def test_cascade_skips_edited_days_but_carries_across_them(db, tenant_id, chart):
    income(db, tenant_id, D0, 100)
    income(db, tenant_id, D1, 10)
    income(db, tenant_id, D2, 1)

    cashbook_crud.edit_opening_balance(db, tenant_id, D1, 1000, editor_id="auditor")
    edited = balance(db, tenant_id, D1)
    assert edited.is_edited is True
    assert edited.closing_balance == Decimal("1010.00")
    assert balance(db, tenant_id, D2).opening_balance == Decimal("1010.00")

    income(db, tenant_id, D0, 5)

    # D1 keeps its hand-edited values; D2 is chained straight from D0
    assert balance(db, tenant_id, D1).opening_balance == Decimal("1000.00")
    assert balance(db, tenant_id, D1).closing_balance == Decimal("1010.00")
    assert balance(db, tenant_id, D2).opening_balance == Decimal("105.00")
    assert balance(db, tenant_id, D2).closing_balance == Decimal("106.00")


def test_edit_opening_balance_writes_an_audit_log(db, tenant_id, chart):
    edited = cashbook_crud.edit_opening_balance(db, tenant_id, D0, 250, editor_id="auditor")

    [log] = get_audit_logs(db, tenant_id, "cashbook_balances", edited.id)
    assert log.action == "EDIT_OPENING_BALANCE"
    assert log.changed_by == "auditor"
    assert log.old_values is None
    assert log.new_values["opening_balance"] == 250.0
    assert log.new_values["is_edited"] is True


def test_get_cashbook_day_lists_movements_without_writing(db, tenant_id, chart):
    income(db, tenant_id, D0, 200)
    expense(db, tenant_id, D0, 30, mode="bank_transfer")

    day = cashbook_crud.get_cashbook_day(db, tenant_id, D0)
    assert day["balance"].closing_balance == Decimal("170.00")
    assert [m["amount"] for m in day["incomes"]] == [Decimal("200.00")]
    assert [(m["amount"], m["payment_mode"]) for m in day["expenses"]] == [(Decimal("30.00"), "Bank")]
    assert day["incomes"][0]["reference"] == "Manual"

    empty = cashbook_crud.get_cashbook_day(db, tenant_id, D2)
    assert empty["balance"].opening_balance == Decimal("170.00")
    assert empty["incomes"] == [] and empty["expenses"] == []
    assert cashbook_crud.get_balance(db, tenant_id, D2) is None
