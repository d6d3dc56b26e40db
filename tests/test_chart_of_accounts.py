import pytest
from sqlalchemy.exc import IntegrityError

from crud import chart_of_accounts as chart_crud
from exceptions import AccountNotFoundError
from schemas.chart_of_accounts import LedgerAccountCreate


def test_initialize_creates_the_default_chart(db, tenant_id):
    accounts = chart_crud.initialize_default_accounts(db, tenant_id)

    assert [a.account_code for a in accounts] == [
        "CASH", "BANK", "AR", "AP", "SALES", "PURCHASE", "WAGES", "OTHER_INCOME", "OTHER_EXPENSE",
    ]
    assert all(a.is_system_account and a.is_active for a in accounts)
    assert chart_crud.get_account_by_code(db, "AP", tenant_id).account_type == "liability"


def test_initialize_twice_hits_the_unique_constraint(db, tenant_id, chart):
    with pytest.raises(IntegrityError):
        chart_crud.initialize_default_accounts(db, tenant_id)
    db.rollback()
    assert chart_crud.count_accounts(db, tenant_id) == 9


def test_ensure_default_accounts_only_seeds_empty_tenants(db, tenant_id):
    assert chart_crud.ensure_default_accounts(db, tenant_id) is True
    assert chart_crud.ensure_default_accounts(db, tenant_id) is False
    assert chart_crud.count_accounts(db, tenant_id) == 9


def test_charts_are_per_tenant(db, tenant_id, chart):
    chart_crud.initialize_default_accounts(db, "tenant-b")
    assert chart_crud.count_accounts(db, tenant_id) == 9
    assert chart_crud.count_accounts(db, "tenant-b") == 9


def test_resolve_account_by_code_then_name(db, tenant_id, chart):
    assert chart_crud.resolve_account(db, tenant_id, "AR").account_name == "Accounts Receivable"
    assert chart_crud.resolve_account(db, tenant_id, "Wages Expense").account_code == "WAGES"


def test_resolve_account_ignores_inactive_and_other_tenants(db, tenant_id, chart):
    account = chart_crud.get_account_by_code(db, "BANK", tenant_id)
    account.is_active = False
    db.commit()

    with pytest.raises(AccountNotFoundError):
        chart_crud.resolve_account(db, tenant_id, "BANK")
    with pytest.raises(AccountNotFoundError):
        chart_crud.resolve_account(db, "tenant-b", "CASH")


def test_create_account_rejects_duplicate_code(db, tenant_id, chart):
    new_account = LedgerAccountCreate(account_code="RENT", account_name="Rent Expense", account_type="expense")
    chart_crud.create_account(db, new_account, tenant_id)

    with pytest.raises(ValueError):
        chart_crud.create_account(db, new_account, tenant_id)


def test_invalid_account_type_is_rejected():
    with pytest.raises(ValueError):
        LedgerAccountCreate(account_code="X", account_name="X", account_type="revenue")


def test_cash_account_code():
    assert chart_crud.cash_account_code("cash") == "CASH"
    assert chart_crud.cash_account_code("upi") == "BANK"
    assert chart_crud.cash_account_code("cheque") == "BANK"
