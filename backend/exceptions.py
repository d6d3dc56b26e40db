"""
Typed exceptions raised by the ledger core.

Every error carries a machine-readable ``code`` so routers and callers can
branch on the type instead of parsing messages.

    AccountingError
    |
    +-- UnbalancedEntryError      (ValueError)
    +-- EmptyEntryError           (ValueError)
    +-- InvalidJournalLineError   (ValueError)
    +-- AccountNotFoundError      (ValueError)
    +-- InvalidAmountError        (ValueError)
    +-- OverpaymentError          (ValueError)
    +-- ConcurrencyError
    +-- RecordNotFoundError
        +-- PartyNotFoundError
        +-- ObligationNotFoundError
        +-- PaymentNotFoundError

The ValueError subclasses are input problems and map to HTTP 400, the
not-found family maps to 404 and ConcurrencyError to 409. All of them are
raised before anything is written for the call that failed.
"""

from decimal import Decimal
from typing import Optional


class AccountingError(Exception):
    code = "ACCOUNTING_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnbalancedEntryError(AccountingError, ValueError):
    code = "UNBALANCED_ENTRY"

    def __init__(self, total_debit: Decimal, total_credit: Decimal):
        self.total_debit = total_debit
        self.total_credit = total_credit
        super().__init__(f"Journal entry not balanced: Debit={total_debit}, Credit={total_credit}")


class EmptyEntryError(AccountingError, ValueError):
    code = "EMPTY_ENTRY"

    def __init__(self):
        super().__init__("Journal entry must have at least one line")


class InvalidJournalLineError(AccountingError, ValueError):
    code = "INVALID_JOURNAL_LINE"


class AccountNotFoundError(AccountingError, ValueError):
    code = "ACCOUNT_NOT_FOUND"

    def __init__(self, account_ref: Optional[str]):
        self.account_ref = account_ref
        super().__init__(f"Account not found: {account_ref}")


class InvalidAmountError(AccountingError, ValueError):
    code = "INVALID_AMOUNT"


class OverpaymentError(AccountingError, ValueError):
    code = "OVERPAYMENT"

    def __init__(self, amount: Decimal, amount_due: Decimal):
        self.amount = amount
        self.amount_due = amount_due
        super().__init__(f"Payment amount ({amount}) exceeds amount due ({amount_due})")


class ConcurrencyError(AccountingError):
    code = "CONCURRENCY_CONFLICT"


class RecordNotFoundError(AccountingError):
    code = "RECORD_NOT_FOUND"


class PartyNotFoundError(RecordNotFoundError):
    code = "PARTY_NOT_FOUND"

    def __init__(self, partner_id):
        self.partner_id = partner_id
        super().__init__(f"Business partner {partner_id} not found")


class ObligationNotFoundError(RecordNotFoundError):
    code = "OBLIGATION_NOT_FOUND"

    def __init__(self, obligation_type: str, obligation_id):
        self.obligation_type = obligation_type
        self.obligation_id = obligation_id
        super().__init__(f"{obligation_type} {obligation_id} not found")


class PaymentNotFoundError(RecordNotFoundError):
    code = "PAYMENT_NOT_FOUND"

    def __init__(self, payment_id):
        self.payment_id = payment_id
        super().__init__(f"Payment {payment_id} not found")
