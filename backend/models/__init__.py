from models.audit_log import AuditLog
from models.chart_of_accounts import LedgerAccount
from models.journal_entry import JournalEntry
from models.journal_line import JournalLine
from models.cashbook_balance import CashbookBalance
from models.business_partners import BusinessPartner
from models.sales_orders import SalesOrder
from models.purchase_orders import PurchaseOrder
from models.direct_sales import DirectSale
from models.direct_purchases import DirectPurchase
from models.payments import Payment, PaymentAllocation

__all__ = ['AuditLog', 'BusinessPartner', 'CashbookBalance', 'DirectPurchase', 'DirectSale', 'JournalEntry', 'JournalLine', 'LedgerAccount', 'Payment', 'PaymentAllocation', 'PurchaseOrder', 'SalesOrder',]
