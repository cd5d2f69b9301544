"""Posting rules: turn business documents into balanced ledger entries.

Each rule is a pure function returning an EntryDraft; record it with
``LedgerService.record_draft``.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from obraledger.domain.entities import EntryDraft, Movement, ReferenceType
from obraledger.domain.errors import ValidationError
from obraledger.domain.money import ZERO, MoneyLike, is_whole_cents, to_money

CASH_ACCOUNT = "110000"
BANK_ACCOUNT = "120000"
RECEIVABLES_ACCOUNT = "130000"
INVENTORY_ACCOUNT = "140000"
EQUIPMENT_ACCOUNT = "150000"
PAYABLES_ACCOUNT = "210000"
VAT_CREDIT_ACCOUNT = "230000"
VAT_DEBIT_ACCOUNT = "240000"
SERVICE_REVENUE_ACCOUNT = "410000"
OTHER_INCOME_ACCOUNT = "430000"
COST_OF_SALES_ACCOUNT = "510000"
ADMINISTRATIVE_EXPENSE_ACCOUNT = "530000"
OTHER_EXPENSE_ACCOUNT = "560000"

BANK_TRANSFER = "transferencia"

EXPENSE_ACCOUNTS = {
    "materials": "510000",
    "labor": "510000",
    "equipment": "510000",
    "administrative": "530000",
    "other": "530000",
    "sales": "540000",
    "financial": "550000",
}

# Purchase invoice categories; the stock ones are capitalized, the rest expensed
STOCK_CATEGORIES = ("materials", "equipment")
EXPENSED_CATEGORIES = ("services", "expenses")


def _exact_money(value: MoneyLike, label: str) -> Decimal:
    if not is_whole_cents(value):
        raise ValidationError(f"{label}: amount {value} has fractions of a cent")
    return to_money(value)


def _check_totals(kind: str, number: str, subtotal: Decimal, tax: Decimal, total: Decimal):
    if subtotal <= ZERO:
        raise ValidationError(f"{kind} {number}: subtotal must be greater than zero")
    if tax < ZERO:
        raise ValidationError(f"{kind} {number}: tax must not be negative")
    if subtotal + tax != total:
        raise ValidationError(
            f"{kind} {number}: subtotal {subtotal} + tax {tax} does not equal total {total}"
        )


@dataclass(frozen=True)
class SalesInvoice:
    """Invoice issued to a client."""

    id: int
    invoice_number: str
    client_name: str
    date: date
    subtotal: Decimal
    tax: Decimal
    total: Decimal

    def __post_init__(self):
        label = f"Invoice {self.invoice_number}"
        for field in ("subtotal", "tax", "total"):
            object.__setattr__(self, field, _exact_money(getattr(self, field), label))
        _check_totals("Invoice", self.invoice_number, self.subtotal, self.tax, self.total)


@dataclass(frozen=True)
class PurchaseOrder:
    """Order of materials from a supplier."""

    id: int
    order_number: str
    supplier_name: str
    date: date
    subtotal: Decimal
    tax: Decimal
    total: Decimal

    def __post_init__(self):
        label = f"Purchase order {self.order_number}"
        for field in ("subtotal", "tax", "total"):
            object.__setattr__(self, field, _exact_money(getattr(self, field), label))
        _check_totals("Purchase order", self.order_number, self.subtotal, self.tax, self.total)


@dataclass(frozen=True)
class Payment:
    """Money received from a client or paid to a supplier."""

    id: int
    date: date
    amount: Decimal
    method: str = BANK_TRANSFER
    reference: Optional[str] = None

    def __post_init__(self):
        amount = _exact_money(self.amount, f"Payment {self.id}")
        if amount <= ZERO:
            raise ValidationError(f"Payment {self.id}: amount must be greater than zero")
        object.__setattr__(self, "amount", amount)

    @property
    def account_code(self) -> str:
        """Bank for transfers, cash for everything else."""
        return BANK_ACCOUNT if self.method == BANK_TRANSFER else CASH_ACCOUNT


@dataclass(frozen=True)
class Expense:
    """Expense paid directly, outside any purchase order."""

    id: int
    date: date
    description: str
    category: str
    amount: Decimal
    payment_method: str = BANK_TRANSFER
    reference: Optional[str] = None

    def __post_init__(self):
        amount = _exact_money(self.amount, f"Expense {self.id}")
        if amount <= ZERO:
            raise ValidationError(f"Expense {self.id}: amount must be greater than zero")
        if self.category not in EXPENSE_ACCOUNTS:
            allowed = ", ".join(sorted(EXPENSE_ACCOUNTS))
            raise ValidationError(
                f"Expense {self.id}: unknown category '{self.category}'. Allowed: {allowed}"
            )
        object.__setattr__(self, "amount", amount)

    @property
    def account_code(self) -> str:
        return EXPENSE_ACCOUNTS[self.category]


@dataclass(frozen=True)
class PurchaseInvoice:
    """Supplier invoice, booked when it arrives.

    Materials and equipment are capitalized; services and other expenses go
    straight to an expense account. ``account_code`` overrides the default
    account for equipment and expensed categories.
    """

    id: int
    invoice_number: str
    supplier_name: str
    date: date
    category: str
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    account_code: Optional[str] = None

    def __post_init__(self):
        label = f"Purchase invoice {self.invoice_number}"
        if self.category not in STOCK_CATEGORIES and self.category not in EXPENSED_CATEGORIES:
            allowed = ", ".join(sorted(STOCK_CATEGORIES + EXPENSED_CATEGORIES))
            raise ValidationError(
                f"{label}: unknown category '{self.category}'. Allowed: {allowed}"
            )
        for field in ("subtotal", "tax", "total"):
            object.__setattr__(self, field, _exact_money(getattr(self, field), label))
        _check_totals("Purchase invoice", self.invoice_number, self.subtotal, self.tax, self.total)

    @property
    def debit_account(self) -> str:
        if self.category == "materials":
            return INVENTORY_ACCOUNT
        if self.category == "equipment":
            return self.account_code or EQUIPMENT_ACCOUNT
        return self.account_code or ADMINISTRATIVE_EXPENSE_ACCOUNT


@dataclass(frozen=True)
class InventoryMovement:
    """Valued stock movement of one product.

    ``total_cost`` is signed for adjustments: positive when the count found
    more stock than the books, negative when it found less.
    """

    id: int
    date: date
    product_name: str
    total_cost: Decimal
    document_number: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(
            self, "total_cost", _exact_money(self.total_cost, f"Inventory movement {self.id}")
        )


def post_sales_invoice(invoice: SalesInvoice) -> EntryDraft:
    """Receivable against service revenue and output VAT."""
    movements = [
        Movement.debit_line(RECEIVABLES_ACCOUNT, invoice.total),
        Movement.credit_line(SERVICE_REVENUE_ACCOUNT, invoice.subtotal),
    ]
    if invoice.tax > ZERO:
        movements.append(Movement.credit_line(VAT_DEBIT_ACCOUNT, invoice.tax))
    return EntryDraft(
        date=invoice.date,
        description=f"Factura {invoice.invoice_number} - {invoice.client_name}",
        movements=tuple(movements),
        reference_type=ReferenceType.INVOICE,
        reference_id=invoice.id,
    )


def post_invoice_payment(invoice: SalesInvoice, payment: Payment) -> EntryDraft:
    """Client payment settling (part of) a receivable."""
    if payment.amount > invoice.total:
        raise ValidationError(
            f"Payment {payment.id} of {payment.amount} exceeds invoice "
            f"{invoice.invoice_number} total {invoice.total}"
        )
    return EntryDraft(
        date=payment.date,
        description=f"Pago Factura {invoice.invoice_number} - {invoice.client_name}",
        movements=(
            Movement.debit_line(payment.account_code, payment.amount),
            Movement.credit_line(RECEIVABLES_ACCOUNT, payment.amount),
        ),
        reference_type=ReferenceType.PAYMENT,
        reference_id=payment.id,
    )


def post_purchase_order_receipt(order: PurchaseOrder) -> EntryDraft:
    """Received materials into inventory, with input VAT, owed to the supplier."""
    movements = [Movement.debit_line(INVENTORY_ACCOUNT, order.subtotal)]
    if order.tax > ZERO:
        movements.append(Movement.debit_line(VAT_CREDIT_ACCOUNT, order.tax))
    movements.append(Movement.credit_line(PAYABLES_ACCOUNT, order.total))
    return EntryDraft(
        date=order.date,
        description=f"Orden de Compra {order.order_number} - {order.supplier_name}",
        movements=tuple(movements),
        reference_type=ReferenceType.PURCHASE_ORDER,
        reference_id=order.id,
    )


def post_supplier_payment(order: PurchaseOrder, payment: Payment) -> EntryDraft:
    """Payment to a supplier settling (part of) a payable."""
    if payment.amount > order.total:
        raise ValidationError(
            f"Payment {payment.id} of {payment.amount} exceeds order "
            f"{order.order_number} total {order.total}"
        )
    return EntryDraft(
        date=payment.date,
        description=f"Pago a {order.supplier_name} - Orden {order.order_number}",
        movements=(
            Movement.debit_line(PAYABLES_ACCOUNT, payment.amount),
            Movement.credit_line(payment.account_code, payment.amount),
        ),
        reference_type=ReferenceType.PAYMENT,
        reference_id=payment.id,
    )


def post_expense(expense: Expense) -> EntryDraft:
    """Expense charged to its category account, paid from bank or cash."""
    payment_account = BANK_ACCOUNT if expense.payment_method == BANK_TRANSFER else CASH_ACCOUNT
    description = expense.description
    if expense.reference:
        description = f"{description} - {expense.reference}"
    return EntryDraft(
        date=expense.date,
        description=description,
        movements=(
            Movement.debit_line(expense.account_code, expense.amount),
            Movement.credit_line(payment_account, expense.amount),
        ),
        reference_type=ReferenceType.EXPENSE,
        reference_id=expense.id,
    )


def post_purchase_invoice(invoice: PurchaseInvoice) -> EntryDraft:
    """Stock or expense plus input VAT, owed to the supplier."""
    movements = [Movement.debit_line(invoice.debit_account, invoice.subtotal)]
    if invoice.tax > ZERO:
        movements.append(Movement.debit_line(VAT_CREDIT_ACCOUNT, invoice.tax))
    movements.append(Movement.credit_line(PAYABLES_ACCOUNT, invoice.total))
    return EntryDraft(
        date=invoice.date,
        description=f"Factura de Compra {invoice.invoice_number} - {invoice.supplier_name}",
        movements=tuple(movements),
        reference_type=ReferenceType.PURCHASE_INVOICE,
        reference_id=invoice.id,
    )


def _inventory_description(prefix: str, movement: InventoryMovement) -> str:
    description = f"{prefix} - {movement.product_name}"
    if movement.document_number:
        description = f"{description} ({movement.document_number})"
    return description


def post_inventory_sale(movement: InventoryMovement) -> EntryDraft:
    """Stock leaving inventory at cost, charged to cost of sales."""
    if movement.total_cost <= ZERO:
        raise ValidationError(
            f"Inventory movement {movement.id}: sale cost must be greater than zero"
        )
    return EntryDraft(
        date=movement.date,
        description=_inventory_description("Venta de Inventario", movement),
        movements=(
            Movement.debit_line(COST_OF_SALES_ACCOUNT, movement.total_cost),
            Movement.credit_line(INVENTORY_ACCOUNT, movement.total_cost),
        ),
        reference_type=ReferenceType.INVENTORY,
        reference_id=movement.id,
    )


def post_inventory_adjustment(movement: InventoryMovement) -> EntryDraft:
    """Book a stock count difference against other income or other expenses."""
    if movement.total_cost == ZERO:
        raise ValidationError(f"Inventory movement {movement.id}: adjustment of zero")
    amount = abs(movement.total_cost)
    if movement.total_cost > ZERO:
        movements = (
            Movement.debit_line(INVENTORY_ACCOUNT, amount),
            Movement.credit_line(OTHER_INCOME_ACCOUNT, amount),
        )
    else:
        movements = (
            Movement.debit_line(OTHER_EXPENSE_ACCOUNT, amount),
            Movement.credit_line(INVENTORY_ACCOUNT, amount),
        )
    return EntryDraft(
        date=movement.date,
        description=_inventory_description("Ajuste de Inventario", movement),
        movements=movements,
        reference_type=ReferenceType.INVENTORY,
        reference_id=movement.id,
    )
