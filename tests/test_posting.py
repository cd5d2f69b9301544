"""Tests for document posting rules."""

from datetime import date
from decimal import Decimal

import pytest

from obraledger.domain.entities import ReferenceType, Side
from obraledger.domain.errors import ValidationError
from obraledger.domain.posting import (
    Expense,
    InventoryMovement,
    Payment,
    PurchaseInvoice,
    PurchaseOrder,
    SalesInvoice,
    post_expense,
    post_inventory_adjustment,
    post_inventory_sale,
    post_invoice_payment,
    post_purchase_invoice,
    post_purchase_order_receipt,
    post_sales_invoice,
    post_supplier_payment,
)


@pytest.fixture
def invoice():
    return SalesInvoice(
        id=1001,
        invoice_number="F-1001",
        client_name="Constructora Andes",
        date=date(2024, 4, 2),
        subtotal=1000000,
        tax=190000,
        total=1190000,
    )


@pytest.fixture
def order():
    return PurchaseOrder(
        id=31,
        order_number="OC-31",
        supplier_name="Ferretería Sur",
        date=date(2024, 4, 3),
        subtotal=500000,
        tax=95000,
        total=595000,
    )


def _lines(draft):
    return [(m.account_code, m.side, m.amount) for m in draft.movements]


def test_sales_invoice(invoice):
    draft = post_sales_invoice(invoice)

    assert _lines(draft) == [
        ("130000", Side.DEBIT, Decimal("1190000.00")),
        ("410000", Side.CREDIT, Decimal("1000000.00")),
        ("240000", Side.CREDIT, Decimal("190000.00")),
    ]
    assert draft.reference_type is ReferenceType.INVOICE
    assert draft.reference_id == 1001
    assert draft.description == "Factura F-1001 - Constructora Andes"


def test_tax_exempt_invoice_has_no_vat_line():
    exempt = SalesInvoice(
        id=2, invoice_number="F-2", client_name="Municipalidad", date=date(2024, 4, 2),
        subtotal=300000, tax=0, total=300000,
    )
    assert [code for code, _, _ in _lines(post_sales_invoice(exempt))] == ["130000", "410000"]


@pytest.mark.parametrize("method, account", [("transferencia", "120000"), ("efectivo", "110000")])
def test_invoice_payment(invoice, method, account):
    payment = Payment(id=9, date=date(2024, 5, 2), amount=1190000, method=method)

    draft = post_invoice_payment(invoice, payment)

    assert _lines(draft) == [
        (account, Side.DEBIT, Decimal("1190000.00")),
        ("130000", Side.CREDIT, Decimal("1190000.00")),
    ]
    assert draft.reference_type is ReferenceType.PAYMENT
    assert draft.reference_id == 9


def test_overpayment_rejected(invoice):
    payment = Payment(id=9, date=date(2024, 5, 2), amount=2000000)
    with pytest.raises(ValidationError, match="exceeds"):
        post_invoice_payment(invoice, payment)


def test_purchase_order_receipt(order):
    draft = post_purchase_order_receipt(order)

    assert _lines(draft) == [
        ("140000", Side.DEBIT, Decimal("500000.00")),
        ("230000", Side.DEBIT, Decimal("95000.00")),
        ("210000", Side.CREDIT, Decimal("595000.00")),
    ]
    assert draft.reference_type is ReferenceType.PURCHASE_ORDER
    assert draft.reference_id == 31


def test_supplier_payment(order):
    payment = Payment(id=12, date=date(2024, 5, 3), amount=595000, method="cheque")

    draft = post_supplier_payment(order, payment)

    assert _lines(draft) == [
        ("210000", Side.DEBIT, Decimal("595000.00")),
        ("110000", Side.CREDIT, Decimal("595000.00")),
    ]


@pytest.mark.parametrize(
    "category, account",
    [
        ("materials", "510000"),
        ("labor", "510000"),
        ("equipment", "510000"),
        ("administrative", "530000"),
        ("other", "530000"),
        ("sales", "540000"),
        ("financial", "550000"),
    ],
)
def test_expense_account_by_category(category, account):
    expense = Expense(
        id=4, date=date(2024, 4, 10), description="Gasto", category=category, amount=25000
    )

    draft = post_expense(expense)

    assert _lines(draft) == [
        (account, Side.DEBIT, Decimal("25000.00")),
        ("120000", Side.CREDIT, Decimal("25000.00")),
    ]
    assert draft.reference_type is ReferenceType.EXPENSE


def test_expense_description_includes_reference():
    expense = Expense(
        id=5, date=date(2024, 4, 10), description="Combustible", category="equipment",
        amount=40000, payment_method="efectivo", reference="Boleta 889",
    )
    draft = post_expense(expense)
    assert draft.description == "Combustible - Boleta 889"
    assert draft.movements[1].account_code == "110000"


def test_unknown_expense_category():
    with pytest.raises(ValidationError, match="category"):
        Expense(id=6, date=date(2024, 4, 10), description="X", category="travel", amount=100)


def test_document_totals_must_add_up():
    with pytest.raises(ValidationError, match="does not equal"):
        SalesInvoice(
            id=3, invoice_number="F-3", client_name="Cliente", date=date(2024, 4, 2),
            subtotal=100000, tax=19000, total=120000,
        )


def test_drafts_record_as_balanced_entries(ledger_service, statement_service, invoice, order):
    payment = Payment(id=9, date=date(2024, 5, 2), amount=1190000)

    for draft in (
        post_sales_invoice(invoice),
        post_purchase_order_receipt(order),
        post_invoice_payment(invoice, payment),
    ):
        ledger_service.record_draft(draft)

    assert statement_service.trial_balance(date(2024, 5, 31)).is_balanced
    assert statement_service.balance_sheet(date(2024, 5, 31)).is_balanced


def test_document_amounts_must_be_whole_cents():
    with pytest.raises(ValidationError, match="fractions of a cent"):
        Payment(id=10, date=date(2024, 5, 2), amount="1000.005")


def _purchase_invoice(category, account_code=None, tax=57000):
    return PurchaseInvoice(
        id=77,
        invoice_number="FC-77",
        supplier_name="Arriendos Grúa Ltda",
        date=date(2024, 4, 8),
        category=category,
        subtotal=300000,
        tax=tax,
        total=300000 + tax,
        account_code=account_code,
    )


@pytest.mark.parametrize(
    "category, account_code, debit_account",
    [
        ("materials", None, "140000"),
        ("materials", "150000", "140000"),
        ("equipment", None, "150000"),
        ("equipment", "151000", "151000"),
        ("services", None, "530000"),
        ("expenses", "520000", "520000"),
    ],
)
def test_purchase_invoice_debit_account(category, account_code, debit_account):
    draft = post_purchase_invoice(_purchase_invoice(category, account_code))

    assert _lines(draft) == [
        (debit_account, Side.DEBIT, Decimal("300000.00")),
        ("230000", Side.DEBIT, Decimal("57000.00")),
        ("210000", Side.CREDIT, Decimal("357000.00")),
    ]
    assert draft.reference_type is ReferenceType.PURCHASE_INVOICE
    assert draft.reference_id == 77
    assert draft.description == "Factura de Compra FC-77 - Arriendos Grúa Ltda"


def test_exempt_purchase_invoice_has_no_vat_line():
    draft = post_purchase_invoice(_purchase_invoice("services", tax=0))
    assert [code for code, _, _ in _lines(draft)] == ["530000", "210000"]


def test_purchase_invoice_unknown_category():
    with pytest.raises(ValidationError, match="category"):
        _purchase_invoice("travel")


def test_inventory_sale():
    movement = InventoryMovement(
        id=40, date=date(2024, 4, 20), product_name="Cemento 25kg", total_cost=84000,
        document_number="GD-40",
    )

    draft = post_inventory_sale(movement)

    assert _lines(draft) == [
        ("510000", Side.DEBIT, Decimal("84000.00")),
        ("140000", Side.CREDIT, Decimal("84000.00")),
    ]
    assert draft.reference_type is ReferenceType.INVENTORY
    assert draft.reference_id == 40
    assert draft.description == "Venta de Inventario - Cemento 25kg (GD-40)"


def test_inventory_sale_requires_positive_cost():
    movement = InventoryMovement(
        id=41, date=date(2024, 4, 20), product_name="Arena", total_cost=-1
    )
    with pytest.raises(ValidationError, match="greater than zero"):
        post_inventory_sale(movement)


@pytest.mark.parametrize(
    "total_cost, expected",
    [
        ("12500", [("140000", Side.DEBIT), ("430000", Side.CREDIT)]),
        ("-12500", [("560000", Side.DEBIT), ("140000", Side.CREDIT)]),
    ],
)
def test_inventory_adjustment_direction(total_cost, expected):
    movement = InventoryMovement(
        id=42, date=date(2024, 4, 30), product_name="Fierro 12mm", total_cost=total_cost
    )

    draft = post_inventory_adjustment(movement)

    assert [(code, side) for code, side, _ in _lines(draft)] == expected
    assert all(m.amount == Decimal("12500.00") for m in draft.movements)
    assert draft.description == "Ajuste de Inventario - Fierro 12mm"


def test_inventory_adjustment_of_zero_rejected():
    movement = InventoryMovement(
        id=43, date=date(2024, 4, 30), product_name="Clavos", total_cost=0
    )
    with pytest.raises(ValidationError, match="zero"):
        post_inventory_adjustment(movement)


def test_stock_rules_record_as_balanced_entries(ledger_service, statement_service):
    sale = InventoryMovement(
        id=1, date=date(2024, 4, 20), product_name="Cemento", total_cost=84000
    )
    shrinkage = InventoryMovement(
        id=2, date=date(2024, 4, 30), product_name="Cemento", total_cost=-6000
    )
    drafts = [
        post_purchase_invoice(_purchase_invoice("materials")),
        post_purchase_invoice(_purchase_invoice("services")),
        post_inventory_sale(sale),
        post_inventory_adjustment(shrinkage),
    ]
    for draft in drafts:
        entry = ledger_service.record_draft(draft)
        assert entry.total_debit == entry.total_credit

    as_of = date(2024, 4, 30)
    assert statement_service.trial_balance(as_of).is_balanced
    balance_sheet = statement_service.balance_sheet(as_of)
    assert balance_sheet.is_balanced
    inventory = {line.account_code: line.amount for line in balance_sheet.assets}["140000"]
    assert inventory == Decimal("210000.00")
    stock_entries = ledger_service.list_entries(reference_type=ReferenceType.INVENTORY)
    assert {entry.reference_id for entry in stock_entries} == {1, 2}
