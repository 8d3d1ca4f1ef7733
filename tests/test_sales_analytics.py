from __future__ import annotations

import pytest

from pos_client.calculations.sales import (
    REPORT_COLUMNS,
    payment_type_distribution,
    product_profit_breakdown,
    profit_loss,
    revenue_by_date,
    sales_analytics,
    sales_report_csv,
    top_customers,
    top_products,
)
from pos_client.models import Bill


def _bills() -> list[Bill]:
    rows = [
        {
            "bill_id": 1,
            "date": "2024-03-14T10:00:00Z",
            "customer": 10,
            "customer_name": "Ravi",
            "payment_type": "cash",
            "item_total": 200,
            "gst_total": 36,
            "bill_discount": 6,
            "grand_total": 230,
            "items": [
                {"product": 1, "product_name": "Rice", "quantity": 2, "price": 100, "subtotal": 200, "cost_price": 80},
            ],
        },
        {
            "bill_id": 2,
            "date": "2024-03-14T15:00:00Z",
            "customer": 11,
            "customer_name": "Anita",
            "payment_type": "upi",
            "grand_total": 70,
            "items": [
                {"product": 2, "product_name": "Soap", "quantity": 2, "price": 35, "subtotal": 70, "cost_price": 20},
            ],
        },
        {
            "bill_id": 3,
            "date": "2024-03-15T09:00:00Z",
            "customer": 10,
            "customer_name": "Ravi",
            "payment_type": "cash",
            "grand_total": 100,
            "items": [
                {"product": 1, "product_name": "Rice", "quantity": 1, "price": 100, "subtotal": 100, "cost_price": 80},
            ],
        },
        {
            "bill_id": 4,
            "date": "2024-03-15T11:00:00Z",
            "grand_total": 50,
            "items": [],
        },
    ]
    return [Bill.model_validate(r) for r in rows]


def test_sales_analytics_summary() -> None:
    out = sales_analytics(_bills())
    assert out.total_revenue == 450.0
    assert out.total_bills == 4
    assert out.average_order_value == 112.5
    assert out.total_customers == 2


def test_empty_bill_list_yields_zeroes() -> None:
    out = sales_analytics([])
    assert (out.total_revenue, out.total_bills, out.average_order_value, out.total_customers) == (0.0, 0, 0.0, 0)
    assert top_customers([]) == []
    assert top_products([]) == []
    assert revenue_by_date([]) == []
    assert profit_loss([]).profit_margin == 0.0


def test_top_customers_ignores_walk_ins() -> None:
    out = top_customers(_bills())
    assert out == [
        {"customer_id": 10, "customer_name": "Ravi", "total_spent": 330.0, "bills_count": 2},
        {"customer_id": 11, "customer_name": "Anita", "total_spent": 70.0, "bills_count": 1},
    ]


def test_top_products_by_revenue() -> None:
    out = top_products(_bills(), limit=1)
    assert out == [{"product_id": 1, "product_name": "Rice", "quantity_sold": 3, "revenue": 300.0}]


def test_payment_type_distribution_labels_missing_type() -> None:
    out = {row["payment_type"]: (row["count"], row["total_amount"]) for row in payment_type_distribution(_bills())}
    assert out == {"cash": (2, 330.0), "upi": (1, 70.0), "Not Specified": (1, 50.0)}


def test_revenue_by_date_groups_by_day() -> None:
    assert revenue_by_date(_bills()) == [
        {"date": "2024-03-14", "revenue": 300.0, "bills_count": 2},
        {"date": "2024-03-15", "revenue": 150.0, "bills_count": 2},
    ]


def test_profit_loss_and_breakdown() -> None:
    pl = profit_loss(_bills())
    assert pl.total_revenue == 370.0
    assert pl.total_cost == 280.0
    assert pl.gross_profit == 90.0
    assert pl.profit_margin == pytest.approx(90.0 / 370.0 * 100.0)
    assert pl.total_bills == 4

    breakdown = product_profit_breakdown(_bills())
    assert [row["product_id"] for row in breakdown] == [1, 2]
    assert breakdown[0]["profit"] == 60.0
    assert breakdown[1]["margin"] == pytest.approx(30.0 / 70.0 * 100.0)


def test_sales_report_csv_layout() -> None:
    lines = sales_report_csv(_bills()).splitlines()
    assert lines[0] == ",".join(REPORT_COLUMNS)
    assert lines[1] == "1,2024-03-14T10:00:00Z,Ravi,1,200.00,36.00,6.00,230.00,cash"
    assert lines[4] == "4,2024-03-15T11:00:00Z,Walk-in Customer,0,0.00,0.00,0.00,50.00,N/A"
