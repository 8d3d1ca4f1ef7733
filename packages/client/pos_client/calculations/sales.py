"""Sales report figures computed from fetched bills."""

from __future__ import annotations

import io
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import pandas as pd

from pos_client.models import Bill

REPORT_COLUMNS = [
    "Bill ID",
    "Date",
    "Customer",
    "Items Count",
    "Item Total",
    "GST",
    "Discount",
    "Grand Total",
    "Payment Type",
]


@dataclass(frozen=True)
class SalesAnalytics:
    total_revenue: float
    total_bills: int
    average_order_value: float
    total_customers: int


@dataclass(frozen=True)
class ProfitLoss:
    total_revenue: float
    total_cost: float
    gross_profit: float
    profit_margin: float
    total_bills: int


def bills_frame(bills: Sequence[Bill]) -> pd.DataFrame:
    rows = [
        {
            "bill_id": b.bill_id,
            "date": b.date,
            "customer": b.customer,
            "customer_name": b.customer_name,
            "payment_type": b.payment_type,
            "grand_total": float(b.grand_total),
        }
        for b in bills
    ]
    return pd.DataFrame(
        rows, columns=["bill_id", "date", "customer", "customer_name", "payment_type", "grand_total"]
    )


def items_frame(bills: Sequence[Bill]) -> pd.DataFrame:
    rows = [
        {
            "bill_id": b.bill_id,
            "product": item.product,
            "product_name": item.product_name or "Unknown",
            "quantity": item.quantity,
            "revenue": float(item.subtotal or 0),
            "cost": float(item.cost_price or 0) * item.quantity,
        }
        for b in bills
        for item in b.items
    ]
    return pd.DataFrame(rows, columns=["bill_id", "product", "product_name", "quantity", "revenue", "cost"])


def sales_analytics(bills: Sequence[Bill]) -> SalesAnalytics:
    df = bills_frame(bills)
    total = float(df["grand_total"].sum())
    count = len(df)
    return SalesAnalytics(
        total_revenue=total,
        total_bills=count,
        average_order_value=total / count if count else 0.0,
        total_customers=int(df["customer"].dropna().nunique()),
    )


def top_customers(bills: Sequence[Bill], limit: int = 5) -> list[dict[str, Any]]:
    df = bills_frame(bills).dropna(subset=["customer"]).copy()
    if df.empty:
        return []
    df["customer_name"] = df["customer_name"].fillna("Unknown")
    grouped = (
        df.groupby("customer", sort=False)
        .agg(
            customer_name=("customer_name", "first"),
            total_spent=("grand_total", "sum"),
            bills_count=("bill_id", "count"),
        )
        .reset_index()
        .rename(columns={"customer": "customer_id"})
        .sort_values("total_spent", ascending=False, kind="stable")
        .head(limit)
    )
    grouped["customer_id"] = grouped["customer_id"].astype(int)
    return _records(grouped)


def top_products(bills: Sequence[Bill], limit: int = 5) -> list[dict[str, Any]]:
    df = items_frame(bills)
    if df.empty:
        return []
    grouped = (
        df.groupby("product", sort=False)
        .agg(
            product_name=("product_name", "first"),
            quantity_sold=("quantity", "sum"),
            revenue=("revenue", "sum"),
        )
        .reset_index()
        .rename(columns={"product": "product_id"})
        .sort_values("revenue", ascending=False, kind="stable")
        .head(limit)
    )
    return _records(grouped)


def payment_type_distribution(bills: Sequence[Bill]) -> list[dict[str, Any]]:
    df = bills_frame(bills)
    if df.empty:
        return []
    df["payment_type"] = df["payment_type"].fillna("").replace("", "Not Specified")
    grouped = (
        df.groupby("payment_type", sort=False)
        .agg(count=("bill_id", "count"), total_amount=("grand_total", "sum"))
        .reset_index()
        .sort_values("total_amount", ascending=False, kind="stable")
    )
    return _records(grouped)


def revenue_by_date(bills: Sequence[Bill]) -> list[dict[str, Any]]:
    df = bills_frame(bills)
    if df.empty:
        return []
    df["day"] = pd.to_datetime(df["date"], utc=True, format="ISO8601").dt.strftime("%Y-%m-%d")
    grouped = (
        df.groupby("day")
        .agg(revenue=("grand_total", "sum"), bills_count=("bill_id", "count"))
        .reset_index()
        .rename(columns={"day": "date"})
        .sort_values("date")
    )
    return _records(grouped)


def profit_loss(bills: Sequence[Bill]) -> ProfitLoss:
    df = items_frame(bills)
    revenue = float(df["revenue"].sum())
    cost = float(df["cost"].sum())
    profit = revenue - cost
    return ProfitLoss(
        total_revenue=revenue,
        total_cost=cost,
        gross_profit=profit,
        profit_margin=(profit / revenue * 100.0) if revenue > 0 else 0.0,
        total_bills=len(bills),
    )


def product_profit_breakdown(bills: Sequence[Bill], limit: int = 10) -> list[dict[str, Any]]:
    df = items_frame(bills)
    if df.empty:
        return []
    grouped = (
        df.groupby("product", sort=False)
        .agg(
            product_name=("product_name", "first"),
            quantity_sold=("quantity", "sum"),
            revenue=("revenue", "sum"),
            cost=("cost", "sum"),
        )
        .reset_index()
        .rename(columns={"product": "product_id"})
    )
    grouped["profit"] = grouped["revenue"] - grouped["cost"]
    grouped["margin"] = (grouped["profit"] / grouped["revenue"] * 100.0).where(grouped["revenue"] > 0, 0.0)
    grouped = grouped.sort_values("profit", ascending=False, kind="stable").head(limit)
    return _records(grouped)


def sales_report_csv(bills: Sequence[Bill]) -> str:
    rows = [
        [
            b.bill_id,
            b.date,
            b.customer_name or "Walk-in Customer",
            len(b.items),
            f"{float(b.item_total):.2f}",
            f"{float(b.gst_total):.2f}",
            f"{float(b.bill_discount):.2f}",
            f"{float(b.grand_total):.2f}",
            b.payment_type or "N/A",
        ]
        for b in bills
    ]
    buf = io.StringIO()
    pd.DataFrame(rows, columns=REPORT_COLUMNS).to_csv(buf, index=False, lineterminator="\n")
    return buf.getvalue()


def _records(df: pd.DataFrame) -> list[dict[str, Any]]:
    # numpy scalars -> plain python for JSON / equality in callers
    return [{k: (v.item() if hasattr(v, "item") else v) for k, v in row.items()} for row in df.to_dict("records")]
