"""Filtering, sorting and summary figures over lists already fetched from the backend."""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable, Sequence
from typing import Literal

from pos_client.models import (
    AttendanceRecord,
    Bill,
    InventoryStats,
    Product,
    PurchaseOrder,
    StockStatus,
)

_NUMERIC_SORT_FIELDS = {"current_stock", "selling_price", "purchase_price"}

BillPeriod = Literal["all", "today", "yesterday", "7days"]


def _threshold(product: Product, default: float = 0) -> float:
    if product.low_stock_alert is None:
        return float(default)
    return float(product.low_stock_alert)


def stock_status(product: Product, default_threshold: float = 0) -> StockStatus:
    stock = product.current_stock or 0
    if stock == 0:
        return "out_of_stock"
    if stock <= _threshold(product, default_threshold):
        return "low_stock"
    return "in_stock"


def calculate_inventory_stats(products: Sequence[Product], default_threshold: float = 0) -> InventoryStats:
    stats = InventoryStats(total_products=len(products))
    for product in products:
        stock = product.current_stock or 0
        stats.total_value += stock * float(product.selling_price or 0)
        status = stock_status(product, default_threshold)
        if status == "out_of_stock":
            stats.out_of_stock_count += 1
        elif status == "low_stock":
            stats.low_stock_count += 1
    return stats


def filter_products(
    products: Iterable[Product],
    *,
    search: str = "",
    category: int | None = None,
    status: str = "all",
    stock: StockStatus = "all",
    default_threshold: float = 0,
) -> list[Product]:
    out = list(products)
    needle = search.strip().lower()
    if needle:
        out = [
            p
            for p in out
            if needle in p.name.lower()
            or needle in p.sku.lower()
            or (p.brand is not None and needle in p.brand.lower())
        ]
    if category is not None:
        out = [p for p in out if p.category == category]
    if status != "all":
        out = [p for p in out if p.status == status]
    if stock != "all":
        out = [p for p in out if stock_status(p, default_threshold) == stock]
    return out


def sort_products(
    products: Iterable[Product], field: str = "name", order: Literal["asc", "desc"] = "asc"
) -> list[Product]:
    def key(p: Product):
        value = getattr(p, field, None)
        if field in _NUMERIC_SORT_FIELDS:
            return float(value or 0)
        if value is None:
            return ""
        return value.lower() if isinstance(value, str) else value

    # sorted() is stable, so ties keep their fetched order in both directions
    return sorted(products, key=key, reverse=(order == "desc"))


def filter_purchase_orders(orders: Iterable[PurchaseOrder], search: str = "") -> list[PurchaseOrder]:
    needle = search.lower()
    return [
        o
        for o in orders
        if needle in o.po_number.lower() or needle in (o.supplier_name or "").lower()
    ]


def recent_attendance(records: Iterable[AttendanceRecord], limit: int = 20) -> list[AttendanceRecord]:
    return sorted(records, key=lambda r: r.date, reverse=True)[:limit]


def _bill_day(bill: Bill) -> dt.date | None:
    try:
        stamp = dt.datetime.fromisoformat(bill.date.replace("Z", "+00:00"))
    except ValueError:
        return None
    # calendar day as seen on this machine
    return stamp.astimezone().date()


def filter_bills(
    bills: Iterable[Bill],
    *,
    period: BillPeriod = "all",
    on_date: dt.date | None = None,
    search: str = "",
    today: dt.date | None = None,
) -> list[Bill]:
    today = today or dt.date.today()
    out = list(bills)
    if period == "today":
        out = [b for b in out if _bill_day(b) == today]
    elif period == "yesterday":
        yesterday = today - dt.timedelta(days=1)
        out = [b for b in out if _bill_day(b) == yesterday]
    elif period == "7days":
        week_ago = today - dt.timedelta(days=7)
        out = [b for b in out if (day := _bill_day(b)) is not None and day >= week_ago]
    if on_date is not None:
        out = [b for b in out if _bill_day(b) == on_date]
    if search:
        needle = search.lower()
        out = [
            b
            for b in out
            if search in str(b.bill_id)
            or needle in (b.customer_name or "").lower()
            or search in (b.customer_phone or "")
        ]
    return out
