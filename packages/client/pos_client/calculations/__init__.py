from pos_client.calculations.billing import BillLine, BillTotals, bill_totals, purchase_order_total
from pos_client.calculations.inventory import (
    calculate_inventory_stats,
    filter_bills,
    filter_products,
    sort_products,
    stock_status,
)

__all__ = [
    "BillLine",
    "BillTotals",
    "bill_totals",
    "purchase_order_total",
    "calculate_inventory_stats",
    "filter_bills",
    "filter_products",
    "sort_products",
    "stock_status",
]
