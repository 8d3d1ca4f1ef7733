from __future__ import annotations

from typing import Any

from pos_client.calculations import sales as calc
from pos_client.models import Bill

from .sales import BillService


class SalesReportService:
    """Sales figures over the bills matching a filter; every call fetches fresh bills."""

    def __init__(self, bills: BillService) -> None:
        self.bills = bills

    async def _fetch(self, filters: dict[str, Any] | None) -> list[Bill]:
        return await self.bills.list_bills(**(filters or {}))

    async def analytics(self, filters: dict[str, Any] | None = None) -> calc.SalesAnalytics:
        return calc.sales_analytics(await self._fetch(filters))

    async def top_customers(self, filters: dict[str, Any] | None = None, limit: int = 5) -> list[dict[str, Any]]:
        return calc.top_customers(await self._fetch(filters), limit=limit)

    async def top_products(self, filters: dict[str, Any] | None = None, limit: int = 5) -> list[dict[str, Any]]:
        return calc.top_products(await self._fetch(filters), limit=limit)

    async def payment_type_distribution(self, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        return calc.payment_type_distribution(await self._fetch(filters))

    async def revenue_by_date(self, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        return calc.revenue_by_date(await self._fetch(filters))

    async def profit_loss(self, filters: dict[str, Any] | None = None) -> calc.ProfitLoss:
        return calc.profit_loss(await self._fetch(filters))

    async def product_profit_breakdown(
        self, filters: dict[str, Any] | None = None, limit: int = 10
    ) -> list[dict[str, Any]]:
        return calc.product_profit_breakdown(await self._fetch(filters), limit=limit)
