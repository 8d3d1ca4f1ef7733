from __future__ import annotations

from typing import Any

from pos_client.http.client import ApiClient
from pos_client.models import PurchaseOrder, Supplier, SupplierPayment, parse_list

from ._params import compact_params


class SupplierService:
    """Suppliers, their purchase orders and the payments made against them."""

    base_path = "/api/suppliers"

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    # ---- suppliers ----

    async def list_suppliers(self) -> list[Supplier]:
        return parse_list(Supplier, await self.client.get(f"{self.base_path}/suppliers/"))

    async def get_supplier(self, supplier_id: int) -> Supplier:
        return Supplier.model_validate(await self.client.get(f"{self.base_path}/suppliers/{supplier_id}/"))

    async def create_supplier(self, supplier: dict[str, Any]) -> Supplier:
        return Supplier.model_validate(await self.client.post(f"{self.base_path}/suppliers/", supplier))

    async def update_supplier(self, supplier_id: int, supplier: dict[str, Any]) -> Supplier:
        body = await self.client.put(f"{self.base_path}/suppliers/{supplier_id}/", supplier)
        return Supplier.model_validate(body)

    async def delete_supplier(self, supplier_id: int) -> None:
        await self.client.delete(f"{self.base_path}/suppliers/{supplier_id}/")

    async def supplier_stats(self) -> dict[str, Any]:
        return await self.client.get(f"{self.base_path}/suppliers/stats/")

    async def supplier_purchase_orders(self, supplier_id: int) -> list[PurchaseOrder]:
        rows = await self.client.get(f"{self.base_path}/suppliers/{supplier_id}/purchase-orders/")
        return parse_list(PurchaseOrder, rows)

    async def supplier_payments(self, supplier_id: int) -> list[SupplierPayment]:
        rows = await self.client.get(f"{self.base_path}/suppliers/{supplier_id}/payments/")
        return parse_list(SupplierPayment, rows)

    # ---- purchase orders ----

    async def list_purchase_orders(
        self,
        *,
        status: str | None = None,
        supplier: int | None = None,
        search: str | None = None,
    ) -> list[PurchaseOrder]:
        params = compact_params(status=status, supplier=supplier, search=search)
        rows = await self.client.get(f"{self.base_path}/purchase-orders/", params=params or None)
        return parse_list(PurchaseOrder, rows)

    async def get_purchase_order(self, po_id: int) -> PurchaseOrder:
        body = await self.client.get(f"{self.base_path}/purchase-orders/{po_id}/")
        return PurchaseOrder.model_validate(body)

    async def create_purchase_order(self, po: dict[str, Any]) -> PurchaseOrder:
        if not po.get("items"):
            raise ValueError("a purchase order needs at least one item")
        body = await self.client.post(f"{self.base_path}/purchase-orders/", po)
        return PurchaseOrder.model_validate(body)

    async def update_purchase_order(self, po_id: int, po: dict[str, Any]) -> PurchaseOrder:
        body = await self.client.put(f"{self.base_path}/purchase-orders/{po_id}/", po)
        return PurchaseOrder.model_validate(body)

    async def delete_purchase_order(self, po_id: int) -> None:
        await self.client.delete(f"{self.base_path}/purchase-orders/{po_id}/")

    async def purchase_order_stats(self) -> dict[str, Any]:
        return await self.client.get(f"{self.base_path}/purchase-orders/stats/")

    async def receive_items(self, po_id: int, items: list[dict[str, int]]) -> dict[str, Any]:
        """``items`` is ``[{"po_item_id": ..., "quantity": ...}, ...]``."""
        return await self.client.post(
            f"{self.base_path}/purchase-orders/{po_id}/receive-items/", {"items": items}
        )

    async def cancel_purchase_order(self, po_id: int) -> dict[str, Any]:
        return await self.client.post(f"{self.base_path}/purchase-orders/{po_id}/cancel/")

    async def mark_ordered(self, po_id: int) -> dict[str, Any]:
        return await self.client.post(f"{self.base_path}/purchase-orders/{po_id}/mark-ordered/")

    # ---- payments ----

    async def list_payments(
        self, *, supplier: int | None = None, payment_type: str | None = None
    ) -> list[SupplierPayment]:
        params = compact_params(supplier=supplier, payment_type=payment_type)
        rows = await self.client.get(f"{self.base_path}/payments/", params=params or None)
        return parse_list(SupplierPayment, rows)

    async def get_payment(self, payment_id: int) -> SupplierPayment:
        body = await self.client.get(f"{self.base_path}/payments/{payment_id}/")
        return SupplierPayment.model_validate(body)

    async def create_payment(self, payment: dict[str, Any]) -> SupplierPayment:
        body = await self.client.post(f"{self.base_path}/payments/", payment)
        return SupplierPayment.model_validate(body)

    async def update_payment(self, payment_id: int, payment: dict[str, Any]) -> SupplierPayment:
        body = await self.client.put(f"{self.base_path}/payments/{payment_id}/", payment)
        return SupplierPayment.model_validate(body)

    async def delete_payment(self, payment_id: int) -> None:
        await self.client.delete(f"{self.base_path}/payments/{payment_id}/")
