from __future__ import annotations

from typing import Any

from pos_client.http.client import ApiClient
from pos_client.models import Bill, Customer, parse_list

from ._params import compact_params


class BillService:
    base_path = "/api/sales/bills/"

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def list_bills(
        self,
        *,
        start_date: str | None = None,
        end_date: str | None = None,
        customer: int | None = None,
        payment_type: str | None = None,
        min_amount: float | None = None,
        max_amount: float | None = None,
    ) -> list[Bill]:
        params = compact_params(
            start_date=start_date,
            end_date=end_date,
            customer=customer,
            payment_type=payment_type,
            min_amount=min_amount,
            max_amount=max_amount,
        )
        return parse_list(Bill, await self.client.get(self.base_path, params=params or None))

    async def get_bill(self, bill_id: int) -> Bill:
        return Bill.model_validate(await self.client.get(f"{self.base_path}{bill_id}/"))

    async def create_bill(
        self,
        items: list[dict[str, Any]],
        *,
        customer_id: int | None = None,
        bill_discount: float | None = None,
        payment_type: str | None = None,
    ) -> Bill:
        if not items:
            raise ValueError("a bill needs at least one item")
        payload = compact_params(
            customer_id=customer_id,
            bill_discount=bill_discount,
            payment_type=payment_type,
        )
        payload["items"] = items
        return Bill.model_validate(await self.client.post(self.base_path, payload))


class CustomerService:
    base_path = "/sales/customers/"

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def list_customers(self) -> list[Customer]:
        return parse_list(Customer, await self.client.get(self.base_path))

    async def get_customer(self, customer_id: int) -> Customer:
        return Customer.model_validate(await self.client.get(f"{self.base_path}{customer_id}/"))

    async def create_customer(
        self,
        name: str,
        *,
        phone: str | None = None,
        email: str | None = None,
        gst_number: str | None = None,
        type: str | None = None,
    ) -> Customer:
        payload = compact_params(name=name, phone=phone, email=email, gst_number=gst_number, type=type)
        return Customer.model_validate(await self.client.post(self.base_path, payload))

    async def update_customer(self, customer_id: int, changes: dict[str, Any]) -> Customer:
        return Customer.model_validate(await self.client.patch(f"{self.base_path}{customer_id}/", changes))

    async def delete_customer(self, customer_id: int) -> dict[str, Any]:
        return await self.client.delete(f"{self.base_path}{customer_id}/")
