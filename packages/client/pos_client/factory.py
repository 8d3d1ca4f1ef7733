from __future__ import annotations

from dataclasses import dataclass

import httpx
from pos_core.settings import Settings

from pos_client.auth import AuthService
from pos_client.http.client import ApiClient, SessionExpiredHook
from pos_client.services import (
    BillService,
    CustomerService,
    ProductService,
    SalesReportService,
    StaffService,
    SupplierService,
)


@dataclass
class PosServices:
    client: ApiClient
    auth: AuthService
    products: ProductService
    bills: BillService
    customers: CustomerService
    staff: StaffService
    suppliers: SupplierService
    reports: SalesReportService

    async def aclose(self) -> None:
        await self.client.aclose()


def build_services(
    settings: Settings,
    *,
    on_session_expired: SessionExpiredHook | None = None,
    client: httpx.AsyncClient | None = None,
) -> PosServices:
    api = ApiClient.from_settings(settings, on_session_expired=on_session_expired, client=client)
    bills = BillService(api)
    return PosServices(
        client=api,
        auth=AuthService(api, token_path=settings.POS_TOKEN_PATH, logout_path=settings.POS_LOGOUT_PATH),
        products=ProductService(api),
        bills=bills,
        customers=CustomerService(api),
        staff=StaffService(api),
        suppliers=SupplierService(api),
        reports=SalesReportService(bills),
    )
