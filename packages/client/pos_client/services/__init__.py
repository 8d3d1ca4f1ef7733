from pos_client.services.products import ProductService
from pos_client.services.reports import SalesReportService
from pos_client.services.sales import BillService, CustomerService
from pos_client.services.staff import StaffService
from pos_client.services.suppliers import SupplierService

__all__ = [
    "ProductService",
    "BillService",
    "CustomerService",
    "StaffService",
    "SupplierService",
    "SalesReportService",
]
