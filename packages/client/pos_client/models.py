from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

StockStatus = Literal["all", "in_stock", "low_stock", "out_of_stock"]
AttendanceStatus = Literal["Present", "Absent", "Leave"]


class _Record(BaseModel):
    # backend serializers grow fields faster than this client
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class TokenPair(_Record):
    access: str
    refresh: str | None = None


class TokenPayload(_Record):
    token_type: str | None = None
    exp: int
    iat: int | None = None
    jti: str | None = None
    user_id: int
    tenant_id: int | None = None
    role: str | None = None


class UserInfo(_Record):
    user_id: int
    email: str
    tenant_id: int | None = None
    role: str | None = None


# ---- inventory ----


class Category(_Record):
    category_id: int
    name: str
    description: str | None = None
    status: str | None = None
    created_at: str | None = None


class Product(_Record):
    product_id: int | None = None
    name: str
    sku: str
    brand: str | None = None
    size: str | None = None
    description: str | None = None
    unit: str | None = None
    category: int | None = None
    purchase_price: float = 0.0
    selling_price: float = 0.0
    mrp: float | None = None
    current_stock: int = 0
    low_stock_alert: float | None = None
    hsn_code: str | None = None
    gst_percent: float = 0.0
    status: str = "active"
    created_at: str | None = None


class ProductImage(_Record):
    image_id: int
    product: int
    image: str
    uploaded_at: str | None = None


class StockMovement(_Record):
    movement_id: int
    product: int
    type: Literal["IN", "OUT", "SALE", "RETURN"]
    quantity: int
    reference_type: str | None = None
    reason: str | None = None
    date: str


class StockChange(_Record):
    message: str
    new_stock: int


class ImportResult(_Record):
    message: str
    success_count: int = 0
    error_count: int = 0
    errors: list[str] = Field(default_factory=list)


class InventoryStats(BaseModel):
    total_products: int = 0
    total_value: float = 0.0
    low_stock_count: int = 0
    out_of_stock_count: int = 0
    total_stock_movements: int = 0


# ---- sales ----


class BillItem(_Record):
    bill_item_id: int | None = None
    product: int
    product_name: str | None = None
    quantity: int
    price: float
    discount: float = 0.0
    subtotal: float | None = None
    cost_price: float | None = None


class Bill(_Record):
    bill_id: int
    date: str
    customer: int | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    created_by: int | None = None
    item_total: float = 0.0
    bill_discount: float = 0.0
    gst_total: float = 0.0
    grand_total: float = 0.0
    payment_type: str | None = None
    items: list[BillItem] = Field(default_factory=list)


class Customer(_Record):
    customer_id: int
    name: str
    phone: str | None = None
    email: str | None = None
    gst_number: str | None = None
    type: str | None = None
    spending_balance: float | None = None
    created_at: str | None = None


# ---- staff ----


class Staff(_Record):
    staff_id: int
    name: str
    position: str
    phone: str
    email: str | None = None
    joining_date: str | None = Field(default=None, alias="joiningDate")
    salary: float = 0.0
    aadhaar_file_name: str | None = Field(default=None, alias="aadhaarFileName")
    is_active: bool = True
    created_at: str | None = None
    updated_at: str | None = None


class AttendanceRecord(_Record):
    attendance_id: int
    staff_id: int = Field(alias="staffId")
    staff_name: str | None = None
    date: str
    status: AttendanceStatus
    created_at: str | None = None


# ---- suppliers ----


class Supplier(_Record):
    supplier_id: int | None = None
    name: str
    contact_person: str | None = None
    email: str | None = None
    phone: str | None = None
    status: str = "active"


class PurchaseOrderItem(_Record):
    po_item_id: int | None = None
    product: int
    product_name: str | None = None
    product_sku: str | None = None
    quantity_ordered: int
    quantity_received: int = 0
    unit_price: float
    tax_percent: float = 0.0
    discount_percent: float = 0.0
    subtotal: float | None = None


class PurchaseOrder(_Record):
    po_id: int | None = None
    po_number: str
    supplier: int
    supplier_name: str | None = None
    status: str = "draft"
    order_date: str | None = None
    expected_delivery_date: str | None = None
    total_amount: float | None = None
    items_count: int | None = None
    items: list[PurchaseOrderItem] = Field(default_factory=list)


class SupplierPayment(_Record):
    payment_id: int | None = None
    supplier: int
    supplier_name: str | None = None
    purchase_order: int | None = None
    amount: float
    payment_type: str
    payment_date: str
    reference_number: str | None = None
    notes: str | None = None


def parse_list(model: type[BaseModel], rows: Any) -> list[Any]:
    if not isinstance(rows, list):
        raise ValueError(f"{model.__name__} listing must be a JSON list")
    return [model.model_validate(row) for row in rows]
