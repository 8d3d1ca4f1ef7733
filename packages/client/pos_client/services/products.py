from __future__ import annotations

from pathlib import Path
from typing import Any, BinaryIO

from pos_client.http.client import ApiClient
from pos_client.models import (
    Category,
    ImportResult,
    Product,
    ProductImage,
    StockChange,
    StockMovement,
    parse_list,
)

from ._params import compact_params


class ProductService:
    base_path = "/api/inventory"

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    # ---- products ----

    async def list_products(self) -> list[Product]:
        return parse_list(Product, await self.client.get(f"{self.base_path}/products/"))

    async def list_products_filtered(
        self,
        *,
        search: str | None = None,
        category: int | None = None,
        status: str | None = None,
        ordering: str | None = None,
    ) -> list[Product]:
        params = compact_params(search=search, category=category, status=status, ordering=ordering)
        rows = await self.client.get(f"{self.base_path}/products/", params=params or None)
        return parse_list(Product, rows)

    async def get_product(self, product_id: int) -> Product:
        return Product.model_validate(await self.client.get(f"{self.base_path}/products/{product_id}/"))

    async def create_product(self, product: dict[str, Any]) -> Product:
        return Product.model_validate(await self.client.post(f"{self.base_path}/products/", product))

    async def update_product(self, product_id: int, product: dict[str, Any]) -> Product:
        body = await self.client.put(f"{self.base_path}/products/{product_id}/", product)
        return Product.model_validate(body)

    async def patch_product(self, product_id: int, changes: dict[str, Any]) -> Product:
        body = await self.client.patch(f"{self.base_path}/products/{product_id}/", changes)
        return Product.model_validate(body)

    async def delete_product(self, product_id: int) -> None:
        await self.client.delete(f"{self.base_path}/products/{product_id}/")

    # ---- categories ----

    async def list_categories(self) -> list[Category]:
        return parse_list(Category, await self.client.get(f"{self.base_path}/categories/"))

    async def create_category(self, name: str, description: str | None = None) -> Category:
        payload = compact_params(name=name, description=description)
        return Category.model_validate(await self.client.post(f"{self.base_path}/categories/", payload))

    async def delete_category(self, category_id: int) -> None:
        await self.client.delete(f"{self.base_path}/categories/{category_id}/")

    # ---- images ----

    async def upload_product_image(
        self, product_id: int, image: BinaryIO, filename: str = "image.jpg"
    ) -> ProductImage:
        body = await self.client.post_form(
            f"{self.base_path}/product-images/",
            data={"product": str(product_id)},
            files={"image": (filename, image)},
        )
        return ProductImage.model_validate(body)

    async def list_product_images(self, product_id: int) -> list[ProductImage]:
        rows = await self.client.get(f"{self.base_path}/products/{product_id}/images/")
        return parse_list(ProductImage, rows)

    async def delete_product_image(self, image_id: int) -> None:
        await self.client.delete(f"{self.base_path}/product-images/{image_id}/")

    # ---- stock ----

    async def add_stock(self, product_id: int, quantity: int, reason: str | None = None) -> StockChange:
        body = await self.client.post(
            f"{self.base_path}/products/{product_id}/add-stock/",
            compact_params(quantity=quantity, reason=reason),
        )
        return StockChange.model_validate(body)

    async def remove_stock(self, product_id: int, quantity: int, reason: str | None = None) -> StockChange:
        body = await self.client.post(
            f"{self.base_path}/products/{product_id}/remove-stock/",
            compact_params(quantity=quantity, reason=reason),
        )
        return StockChange.model_validate(body)

    async def list_stock_movements(
        self, product_id: int | None = None, movement_type: str | None = None
    ) -> list[StockMovement]:
        params = compact_params(product=product_id, type=movement_type)
        rows = await self.client.get(f"{self.base_path}/stock-movements/", params=params or None)
        return parse_list(StockMovement, rows)

    async def product_stock_history(self, product_id: int) -> list[StockMovement]:
        rows = await self.client.get(f"{self.base_path}/products/{product_id}/stock-history/")
        return parse_list(StockMovement, rows)

    # ---- csv ----

    async def export_products_csv(self, dest: str | Path | None = None) -> bytes:
        content = await self.client.get_blob(f"{self.base_path}/products/export-csv/")
        if dest is not None:
            path = Path(dest)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        return content

    async def import_products_csv(self, csv_file: BinaryIO, filename: str = "products.csv") -> ImportResult:
        body = await self.client.post_form(
            f"{self.base_path}/products/import-csv/",
            files={"file": (filename, csv_file, "text/csv")},
        )
        return ImportResult.model_validate(body)
