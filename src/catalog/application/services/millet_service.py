from __future__ import annotations

from typing import Any, Dict

from src.catalog.infrastructure.repositories.millet_repository import MilletRepository
from src.shared.aggregation import as_bool, parse_json_object
from src.shared.exceptions import NotFoundError


def _product_payload(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        **row,
        "is_active": as_bool(row["is_active"]),
        "nutritional_info": parse_json_object(
            row["nutritional_info_json"],
            context={"column": "nutritional_info_json", "product_id": row["id"]},
        ),
    }


class MilletService:
    def __init__(self, repository: MilletRepository) -> None:
        self.repository = repository

    async def list_products(self) -> Dict[str, Any]:
        products = [_product_payload(row) for row in await self.repository.list_active()]
        return {"success": True, "count": len(products), "products": products}

    async def get_product(self, product_id: int) -> Dict[str, Any]:
        row = await self.repository.get_active(product_id)
        if row is None:
            raise NotFoundError("Product not found", code="product_not_found")
        return {"success": True, "product": _product_payload(row)}
