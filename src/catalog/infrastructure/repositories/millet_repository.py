# src/catalog/infrastructure/repositories/millet_repository.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from src.shared.database import Database

_ACTIVE_PRODUCTS = """
    SELECT
        mp.id,
        mp.category_id,
        mc.name AS category_name,
        mp.name,
        mp.description,
        mp.price,
        mp.sku,
        mp.stock_quantity,
        mp.image_url,
        mp.public_id,
        mp.is_active,
        mp.nutritional_info_json
    FROM millet_products mp
    LEFT JOIN millet_categories mc ON mp.category_id = mc.id
    WHERE mp.is_active = 1
"""


class MilletRepository:
    def __init__(self, db: Database) -> None:
        self._db = db

    async def list_active(self) -> List[Dict[str, Any]]:
        return await self._db.fetch_all(_ACTIVE_PRODUCTS + " ORDER BY mp.id DESC")

    async def get_active(self, product_id: int) -> Optional[Dict[str, Any]]:
        return await self._db.fetch_one(_ACTIVE_PRODUCTS + " AND mp.id = :product_id", {"product_id": product_id})
