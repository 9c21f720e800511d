from __future__ import annotations

from fastapi import APIRouter, Depends

from src.catalog.application.services.millet_service import MilletService
from src.dependencies import get_millet_service

router = APIRouter(prefix="/api/millets", tags=["catalog:millets"])


@router.get("/products")
async def list_millet_products(svc: MilletService = Depends(get_millet_service)):
    return await svc.list_products()


@router.get("/products/{product_id}")
async def get_millet_product(product_id: int, svc: MilletService = Depends(get_millet_service)):
    return await svc.get_product(product_id)
