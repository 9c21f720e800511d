from __future__ import annotations

from fastapi import APIRouter, Depends

from src.admin.api.schemas import MessageResponse
from src.admin.application.services.user_admin_service import UserAdminService
from src.dependencies import get_user_admin_service, require_admin
from src.shared.security import TokenClaims

router = APIRouter(prefix="/api/admin/users", tags=["admin:users"])


@router.patch("/{user_id}/deactivate", response_model=MessageResponse)
async def deactivate_user(
    user_id: int,
    claims: TokenClaims = Depends(require_admin),
    svc: UserAdminService = Depends(get_user_admin_service),
):
    return await svc.deactivate(acting_user_id=claims.sub, user_id=user_id)


@router.patch("/{user_id}/activate", response_model=MessageResponse)
async def activate_user(
    user_id: int,
    claims: TokenClaims = Depends(require_admin),
    svc: UserAdminService = Depends(get_user_admin_service),
):
    return await svc.activate(acting_user_id=claims.sub, user_id=user_id)
