# app/api/routes/admin.py
from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.api.deps import get_cascade_manager, get_store
from app.core.security import require_admin
from app.db.models.service import ApprovalStatus
from app.db.models.user import Role
from app.db.store import EntityStore
from app.schemas.service import FeaturedUpdate, ServiceView
from app.schemas.user import UserResponse
from app.services.cascade import CascadeDeletionManager
from app.services.transformer import review_view, transform_service

# every route here is admin only
router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


# --------------------------------------------------
# 1. Services: listing and moderation
# --------------------------------------------------
@router.get("/services", response_model=list[ServiceView])
def admin_list_services(store: EntityStore = Depends(get_store)):
    return [transform_service(svc, svc.provider) for svc in store.find_services()]


@router.get("/services/{service_id}", response_model=ServiceView)
def admin_get_service(service_id: int, store: EntityStore = Depends(get_store)):
    service = store.get_service(service_id, with_reviews=True)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")

    reviews = sorted(service.reviews, key=lambda r: (r.created_at, r.id), reverse=True)
    return transform_service(service, service.provider, [review_view(r) for r in reviews])


@router.patch("/services/{service_id}/approve", response_model=ServiceView)
def approve_service(service_id: int, store: EntityStore = Depends(get_store)):
    service = store.set_approval_status(service_id, ApprovalStatus.APPROVED)
    return transform_service(service, service.provider)


@router.patch("/services/{service_id}/reject", response_model=ServiceView)
def reject_service(service_id: int, store: EntityStore = Depends(get_store)):
    service = store.set_approval_status(service_id, ApprovalStatus.REJECTED)
    return transform_service(service, service.provider)


@router.patch("/services/{service_id}/feature", response_model=ServiceView)
def toggle_featured(service_id: int, payload: FeaturedUpdate, store: EntityStore = Depends(get_store)):
    service = store.set_featured(service_id, payload.featured)
    return transform_service(service, service.provider)


@router.delete("/services/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
def admin_delete_service(
    service_id: int,
    cascade: CascadeDeletionManager = Depends(get_cascade_manager),
):
    cascade.delete_service(service_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --------------------------------------------------
# 2. Users: listing, promotion and deletion
# --------------------------------------------------
@router.get("/users", response_model=list[UserResponse])
def admin_list_users(store: EntityStore = Depends(get_store)):
    return store.list_users()


@router.patch("/users/{user_id}/promote", response_model=UserResponse)
def promote_user(user_id: int, store: EntityStore = Depends(get_store)):
    return store.set_user_role(user_id, Role.ADMIN)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def admin_delete_user(
    user_id: int,
    cascade: CascadeDeletionManager = Depends(get_cascade_manager),
):
    cascade.delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
