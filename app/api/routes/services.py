# app/api/routes/services.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.api.deps import get_cascade_manager, get_ranking_engine, get_store
from app.core.security import get_current_user, require_roles
from app.db.models.service import ApprovalStatus
from app.db.models.user import Role, User
from app.db.store import EntityStore
from app.schemas.service import ServiceCreate, ServiceUpdate, ServiceView, TopServiceItem
from app.services.cascade import CascadeDeletionManager
from app.services.ranking import RankingEngine
from app.services.transformer import review_view, transform_service


router = APIRouter(prefix="/services", tags=["services"])


# Public listing (approved only)

@router.get("", response_model=list[ServiceView])
def list_services(
    category: Optional[str] = Query(None, description="Exact category, 'All' for no filter"),
    store: EntityStore = Depends(get_store),
):
    if category == "All":
        category = None
    services = store.find_services(approval_status=ApprovalStatus.APPROVED, category=category)
    return [transform_service(svc, svc.provider) for svc in services]


@router.get("/featured", response_model=list[ServiceView])
def featured_services(store: EntityStore = Depends(get_store)):
    services = store.find_services(
        approval_status=ApprovalStatus.APPROVED,
        featured=True,
        order_by="rating",
    )
    return [transform_service(svc, svc.provider) for svc in services]


@router.get("/top-ranked", response_model=list[TopServiceItem])
def top_ranked_services(engine: RankingEngine = Depends(get_ranking_engine)):
    return engine.top_services()


@router.get("/search", response_model=list[ServiceView])
def search_services(
    q: Optional[str] = Query(None, description="Matches name, description or category"),
    store: EntityStore = Depends(get_store),
):
    if not q or not q.strip():
        raise HTTPException(status_code=400, detail="A search query 'q' is required.")
    services = store.find_services(approval_status=ApprovalStatus.APPROVED, search=q, order_by="rating")
    return [transform_service(svc, svc.provider) for svc in services]


# Provider views their services

@router.get("/my-services", response_model=list[ServiceView])
def get_my_services(
    store: EntityStore = Depends(get_store),
    current_user: User = Depends(require_roles(Role.PROVIDER)),
):
    services = store.find_services(provider_id=current_user.id)
    return [transform_service(svc, svc.provider) for svc in services]


@router.get("/provider/{service_id}", response_model=ServiceView)
def get_provider_service(
    service_id: int,
    store: EntityStore = Depends(get_store),
    current_user: User = Depends(require_roles(Role.PROVIDER)),
):
    service = store.get_service(service_id)
    if not service:
        raise HTTPException(404, "Service not found")
    if service.provider_id != current_user.id:
        raise HTTPException(403, "You are not authorized to view this service")
    return transform_service(service, service.provider)


@router.get("/{service_id}", response_model=ServiceView)
def get_service(service_id: int, store: EntityStore = Depends(get_store)):
    service = store.get_service(service_id, with_reviews=True)
    if not service or service.approval_status != ApprovalStatus.APPROVED:
        raise HTTPException(404, "Service not found or is not approved")

    reviews = sorted(service.reviews, key=lambda r: (r.created_at, r.id), reverse=True)
    return transform_service(service, service.provider, [review_view(r) for r in reviews])


# Provider creates service

@router.post("", response_model=ServiceView, status_code=status.HTTP_201_CREATED)
def create_service(
    service_data: ServiceCreate,
    store: EntityStore = Depends(get_store),
    current_user: User = Depends(require_roles(Role.PROVIDER, Role.ADMIN)),
):
    service = store.create_service(current_user, **service_data.model_dump())
    return transform_service(service, service.provider)


# Provider updates their service

@router.patch("/{service_id}", response_model=ServiceView)
def update_service(
    service_id: int,
    update_data: ServiceUpdate,
    store: EntityStore = Depends(get_store),
    current_user: User = Depends(require_roles(Role.PROVIDER, Role.ADMIN)),
):
    service = store.get_service(service_id)
    if not service:
        raise HTTPException(404, "Service not found")

    # Permission check
    if service.provider_id != current_user.id:
        raise HTTPException(403, "You are not authorized to edit this service")

    # optional fields may be cleared, required ones only replaced
    fields = {
        field: value
        for field, value in update_data.model_dump(exclude_unset=True).items()
        if value is not None or field in ("location", "video_url")
    }
    service = store.update_service(service, **fields)
    return transform_service(service, service.provider)


# Provider (or admin) deletes a service, cascading to its reviews

@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_service(
    service_id: int,
    store: EntityStore = Depends(get_store),
    cascade: CascadeDeletionManager = Depends(get_cascade_manager),
    current_user: User = Depends(get_current_user),
):
    service = store.get_service(service_id)
    if not service:
        raise HTTPException(404, "Service not found")

    if service.provider_id != current_user.id and current_user.role != Role.ADMIN:
        raise HTTPException(403, "You are not authorized to delete this service")

    cascade.delete_service(service_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
