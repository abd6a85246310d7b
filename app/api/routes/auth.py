from fastapi import APIRouter, Depends, status

from app.api.deps import get_store
from app.core.security import get_current_user
from app.db.models.user import User
from app.db.store import EntityStore
from app.schemas.user import UserCreate, UserResponse

router = APIRouter(tags=["auth"])


# Credentials live with the upstream auth service; this only records the profile
@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(user: UserCreate, store: EntityStore = Depends(get_store)):
    return store.create_user(email=user.email, name=user.name, role=user.role, phone=user.phone)


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user
