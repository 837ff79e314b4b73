from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from studio_pos.api.errors import to_http
from studio_pos.data.database import get_db
from studio_pos.domain.errors import DomainError
from studio_pos.services.user_service import UserService
from studio_pos.domain.schemas import UserCreate, UserRead

router = APIRouter(prefix="/users", tags=["users"])

@router.post("/", response_model=UserRead)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    service = UserService(db)
    return service.create_user(payload)

@router.get("/", response_model=List[UserRead])
def list_users(role: str | None = Query(None), db: Session = Depends(get_db)):
    return UserService(db).list_users(role)

@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: int, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        return service.get_user(user_id)
    except DomainError as e:
        raise to_http(e)
