# studio_pos/api/deps.py
from functools import lru_cache

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from studio_pos.data.database import get_db
from studio_pos.domain.catalog import Catalog, default_catalog
from studio_pos.domain.errors import OperatorNotFoundError
from studio_pos.domain.models import Operator
from studio_pos.repos.sql_store import SqlStudioStore
from studio_pos.services.lock_service import LockService
from studio_pos.services.user_service import UserService


@lru_cache
def get_catalog() -> Catalog:
    return default_catalog()


@lru_cache
def get_lock_service() -> LockService:
    return LockService()


def get_store(db: Session = Depends(get_db)) -> SqlStudioStore:
    return SqlStudioStore(db)


def get_current_operator(
    x_operator_id: int | None = Header(None),
    db: Session = Depends(get_db),
) -> Operator:
    # authentication happens upstream; we only resolve who is at the till
    if x_operator_id is None:
        raise HTTPException(status_code=401, detail="Missing operator")
    try:
        return UserService(db).get_operator(x_operator_id)
    except OperatorNotFoundError:
        raise HTTPException(status_code=401, detail="Unknown operator")
