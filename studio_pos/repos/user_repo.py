# studio_pos/repos/user_repo.py
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from studio_pos.data.models.user import UserModel
from studio_pos.utils.logging import get_logger

logger = get_logger(__name__)


class UserRepo:
    """Operators standing at the till; ids come from the upstream login."""

    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def list_users(self, role: str | None = None) -> list[UserModel]:
        stmt = select(UserModel).order_by(UserModel.id)
        if role is not None:
            stmt = stmt.where(UserModel.role == role)
        return list(self.db.execute(stmt).scalars().all())

    def register(self, user_id: int, name: str, role: str) -> tuple[UserModel, bool]:
        """Insert an operator unless the id is taken; returns (row, created)."""
        existing = self.get_user(user_id)
        if existing:
            return existing, False

        user = UserModel(id=user_id, name=name, role=role)
        try:
            self.db.add(user)
            self.db.commit()
        except IntegrityError:
            #registered by a parallel request between get and insert
            self.db.rollback()
            logger.info(f"Operator {user_id} registered concurrently, reusing it")
            return self.get_user(user_id), False

        self.db.refresh(user)
        return user, True
