from sqlalchemy.orm import Session

from studio_pos.domain.errors import OperatorNotFoundError
from studio_pos.domain.models import Operator
from studio_pos.domain.schemas import UserCreate, UserRead
from studio_pos.repos.user_repo import UserRepo
from studio_pos.utils.logging import get_logger

logger = get_logger(__name__)


def _read(user) -> UserRead:
    return UserRead(id=user.id, name=user.name, role=user.role)


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def create_user(self, payload: UserCreate) -> UserRead:
        # registering an existing id returns the stored operator unchanged
        user, created = self.repo.register(payload.id, payload.name, payload.role)
        if created:
            logger.info(f"Registered operator {user.id} ({user.role})")
        return _read(user)

    def list_users(self, role: str | None = None) -> list[UserRead]:
        return [_read(u) for u in self.repo.list_users(role)]

    def get_user(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise OperatorNotFoundError()
        return _read(user)

    def get_operator(self, user_id: int) -> Operator:
        user = self.repo.get_user(user_id)
        if not user:
            raise OperatorNotFoundError()
        return Operator(id=user.id, name=user.name)
