# backend/app/repositories/user_repository.py
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, joinedload

from ..core.enums import RoleName
from ..models.platform_setting import PlatformSetting
from ..models.user import Profile, User
from .base_repository import BaseRepository, Page
from .filters import build_predicates

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    def __init__(self, db: Session):
        super().__init__(db, User)

    def get_with_profile(self, user_id: str) -> Optional[User]:
        return (
            self.db.query(User)
            .options(joinedload(User.profile).joinedload(Profile.teacher))
            .filter(User.id == user_id)
            .first()
        )

    def list_users(self, *, role: Optional[RoleName] = None, page: int, limit: int) -> Page[User]:
        predicates = build_predicates(Profile.role == role.value if role else None)
        query = (
            self.db.query(User)
            .outerjoin(Profile, Profile.user_id == User.id)
            .options(joinedload(User.profile))
            .filter(*predicates)
            .order_by(User.created_at.desc())
        )
        return self.paginate(query, page=page, limit=limit)

    def recent(self, limit: int = 5) -> List[User]:
        return (
            self.db.query(User)
            .options(joinedload(User.profile))
            .order_by(User.created_at.desc())
            .limit(limit)
            .all()
        )


class ProfileRepository(BaseRepository[Profile]):
    def __init__(self, db: Session):
        super().__init__(db, Profile)

    def get_by_user_id(self, user_id: str) -> Optional[Profile]:
        return (
            self.db.query(Profile)
            .options(joinedload(Profile.teacher))
            .filter(Profile.user_id == user_id)
            .first()
        )


class PlatformSettingRepository(BaseRepository[PlatformSetting]):
    def __init__(self, db: Session):
        super().__init__(db, PlatformSetting)

    def as_dict(self) -> Dict[str, Any]:
        return {row.key: row.value for row in self.db.query(PlatformSetting).all()}

    def upsert(self, key: str, value: Any) -> PlatformSetting:
        row = self.get_by_id(key)
        if row is None:
            return self.create(key=key, value=value)
        row.value = value
        self._flush(f"update setting {key}")
        return row
