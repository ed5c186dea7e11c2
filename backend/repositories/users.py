"""
User repository backed by SQLAlchemy/SQLite.
"""
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session

from domain.models import User
from repositories.models import UserORM


def _user_from_orm(orm: UserORM) -> User:
    return User(
        id=orm.id,
        farcaster_id=orm.farcaster_id,
        generated_styles_count=orm.generated_styles_count or 0,
        premium_expires_at=orm.premium_expires_at,
        created_at=orm.created_at,
    )


class UsersRepository:
    """CRUD operations for users and their premium expiry."""

    def get_user(self, session: Session, user_id: str) -> Optional[User]:
        orm = session.get(UserORM, user_id)
        if not orm:
            return None
        return _user_from_orm(orm)

    def create_user(self, session: Session, user: User) -> User:
        orm = UserORM(
            id=user.id,
            farcaster_id=user.farcaster_id,
            generated_styles_count=user.generated_styles_count,
            premium_expires_at=user.premium_expires_at,
            created_at=user.created_at or datetime.utcnow(),
        )
        session.add(orm)
        session.commit()
        session.refresh(orm)
        return _user_from_orm(orm)

    def get_or_create_user(self, session: Session, user_id: str, farcaster_id: Optional[str] = None) -> User:
        user = self.get_user(session, user_id)
        if user:
            return user
        return self.create_user(session, User(id=user_id, farcaster_id=farcaster_id))

    def increment_generated_count(self, session: Session, user_id: str) -> Optional[User]:
        orm = session.get(UserORM, user_id)
        if not orm:
            return None
        orm.generated_styles_count = (orm.generated_styles_count or 0) + 1
        session.commit()
        session.refresh(orm)
        return _user_from_orm(orm)

    def get_premium_expiry(self, session: Session, user_id: str) -> Optional[datetime]:
        orm = session.get(UserORM, user_id)
        return orm.premium_expires_at if orm else None

    def set_premium_expiry(self, session: Session, user_id: str, expires_at: datetime) -> User:
        orm = session.get(UserORM, user_id)
        if not orm:
            orm = UserORM(id=user_id, generated_styles_count=0, created_at=datetime.utcnow())
            session.add(orm)
        orm.premium_expires_at = expires_at
        session.commit()
        session.refresh(orm)
        return _user_from_orm(orm)
