"""
Usage counters backed by SQLAlchemy/SQLite.
"""
from datetime import date
from typing import Optional
from sqlalchemy.orm import Session

from repositories.models import UsageCounterORM


def _bump(session: Session, key: str) -> None:
    orm = session.get(UsageCounterORM, key)
    if not orm:
        orm = UsageCounterORM(key=key, count=0)
        session.add(orm)
    orm.count = (orm.count or 0) + 1


class UsageRepository:
    """Daily and per-user action counters."""

    def increment_usage(self, session: Session, user_id: str, action: str, day: Optional[date] = None) -> None:
        day = day or date.today()
        _bump(session, f"usage:{day.isoformat()}:{action}")
        _bump(session, f"user:{user_id}:usage:{action}")
        session.commit()

    def get_user_usage(self, session: Session, user_id: str, action: str) -> int:
        orm = session.get(UsageCounterORM, f"user:{user_id}:usage:{action}")
        return orm.count if orm else 0
