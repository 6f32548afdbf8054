import asyncio
from datetime import datetime

from sqlalchemy.orm import Session, sessionmaker

from config.database.session import SessionLocal
from analytics.application.port.user_api_key_repository_port import UserApiKeyRepositoryPort
from analytics.domain.stored_api_key import StoredApiKey
from analytics.infrastructure.orm.models import UserApiKeyORM


class UserApiKeyRepositoryImpl(UserApiKeyRepositoryPort):
    """Blocking SQLAlchemy work runs in a worker thread, one session per call."""

    def __init__(self, session_factory: sessionmaker = SessionLocal):
        self.session_factory = session_factory

    async def find_active_key(self, user_id: str, platform: str) -> StoredApiKey | None:
        return await asyncio.to_thread(self._find_active_key, user_id, platform.lower())

    async def mark_used(self, key_id: int) -> None:
        await asyncio.to_thread(self._mark_used, key_id)

    def _find_active_key(self, user_id: str, platform: str) -> StoredApiKey | None:
        with self.session_factory() as db:
            orm = (
                db.query(UserApiKeyORM)
                .filter(
                    UserApiKeyORM.user_id == user_id,
                    UserApiKeyORM.platform == platform,
                    UserApiKeyORM.is_active.is_(True),
                )
                .order_by(UserApiKeyORM.created_at.desc(), UserApiKeyORM.id.desc())
                .first()
            )
            return self._to_domain(orm) if orm else None

    def _mark_used(self, key_id: int) -> None:
        with self.session_factory() as db:
            orm = db.get(UserApiKeyORM, key_id)
            if orm is None:
                return
            orm.last_used_at = datetime.utcnow()
            db.commit()

    @staticmethod
    def _to_domain(orm: UserApiKeyORM) -> StoredApiKey:
        return StoredApiKey(
            key_id=orm.id,
            user_id=orm.user_id,
            platform=orm.platform,
            encrypted_key=orm.encrypted_key,
            is_active=orm.is_active,
            created_at=orm.created_at,
            last_used_at=orm.last_used_at,
        )
