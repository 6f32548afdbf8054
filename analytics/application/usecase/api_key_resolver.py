import logging

from sqlalchemy.exc import SQLAlchemyError

from analytics.application.port.user_api_key_repository_port import KeyCipherPort, UserApiKeyRepositoryPort
from analytics.domain.platform import Platform

logger = logging.getLogger(__name__)

SOURCE_USER = "user"
SOURCE_SYSTEM = "system"
SOURCE_NONE = "none"


class ApiKeyResolver:
    """
    Picks the credential for a platform call: the user's own active key
    first, then the system key from process configuration.
    """

    def __init__(
        self,
        system_keys: dict[str, str],
        repository: UserApiKeyRepositoryPort | None = None,
        cipher: KeyCipherPort | None = None,
    ):
        self.system_keys = {k.lower(): v for k, v in system_keys.items()}
        self.repository = repository
        self.cipher = cipher

    async def resolve(self, user_id: str | None, platform: str | Platform) -> str | None:
        platform = Platform.parse(platform).value
        if user_id:
            user_key = await self._user_key(user_id, platform)
            if user_key:
                logger.info("Using user API key for %s (user=%s)", platform, user_id)
                return user_key
        system_key = self.system_key(platform)
        if system_key:
            logger.debug("Using system API key for %s", platform)
        return system_key

    async def source(self, user_id: str | None, platform: str | Platform) -> dict:
        """Same lookup as resolve(), without touching last-used timestamps."""
        platform = Platform.parse(platform).value
        has_user_key = bool(user_id) and await self._has_user_key(user_id, platform)
        has_system_key = self.system_key(platform) is not None
        if has_user_key:
            source = SOURCE_USER
        elif has_system_key:
            source = SOURCE_SYSTEM
        else:
            source = SOURCE_NONE
        return {"source": source, "hasUserKey": has_user_key, "hasSystemKey": has_system_key}

    def system_key(self, platform: str | Platform) -> str | None:
        return self.system_keys.get(Platform.parse(platform).value) or None

    async def _user_key(self, user_id: str, platform: str) -> str | None:
        if self.repository is None or self.cipher is None:
            return None
        try:
            stored = await self.repository.find_active_key(user_id, platform)
            if stored is None:
                return None
            decrypted = self.cipher.decrypt(stored.encrypted_key)
            await self.repository.mark_used(stored.key_id)
            return decrypted
        except (SQLAlchemyError, ValueError) as exc:
            logger.error("User API key lookup failed for %s/%s: %s", user_id, platform, exc)
            return None

    async def _has_user_key(self, user_id: str, platform: str) -> bool:
        """resolve() without mark_used: a key that cannot be decrypted does not count."""
        if self.repository is None or self.cipher is None:
            return False
        try:
            stored = await self.repository.find_active_key(user_id, platform)
            if stored is None:
                return False
            self.cipher.decrypt(stored.encrypted_key)
        except (SQLAlchemyError, ValueError) as exc:
            logger.error("User API key check failed for %s/%s: %s", user_id, platform, exc)
            return False
        return True
