from abc import ABC, abstractmethod

from analytics.domain.stored_api_key import StoredApiKey


class UserApiKeyRepositoryPort(ABC):
    @abstractmethod
    async def find_active_key(self, user_id: str, platform: str) -> StoredApiKey | None:
        """Most recently created active key of the user for the platform."""
        raise NotImplementedError

    @abstractmethod
    async def mark_used(self, key_id: int) -> None:
        raise NotImplementedError


class KeyCipherPort(ABC):
    @abstractmethod
    def encrypt(self, plaintext: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def decrypt(self, ciphertext: str) -> str:
        raise NotImplementedError
