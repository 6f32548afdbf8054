from cryptography.fernet import Fernet, InvalidToken

from analytics.application.port.user_api_key_repository_port import KeyCipherPort


class FernetKeyCipher(KeyCipherPort):
    def __init__(self, secret: str):
        if not secret:
            raise ValueError("API_KEY_ENCRYPTION_SECRET is required to read stored user keys")
        self._fernet = Fernet(secret.encode())

    def encrypt(self, plaintext: str) -> str:
        return self._fernet.encrypt(plaintext.encode()).decode()

    def decrypt(self, ciphertext: str) -> str:
        try:
            return self._fernet.decrypt(ciphertext.encode()).decode()
        except InvalidToken as exc:
            raise ValueError("Stored API key could not be decrypted") from exc
