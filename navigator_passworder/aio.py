"""
Async Passworder — Coroutine front-end for the vault codec.

Each operation runs the synchronous codec in a worker thread so PBKDF2 and
AES-GCM never block the event loop. Calls share no state and may run
concurrently. Cancelling the awaiting task does not stop a derivation that
already started; its result is discarded.
"""
import asyncio
from collections.abc import Mapping
from typing import Any, Optional, Union

from .codec import (
    DetailedDecryptResult,
    DetailedEncryptionResult,
    EncryptionResult,
    Passworder,
    get_passworder,
)
from .keys import Key


class AsyncPassworder:
    """Awaitable wrapper around a :class:`Passworder`.

    Without an explicit ``passworder`` the module default from
    :func:`~navigator_passworder.codec.get_passworder` is used.
    """

    def __init__(self, passworder: Optional[Passworder] = None):
        self._passworder = passworder

    @property
    def passworder(self) -> Passworder:
        return self._passworder or get_passworder()

    def generate_salt(self, byte_count: Optional[int] = None) -> str:
        return self.passworder.generate_salt(byte_count)

    async def key_from_password(
        self,
        password: Union[str, bytes],
        salt: Union[str, bytes],
        exportable: bool = False,
    ) -> Key:
        return await asyncio.to_thread(
            self.passworder.key_from_password, password, salt, exportable,
        )

    async def encrypt_with_key(self, key: Key, payload: Any) -> EncryptionResult:
        return await asyncio.to_thread(self.passworder.encrypt_with_key, key, payload)

    async def encrypt(
        self,
        password: Union[str, bytes],
        payload: Any,
        key: Optional[Key] = None,
        salt: Optional[Union[str, bytes]] = None,
    ) -> str:
        return await asyncio.to_thread(
            self.passworder.encrypt, password, payload, key, salt,
        )

    async def encrypt_with_detail(
        self,
        password: Union[str, bytes],
        payload: Any,
        salt: Optional[Union[str, bytes]] = None,
    ) -> DetailedEncryptionResult:
        return await asyncio.to_thread(
            self.passworder.encrypt_with_detail, password, payload, salt,
        )

    async def decrypt_with_key(
        self,
        key: Key,
        payload: Union[EncryptionResult, Mapping[str, Any]],
    ) -> Any:
        return await asyncio.to_thread(self.passworder.decrypt_with_key, key, payload)

    async def decrypt(
        self,
        password: Union[str, bytes],
        text: Union[str, bytes],
        key: Optional[Key] = None,
    ) -> Any:
        return await asyncio.to_thread(self.passworder.decrypt, password, text, key)

    async def decrypt_with_detail(
        self,
        password: Union[str, bytes],
        text: Union[str, bytes],
    ) -> DetailedDecryptResult:
        return await asyncio.to_thread(
            self.passworder.decrypt_with_detail, password, text,
        )
