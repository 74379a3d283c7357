"""
Encrypted Auth Session Storage.

Storage backend handed to the Supabase client (``ClientOptions.storage``)
so the auth session (access + refresh tokens) survives an application
restart and ``auth.get_session()`` can restore it.

Security model
--------------
- All items live in one file, encrypted as a whole with AES-256-GCM
  (confidentiality plus integrity).
- The key is derived with PBKDF2-HMAC-SHA256 from machine identity
  (hostname + OS user) and a random per-install salt stored beside the
  data file.  The key itself is never written to disk.
- A file that cannot be decrypted (copied from another machine,
  tampered with, truncated) reads as empty; the user simply signs in
  again.

File layout::

    session.bin   = nonce (16 B) | tag (16 B) | ciphertext
    session.salt  = 32 random bytes
"""

from __future__ import annotations

import getpass
import json
import os
import socket
import threading
from pathlib import Path
from typing import Optional

from Crypto.Cipher import AES
from Crypto.Hash import SHA256
from Crypto.Protocol.KDF import PBKDF2

from edunex.logger import StructuredLogger

_NONCE_SIZE: int = 16
_TAG_SIZE: int = 16
_SALT_SIZE: int = 32
_KEY_LENGTH: int = 32  # 256 bits


class EncryptedSessionStorage:
    """Key/value store with the ``get_item`` / ``set_item`` /
    ``remove_item`` interface the Supabase auth client expects.

    Parameters
    ----------
    path:
        Location of the encrypted data file.  Parent directories are
        created on first write.
    logger:
        Structured logger.
    iterations:
        PBKDF2 iteration count.
    """

    def __init__(
        self,
        path: Path,
        logger: StructuredLogger,
        iterations: int = 600_000,
    ) -> None:
        self._path: Path = Path(path).expanduser()
        self._salt_path: Path = self._path.with_suffix(".salt")
        self._logger: StructuredLogger = logger
        self._iterations: int = iterations
        self._lock: threading.Lock = threading.Lock()
        self._key: Optional[bytes] = None

    # ------------------------------------------------------------------
    # Storage interface
    # ------------------------------------------------------------------

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            items = self._load()
            items[key] = value
            self._save(items)

    def remove_item(self, key: str) -> None:
        with self._lock:
            items = self._load()
            if items.pop(key, None) is None:
                return
            if items:
                self._save(items)
            else:
                self._path.unlink(missing_ok=True)

    # ------------------------------------------------------------------
    # Encryption
    # ------------------------------------------------------------------

    def _load(self) -> dict[str, str]:
        if not self._path.is_file():
            return {}
        try:
            blob = self._path.read_bytes()
            nonce = blob[:_NONCE_SIZE]
            tag = blob[_NONCE_SIZE:_NONCE_SIZE + _TAG_SIZE]
            ciphertext = blob[_NONCE_SIZE + _TAG_SIZE:]
            cipher = AES.new(self._derive_key(), AES.MODE_GCM, nonce=nonce)
            plaintext = cipher.decrypt_and_verify(ciphertext, tag)
            items = json.loads(plaintext.decode("utf-8"))
        except (OSError, ValueError, KeyError) as exc:
            self._logger.warning(
                "Stored session unreadable, treating as empty: %s", exc,
            )
            return {}
        if not isinstance(items, dict):
            return {}
        return {str(k): str(v) for k, v in items.items()}

    def _save(self, items: dict[str, str]) -> None:
        plaintext = json.dumps(items, ensure_ascii=False).encode("utf-8")
        cipher = AES.new(self._derive_key(), AES.MODE_GCM, nonce=os.urandom(_NONCE_SIZE))
        ciphertext, tag = cipher.encrypt_and_digest(plaintext)

        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_bytes(cipher.nonce + tag + ciphertext)
        self._restrict_permissions(tmp_path)
        os.replace(tmp_path, self._path)

    def _derive_key(self) -> bytes:
        """PBKDF2-HMAC-SHA256 over ``hostname:username`` with the install salt.

        Cached for the lifetime of the instance.
        """
        if self._key is None:
            password = f"{socket.gethostname()}:{getpass.getuser()}"
            self._key = PBKDF2(
                password=password,
                salt=self._get_or_create_salt(),
                dkLen=_KEY_LENGTH,
                count=self._iterations,
                hmac_hash_module=SHA256,
            )
        return self._key

    def _get_or_create_salt(self) -> bytes:
        if self._salt_path.is_file():
            salt = self._salt_path.read_bytes()
            if len(salt) == _SALT_SIZE:
                return salt
            self._logger.warning("Session salt file is malformed; regenerating.")

        salt = os.urandom(_SALT_SIZE)
        self._salt_path.parent.mkdir(parents=True, exist_ok=True)
        self._salt_path.write_bytes(salt)
        self._restrict_permissions(self._salt_path)
        return salt

    def _restrict_permissions(self, file_path: Path) -> None:
        try:
            file_path.chmod(0o600)
        except OSError as exc:
            self._logger.debug("Could not restrict permissions on %s: %s", file_path, exc)
