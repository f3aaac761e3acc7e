# filecipher/crypto.py
import os
from typing import List, Tuple

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

# --- Constants ---
KEY_SIZE = 32  # AES-256
IV_SIZE = 16
BLOCK_SIZE = 16
MIN_CONTAINER_SIZE = IV_SIZE

# --- Errors ---
class CipherError(Exception):
    """Base class for every failure the file cipher reports to its caller."""

class InvalidKeyLength(CipherError):
    def __init__(self, length: int):
        super().__init__(f"Key must be exactly {KEY_SIZE} bytes for AES-256 (got {length}).")
        self.length = length

class InvalidKeyEncoding(CipherError):
    pass

class MalformedContainer(CipherError):
    pass

class CipherInitFailed(CipherError):
    pass

class DecryptionFailed(CipherError):
    pass

class IoFailure(CipherError):
    pass

# --- Helpers ---
def validate_key(key: bytes) -> None:
    if len(key) != KEY_SIZE:
        raise InvalidKeyLength(len(key))

def sealed_size(plaintext_length: int) -> int:
    """Size of the container produced for a plaintext of the given length."""
    return IV_SIZE + (plaintext_length // BLOCK_SIZE + 1) * BLOCK_SIZE

def _build_cipher(key: bytes, iv: bytes) -> Cipher:
    try:
        return Cipher(algorithms.AES(key), modes.CBC(iv))
    except (ValueError, UnsupportedAlgorithm) as e:
        raise CipherInitFailed(f"Cipher initialization failed: {e}") from e

# --- Transform ---
def seal(plaintext: bytes, key: bytes, source: str = "input", target: str = "output") -> Tuple[bytes, List[str]]:
    """Encrypts plaintext with AES-256-CBC and returns (IV || ciphertext, status trail).

    The IV is drawn fresh from os.urandom on every call. PKCS#7 padding always
    adds between 1 and 16 bytes, so the ciphertext is never empty.
    """
    validate_key(key)
    trail = [f"Read {len(plaintext)} bytes from {source}"]

    iv = os.urandom(IV_SIZE)
    encryptor = _build_cipher(key, iv).encryptor()
    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    padded = padder.update(plaintext) + padder.finalize()
    ciphertext = encryptor.update(padded) + encryptor.finalize()

    trail.append(f"File encrypted and saved: {target}")
    trail.append("Encryption completed successfully.")
    return iv + ciphertext, trail

def open_container(container: bytes, key: bytes, source: str = "input", target: str = "output") -> Tuple[bytes, List[str]]:
    """Recovers the plaintext from an IV || ciphertext container.

    A padding error is the only signal of a wrong key or damaged data. The
    container carries no authentication tag, so a wrong key can still slip
    through on rare inputs.
    """
    validate_key(key)
    trail = [f"Read {len(container)} bytes from {source}"]
    if len(container) < MIN_CONTAINER_SIZE:
        raise MalformedContainer(
            f"Container is {len(container)} bytes, too short to hold the {IV_SIZE}-byte IV.")

    iv, ciphertext = container[:IV_SIZE], container[IV_SIZE:]
    decryptor = _build_cipher(key, iv).decryptor()
    unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
    try:
        padded = decryptor.update(ciphertext) + decryptor.finalize()
        plaintext = unpadder.update(padded) + unpadder.finalize()
    except ValueError as e:
        raise DecryptionFailed(f"Decryption failed. Wrong key or corrupt data ({e})") from e

    trail.append(f"File decrypted and saved: {target}")
    trail.append("Decryption completed successfully.")
    return plaintext, trail
