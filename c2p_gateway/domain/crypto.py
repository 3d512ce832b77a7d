"""Field and envelope encryption for the Mercantil C2P protocol.

The bank requires AES-128 in ECB mode with PKCS#7 padding, keyed by the
first 16 bytes of SHA-256(secret), Base64-encoded. Identical plaintext under
the same secret always yields identical ciphertext; the server depends on
this exact scheme, so it must not be switched to an IV-based mode.
"""

import base64
import binascii
import hashlib
import logging

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from c2p_gateway.domain.exceptions import CryptoFault

logger = logging.getLogger(__name__)

KEY_SIZE_BYTES = 16
BLOCK_SIZE_BITS = 128

ENCRYPT_FAULT_CODE = "CRYPTO_001"
DECRYPT_FAULT_CODE = "CRYPTO_002"


def derive_key(secret: str) -> bytes:
    """Derive the 128-bit AES key: SHA-256 of the UTF-8 secret, truncated to 16 bytes."""
    return hashlib.sha256(secret.encode("utf-8")).digest()[:KEY_SIZE_BYTES]


def _cipher(key: bytes) -> Cipher:
    return Cipher(algorithms.AES(key), modes.ECB())


def encrypt(plaintext: str, secret: str) -> str:
    """Encrypt text and return standard Base64 ciphertext.

    Raises:
        CryptoFault: If the secret is empty or the text cannot be encoded
    """
    if not validate_secret(secret):
        raise CryptoFault("Cannot encrypt: secret key is empty", code=ENCRYPT_FAULT_CODE)

    try:
        data = plaintext.encode("utf-8")
        padder = padding.PKCS7(BLOCK_SIZE_BITS).padder()
        padded = padder.update(data) + padder.finalize()

        encryptor = _cipher(derive_key(secret)).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()
    except (AttributeError, UnicodeEncodeError, ValueError) as e:
        logger.error("Field encryption failed", extra={"error_type": type(e).__name__})
        raise CryptoFault(f"Encryption failed: {e}", code=ENCRYPT_FAULT_CODE) from e

    return base64.b64encode(ciphertext).decode("ascii")


def decrypt(ciphertext_b64: str, secret: str) -> str:
    """Decrypt Base64 ciphertext produced by `encrypt`.

    Raises:
        CryptoFault: On empty secret, malformed Base64, bad block length,
            invalid padding, or non-UTF-8 output
    """
    if not validate_secret(secret):
        raise CryptoFault("Cannot decrypt: secret key is empty", code=DECRYPT_FAULT_CODE)

    try:
        ciphertext = base64.b64decode(ciphertext_b64, validate=True)
    except (binascii.Error, TypeError, ValueError) as e:
        raise CryptoFault(f"Decryption failed: malformed Base64 ({e})", code=DECRYPT_FAULT_CODE) from e

    if not ciphertext or len(ciphertext) % (BLOCK_SIZE_BITS // 8) != 0:
        raise CryptoFault(
            f"Decryption failed: ciphertext length {len(ciphertext)} is not a positive multiple of the block size",
            code=DECRYPT_FAULT_CODE,
        )

    try:
        decryptor = _cipher(derive_key(secret)).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()

        unpadder = padding.PKCS7(BLOCK_SIZE_BITS).unpadder()
        data = unpadder.update(padded) + unpadder.finalize()
    except ValueError as e:
        raise CryptoFault("Decryption failed: invalid padding", code=DECRYPT_FAULT_CODE) from e

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise CryptoFault("Decryption failed: output is not valid UTF-8", code=DECRYPT_FAULT_CODE) from e


def sha256_hex(text: str) -> str:
    """Hex SHA-256 digest, used for diagnostics only."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def validate_secret(secret: str) -> bool:
    """True iff the secret is a non-empty string. Not a strength check."""
    return isinstance(secret, str) and len(secret) > 0
