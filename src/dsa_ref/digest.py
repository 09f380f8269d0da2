import hashlib
from typing import NamedTuple


class MessageDigest(NamedTuple):
    hex: str
    value: int  # digest as an integer, reduced mod q


def message_bytes(message):
    if isinstance(message, str):
        return message.encode("utf-8")
    if isinstance(message, (bytes, bytearray, memoryview)):
        return bytes(message)
    raise TypeError(f"message must be str or bytes, not {type(message).__name__}")


def digest_message(message, q, hash_func=hashlib.sha256):
    """
    Hash the message and reduce it into Z_q. Signing, verification and
    nonce-reuse recovery must all go through this function.
    """
    digest = hash_func(message_bytes(message)).digest()
    return MessageDigest(digest.hex(), int.from_bytes(digest, "big") % q)
