import hashlib
import hmac

from .digest import message_bytes

MAX_ROUNDS = 1000


def bits2int(data, qlen):
    value = int.from_bytes(data, "big")
    blen = len(data) * 8
    if blen > qlen:
        value >>= blen - qlen
    return value


def int2octets(value, rolen):
    return value.to_bytes(rolen, "big")


def bits2octets(data, q, rolen):
    return int2octets(bits2int(data, q.bit_length()) % q, rolen)


def nonce_candidates(q, secexp, message, hash_func=hashlib.sha256, max_rounds=MAX_ROUNDS):
    """
    Yield the RFC 6979 (section 3.2) nonce sequence for private key `secexp`.

    The first value is the deterministic nonce; later values are what the
    RFC prescribes when the signer has to reject a k (r = 0 or s = 0).
    Stops after `max_rounds` HMAC-DRBG rounds.
    """
    qlen = q.bit_length()
    rolen = (qlen + 7) // 8
    holen = hash_func().digest_size

    h1 = hash_func(message_bytes(message)).digest()
    seed = int2octets(secexp, rolen) + bits2octets(h1, q, rolen)

    def mac(key, data):
        return hmac.new(key, data, hash_func).digest()

    V = b"\x01" * holen
    K = b"\x00" * holen
    K = mac(K, V + b"\x00" + seed)
    V = mac(K, V)
    K = mac(K, V + b"\x01" + seed)
    V = mac(K, V)

    for _ in range(max_rounds):
        T = b""
        while len(T) * 8 < qlen:
            V = mac(K, V)
            T += V

        k = bits2int(T, qlen)
        if 1 <= k < q:
            yield k

        K = mac(K, V + b"\x00")
        V = mac(K, V)
