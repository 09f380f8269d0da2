import logging
from dataclasses import dataclass
from itertools import islice

from .config import SIGNING_ATTEMPTS
from .digest import digest_message
from .errors import GenerationExhausted, InvalidNonce, InvalidParameters, NotInvertible
from .models import (
    NonceMode, Signature, SigningResult, SigningSteps, VerificationResult, VerificationSteps,
)
from .numbertheory import default_rng, mod_inverse, mod_pow
from .rfc6979 import nonce_candidates

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyPair:
    private_key: int  # x
    public_key: int   # y = g^x mod p

    @classmethod
    def from_private_key(cls, params, private_key):
        if not 0 < private_key < params.q:
            raise InvalidParameters("private key must lie in (0, q)")
        return cls(private_key, mod_pow(params.g, private_key, params.p))


def generate_key_pair(params, rng=None):
    """x uniform in [1, q-1], y = g^x mod p."""
    if params.q <= 2:
        raise InvalidParameters("q must be greater than 2")
    x = default_rng(rng).randrange(1, params.q)
    return KeyPair(x, mod_pow(params.g, x, params.p))


class VerifyingKey:
    def __init__(self, params, pubkey):
        self.params = params
        self.pubkey = pubkey

    def verify(self, message, signature):
        p, q, g = self.params.p, self.params.q, self.params.g
        r, s = signature

        if not Signature(r, s).is_well_formed(q):
            return VerificationResult(
                False, VerificationSteps(0, 0, 0, 0, r), "signature values out of range")

        h = digest_message(message, q).value
        try:
            w = mod_inverse(s, q)
        except NotInvertible:
            return VerificationResult(
                False, VerificationSteps(0, 0, 0, 0, r), "s is not invertible modulo q")

        u1 = (h * w) % q
        u2 = (r * w) % q
        v = (mod_pow(g, u1, p) * mod_pow(self.pubkey, u2, p)) % p % q

        steps = VerificationSteps(w, u1, u2, v, r)
        if v == r:
            return VerificationResult(True, steps, "signature is valid: v equals r")
        return VerificationResult(False, steps, f"signature is invalid: v = {v} does not match r = {r}")


class SigningKey:
    def __init__(self, params, privkey, verifying_key=None):
        if not 0 < privkey < params.q:
            raise InvalidParameters("private key must lie in (0, q)")
        self.params = params
        self._privkey = privkey
        if verifying_key is None:
            self.verifying_key = VerifyingKey(params, mod_pow(params.g, privkey, params.p))
        else:
            self.verifying_key = verifying_key

    @classmethod
    def generate(cls, params, rng=None):
        return cls.from_key_pair(params, generate_key_pair(params, rng))

    @classmethod
    def from_key_pair(cls, params, key_pair):
        return cls(params, key_pair.private_key, VerifyingKey(params, key_pair.public_key))

    @property
    def key_pair(self):
        return KeyPair(self._privkey, self.verifying_key.pubkey)

    def sign_digest(self, digest_val, k):
        """Raw DSA equations. Raises InvalidNonce when k yields r = 0 or s = 0."""
        p, q, g = self.params.p, self.params.q, self.params.g
        if not 0 < k < q:
            raise InvalidNonce("nonce k must lie in (0, q)")

        r = mod_pow(g, k, p) % q
        if r == 0:
            raise InvalidNonce(f"k = {k} gives r = 0")

        k_inv = mod_inverse(k, q)
        s = (k_inv * (digest_val + self._privkey * r)) % q
        if s == 0:
            raise InvalidNonce(f"k = {k} gives s = 0")

        return Signature(r, s), k_inv

    def _nonces(self, mode, nonce, message, rng, attempts):
        q = self.params.q
        if mode is NonceMode.FIXED:
            if nonce is None:
                raise InvalidNonce("fixed nonce mode needs a nonce")
            if not 0 < nonce < q:
                raise InvalidNonce("nonce k must lie in (0, q)")
            return [nonce]
        if nonce is not None:
            raise InvalidNonce(f"a nonce was supplied but nonce mode is {mode.value!r}")
        if mode is NonceMode.DETERMINISTIC:
            return islice(nonce_candidates(q, self._privkey, message), attempts)
        rng = default_rng(rng)
        return (rng.randrange(1, q) for _ in range(attempts))

    def sign(self, message, nonce_mode=None, nonce=None, rng=None, attempts=SIGNING_ATTEMPTS):
        """
        Sign `message` and keep every intermediate value.

        nonce_mode defaults to "fixed" when a nonce is given and "random"
        otherwise. Random and deterministic sources move on to the next
        candidate when r or s degenerates, up to `attempts` candidates; a
        fixed nonce cannot be retried and raises InvalidNonce instead.
        """
        if nonce_mode is None:
            nonce_mode = NonceMode.RANDOM if nonce is None else NonceMode.FIXED
        mode = NonceMode(nonce_mode)
        digest = digest_message(message, self.params.q)

        for k in self._nonces(mode, nonce, message, rng, attempts):
            try:
                signature, k_inv = self.sign_digest(digest.value, k)
            except InvalidNonce:
                if mode is NonceMode.FIXED:
                    raise
                logger.debug("rejected %s nonce, drawing another", mode.value)
                continue
            return SigningResult(
                signature=signature,
                digest=digest.hex,
                nonce=k,
                nonce_mode=mode,
                steps=SigningSteps(digest.value, k_inv, signature.r, signature.s),
            )

        raise GenerationExhausted(f"no usable {mode.value} nonce in {attempts} attempts")
