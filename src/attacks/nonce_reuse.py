"""
Private-key recovery from two DSA signatures that share a nonce.

With the same k, r1 == r2 and
    s1 - s2 = k^-1 (h1 - h2)  (mod q)
so k = (h1 - h2) / (s1 - s2) and x = (s1 k - h1) / r, all mod q.
"""
import logging
from collections import defaultdict
from itertools import combinations

from ..dsa_ref.digest import digest_message
from ..dsa_ref.errors import NotInvertible, NotRecoverable
from ..dsa_ref.models import RecoveryResult, Signature
from ..dsa_ref.numbertheory import mod_inverse, mod_pow

logger = logging.getLogger(__name__)


def recover_key_from_reused_nonce(message1, signature1, message2, signature2, params):
    p, q, g = params.p, params.q, params.g
    r1, s1 = Signature(*signature1)
    r2, s2 = Signature(*signature2)

    if r1 != r2:
        return RecoveryResult(False, reason="r values differ, the signatures do not share a nonce")

    h1 = digest_message(message1, q).value
    h2 = digest_message(message2, q).value
    if h1 == h2:
        raise NotRecoverable("H(m1) == H(m2) (mod q): same message or colliding digests")

    try:
        k = ((h1 - h2) * mod_inverse(s1 - s2, q)) % q
    except NotInvertible:
        raise NotRecoverable("s1 == s2 (mod q) for different digests") from None

    # a k that does not reproduce r means the pair was never signed under one nonce
    if mod_pow(g, k, p) % q != r1:
        return RecoveryResult(False, reason="recovered nonce does not reproduce r, the signatures are inconsistent")

    try:
        x = ((s1 * k - h1) * mod_inverse(r1, q)) % q
    except NotInvertible:
        raise NotRecoverable("r is not invertible modulo q") from None

    logger.info("recovered private key from a reused nonce")
    return RecoveryResult(True, private_key=x, nonce=k, reason="nonce reuse detected: shared r")


def find_reused_nonces(entries):
    """
    Group (message, signature) pairs by r. Returns a list of groups of two
    or more entries, each group presumably signed under one nonce.
    """
    by_r = defaultdict(list)
    for message, signature in entries:
        signature = Signature(*signature)
        by_r[signature.r].append((message, signature))
    return [group for group in by_r.values() if len(group) > 1]


def recover_from_entries(entries, params):
    """Try every pair in every reused-nonce group until one yields the key."""
    for group in find_reused_nonces(entries):
        for (m1, sig1), (m2, sig2) in combinations(group, 2):
            try:
                result = recover_key_from_reused_nonce(m1, sig1, m2, sig2, params)
            except NotRecoverable as exc:
                logger.debug("skipping pair %r / %r: %s", m1, m2, exc)
                continue
            if result.recovered:
                return result
    return RecoveryResult(False, reason="no two usable signatures share r")
