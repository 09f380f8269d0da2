from ..attacks.edge_cases import (
    demonstrate_invalid_signatures, demonstrate_large_message, demonstrate_nonce_reuse,
)
from ..attacks.nonce_reuse import recover_key_from_reused_nonce as _recover
from ..dsa_ref.keys import KeyPair, SigningKey, VerifyingKey
from ..dsa_ref.keys import generate_key_pair as _generate_key_pair
from ..dsa_ref.marshal import parse_int, parse_parameters, parse_signature
from ..dsa_ref.params import generate_parameters as _generate_parameters
from ..dsa_ref.params import validate_parameters


def generate_parameters(config=None, rng=None):
    return _generate_parameters(config, rng)


def generate_key_pair(params, rng=None):
    return _generate_key_pair(params, rng)


def sign(message, params, private_key, nonce_mode=None, fixed_nonce=None, rng=None):
    """
    Sign with a private key given as int or numeric string. A fixed nonce
    may also be a string; it is parsed before any arithmetic happens.
    """
    x = parse_int(private_key, "private key")
    k = None if fixed_nonce is None else parse_int(fixed_nonce, "nonce")
    return SigningKey(params, x).sign(message, nonce_mode=nonce_mode, nonce=k, rng=rng)


def verify(message, signature, params, public_key):
    r, s = signature
    return VerifyingKey(params, parse_int(public_key, "public key")).verify(
        message, parse_signature(r, s))


def recover_key_from_reused_nonce(message1, signature1, message2, signature2, params):
    return _recover(message1, parse_signature(*signature1),
                    message2, parse_signature(*signature2), params)


class DSSSession:
    """
    Domain parameters and one key pair, generated once and then reused for
    every sign / verify / demonstration call, as the dashboard does.
    """
    def __init__(self, params, key_pair=None, rng=None):
        self.params = validate_parameters(params)
        if key_pair is None:
            key_pair = _generate_key_pair(params, rng)
        self.key_pair = key_pair
        self.sk = SigningKey.from_key_pair(params, key_pair)
        self.vk = self.sk.verifying_key

    @classmethod
    def generate(cls, config=None, rng=None):
        params = _generate_parameters(config, rng)
        return cls(params, _generate_key_pair(params, rng))

    @classmethod
    def from_private_key(cls, params, private_key):
        return cls(params, KeyPair.from_private_key(params, parse_int(private_key, "private key")))

    @classmethod
    def from_values(cls, p, q, g, private_key=None, rng=None):
        """Session over user-entered (p, q, g); a fresh key pair when x is omitted."""
        params = parse_parameters(p, q, g)
        if private_key is None:
            return cls(params, rng=rng)
        return cls.from_private_key(validate_parameters(params), private_key)

    def sign(self, message, nonce_mode=None, nonce=None, rng=None):
        k = None if nonce is None else parse_int(nonce, "nonce")
        return self.sk.sign(message, nonce_mode=nonce_mode, nonce=k, rng=rng)

    def verify(self, message, signature):
        return self.vk.verify(message, parse_signature(*signature))

    def demonstrate_nonce_reuse(self, message1, message2, nonce):
        return demonstrate_nonce_reuse(
            message1, message2, parse_int(nonce, "nonce"), self.params, self.key_pair)

    def demonstrate_invalid_signatures(self, message, rng=None):
        return demonstrate_invalid_signatures(message, self.params, self.key_pair, rng)

    def demonstrate_large_message(self, rng=None):
        return demonstrate_large_message(self.params, self.key_pair, rng=rng)
