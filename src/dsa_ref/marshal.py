"""
String <-> integer marshalling for values crossing the UI boundary.

Accepted input is a non-negative decimal ("12345") or 0x-prefixed hex
("0x3039") string, or an int. Anything else raises InvalidInput before it
reaches the arithmetic layer.
"""
import re

from .errors import InvalidInput
from .models import Signature
from .params import DomainParameters

_DECIMAL = re.compile(r"[0-9]+")
_HEX = re.compile(r"0[xX][0-9a-fA-F]+")


def parse_int(value, name="value"):
    if isinstance(value, bool):
        raise InvalidInput(f"{name} must be an integer, not a boolean")
    if isinstance(value, int):
        if value < 0:
            raise InvalidInput(f"{name} must not be negative")
        return value
    if not isinstance(value, str):
        raise InvalidInput(f"{name} must be an integer or a numeric string")

    text = value.strip().replace("_", "")
    if text.startswith("-"):
        raise InvalidInput(f"{name} must not be negative")
    if _DECIMAL.fullmatch(text):
        return int(text)
    if _HEX.fullmatch(text):
        return int(text, 16)
    if not text:
        raise InvalidInput(f"{name} is empty")
    raise InvalidInput(f"{name} is not a decimal or 0x-hex number: {value!r}")


def parse_signature(r, s):
    return Signature(parse_int(r, "r"), parse_int(s, "s"))


def parse_parameters(p, q, g):
    return DomainParameters(parse_int(p, "p"), parse_int(q, "q"), parse_int(g, "g"))


def describe_int(value):
    """Decimal, hex and bit length of a value, for display."""
    return {"decimal": str(value), "hex": hex(value), "bits": value.bit_length()}
