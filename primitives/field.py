"""STARK-252 prime field GF(p) and felt codecs.

Uses galois library for field arithmetic. FF is the field type; calldata
itself is carried as plain Python ints in [0, p).
"""

import re

import galois

# --- Field Construction ---

STARK_PRIME = 2**251 + 17 * 2**192 + 1

# 3 generates the multiplicative group; passing it skips galois' search.
FF = galois.GF(STARK_PRIME, primitive_element=3, verify=False)
"""Base field GF(p) - STARK-252 prime field."""

FELT_BYTES = 32
MAX_SHORT_STRING_LEN = 31

# Values up to this bound fit a machine word and are converted directly.
U64_BOUND = 1 << 64

_DECIMAL_RE = re.compile(r"[0-9]+")
_HEX_RE = re.compile(r"0[xX][0-9a-fA-F]+")


# --- Text Codecs ---

def parse_felt(text: str) -> int:
    """Parse an unsigned decimal or 0x-hex felt.

    Raises:
        ValueError: If text is not numeric or the value is not in [0, p).
    """
    text = text.strip()
    if _HEX_RE.fullmatch(text):
        value = int(text, 16)
    elif _DECIMAL_RE.fullmatch(text):
        value = int(text)
    else:
        raise ValueError(f"invalid digit found in string: {text!r}")

    if value >= U64_BOUND:
        return felt_from_bytes_be(value.to_bytes((value.bit_length() + 7) // 8, "big"))
    return check_felt(value)


def check_felt(value: int) -> int:
    """Return value unchanged if it is a canonical field element."""
    if not 0 <= value < STARK_PRIME:
        raise ValueError(f"number out of range: {value}")
    return value


def felt_to_hex(value: int) -> str:
    return hex(check_felt(value))


def felt_to_decimal(value: int) -> str:
    return str(check_felt(value))


# --- Byte Codecs ---

def felt_from_bytes_be(data: bytes) -> int:
    """Decode a big-endian byte string into a felt (no modular reduction)."""
    if len(data) > FELT_BYTES:
        raise ValueError(f"number out of range: {len(data)} bytes exceeds {FELT_BYTES}")
    return check_felt(int.from_bytes(data, "big"))


def felt_to_bytes_be(value: int) -> bytes:
    """Encode a felt as 32 big-endian bytes."""
    return check_felt(value).to_bytes(FELT_BYTES, "big")


# --- Short Strings ---
# Cairo short strings pack up to 31 ASCII characters into one felt.

def encode_short_string(text: str) -> int:
    if len(text) > MAX_SHORT_STRING_LEN:
        raise ValueError(f"short string longer than {MAX_SHORT_STRING_LEN} chars: {text!r}")
    return int.from_bytes(text.encode("ascii"), "big")


def decode_short_string(value: int) -> str:
    """Decode a short-string felt; non-printable content falls back to hex."""
    raw = value.to_bytes((value.bit_length() + 7) // 8, "big")
    try:
        text = raw.decode("ascii")
    except UnicodeDecodeError:
        return hex(value)
    return text if text.isprintable() else hex(value)


# --- Polynomial Evaluation ---

def evaluate_polynomial(coeffs: list[int], x: int) -> int:
    """Evaluate sum(coeffs[k] * x^k) over FF using Horner's rule."""
    point = FF(x)
    acc = FF(0)
    for c in reversed(coeffs):
        acc = acc * point + FF(c)
    return int(acc)
