"""
Field and felt codec tests.

Covers decimal/hex parsing, canonical range checks, big-endian byte codecs,
Cairo short strings and polynomial evaluation over FF.
"""

import pytest

from primitives.field import (
    FF,
    STARK_PRIME,
    check_felt,
    decode_short_string,
    encode_short_string,
    evaluate_polynomial,
    felt_from_bytes_be,
    felt_to_bytes_be,
    felt_to_decimal,
    felt_to_hex,
    parse_felt,
)


class TestParseFelt:
    """Text to felt conversion."""

    @pytest.mark.parametrize("text,expected", [
        ("0", 0),
        ("42", 42),
        ("0x2a", 42),
        ("0X2A", 42),
        ("18446744073709551615", 2**64 - 1),
        ("18446744073709551616", 2**64),
        (hex(STARK_PRIME - 1), STARK_PRIME - 1),
    ])
    def test_valid(self, text, expected):
        assert parse_felt(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", "-1", "1.5", "0x", "12a", "0xzz"])
    def test_non_numeric_rejected(self, text):
        with pytest.raises(ValueError, match="invalid digit"):
            parse_felt(text)

    def test_out_of_field_rejected(self):
        with pytest.raises(ValueError, match="out of range"):
            parse_felt(str(STARK_PRIME))

    def test_more_than_32_bytes_rejected(self):
        with pytest.raises(ValueError, match="out of range"):
            parse_felt(hex(1 << 256))

    @pytest.mark.parametrize("value", [0, 1, 2**64 - 1, 2**64, 2**200 + 7, STARK_PRIME - 1])
    def test_hex_and_decimal_round_trip(self, value):
        assert parse_felt(felt_to_hex(value)) == value
        assert parse_felt(felt_to_decimal(value)) == value


class TestByteCodec:
    """Big-endian byte encoding."""

    def test_32_bytes(self):
        encoded = felt_to_bytes_be(1)
        assert len(encoded) == 32
        assert encoded[-1] == 1
        assert felt_from_bytes_be(encoded) == 1

    def test_short_input(self):
        assert felt_from_bytes_be(b"\x01\x00") == 256

    def test_check_felt_rejects_negative(self):
        with pytest.raises(ValueError):
            check_felt(-1)


class TestShortString:
    """Cairo short strings."""

    def test_layout_name(self):
        assert encode_short_string("recursive") == int.from_bytes(b"recursive", "big")
        assert decode_short_string(encode_short_string("recursive")) == "recursive"

    def test_too_long(self):
        with pytest.raises(ValueError):
            encode_short_string("x" * 32)

    def test_non_printable_falls_back_to_hex(self):
        assert decode_short_string(1) == "0x1"


class TestEvaluatePolynomial:
    """Horner evaluation over FF."""

    def test_small_values(self):
        # 1 + 2x + 3x^2 at x = 2
        assert evaluate_polynomial([1, 2, 3], 2) == 17

    def test_reduces_mod_p(self):
        assert evaluate_polynomial([STARK_PRIME - 1, 1], 1) == 0

    def test_matches_field_arithmetic(self):
        x = 2**200 + 3
        coeffs = [5, 2**240, 7]
        expected = FF(5) + FF(2**240) * FF(x) + FF(7) * FF(x) ** 2
        assert evaluate_polynomial(coeffs, x) == int(expected)

    def test_empty(self):
        assert evaluate_polynomial([], 5) == 0
