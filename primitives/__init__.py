"""Primitives - Field, hashing and calldata-cursor building blocks."""

from primitives.channel import Channel
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
from primitives.hashing import (
    commitment_hash,
    hash_felts,
    proof_of_work_digest,
    verify_proof_of_work,
)
from primitives.reader import FeltReader, ReaderExhausted

__all__ = [
    # Field
    "FF",
    "STARK_PRIME",
    "check_felt",
    "parse_felt",
    "felt_to_hex",
    "felt_to_decimal",
    "felt_from_bytes_be",
    "felt_to_bytes_be",
    "encode_short_string",
    "decode_short_string",
    "evaluate_polynomial",
    # Hashing
    "hash_felts",
    "commitment_hash",
    "proof_of_work_digest",
    "verify_proof_of_work",
    # Channel
    "Channel",
    # Reader
    "FeltReader",
    "ReaderExhausted",
]
