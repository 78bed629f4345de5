"""Felt hashing with blake2s.

Felts are hashed as concatenated 32-byte big-endian words. Two output
flavours are used by the verifier:
- hash_felts: full digest reduced into the field (channel and state hashes)
- commitment_hash: digest masked to its 160 least significant bits
  (vector commitments, matching the "masked160_lsb" commitment hashes)
"""

import hashlib
from typing import Iterable

from primitives.field import STARK_PRIME, felt_to_bytes_be

COMMITMENT_MASK = (1 << 160) - 1
DIGEST_BITS = 256
NONCE_BYTES = 8


def _digest(values: Iterable[int]) -> int:
    h = hashlib.blake2s()
    for v in values:
        h.update(felt_to_bytes_be(v))
    return int.from_bytes(h.digest(), "big")


def hash_felts(values: Iterable[int]) -> int:
    """Hash a felt sequence to a single felt."""
    return _digest(values) % STARK_PRIME


def commitment_hash(values: Iterable[int]) -> int:
    """Hash a felt sequence to a 160-bit commitment."""
    return _digest(values) & COMMITMENT_MASK


def proof_of_work_digest(seed: int, nonce: int) -> int:
    """Hash (seed, nonce) for the grinding check; nonce is a u64."""
    h = hashlib.blake2s()
    h.update(felt_to_bytes_be(seed))
    h.update(nonce.to_bytes(NONCE_BYTES, "big"))
    return int.from_bytes(h.digest(), "big")


def verify_proof_of_work(seed: int, nonce: int, n_bits: int) -> bool:
    """Check the grinding digest has n_bits leading zero bits."""
    if not 0 <= nonce < (1 << (8 * NONCE_BYTES)):
        return False
    return proof_of_work_digest(seed, nonce) >> (DIGEST_BITS - n_bits) == 0
