"""
Fiat-Shamir channel over blake2s felt hashing.

The channel absorbs proof elements and produces verifier randomness in a
deterministic, pseudorandom manner. Prover-side tooling and the replay
verifier must drive it in exactly the same order.
"""
from typing import List

from primitives.hashing import hash_felts, verify_proof_of_work


class Channel:
    """
    Hash-chain channel.

    Attributes:
        digest: Current channel state (one felt)
        counter: Number of values drawn since the last absorption
    """

    def __init__(self, seed: int):
        self.digest = seed
        self.counter = 0

    def put(self, values: List[int]) -> None:
        """Absorb values; resets the draw counter."""
        self.digest = hash_felts([self.digest, *values])
        self.counter = 0

    def get_field(self) -> int:
        """Draw a field element."""
        value = hash_felts([self.digest, self.counter])
        self.counter += 1
        return value

    def get_index(self, n_bits: int) -> int:
        """Draw an index in [0, 2^n_bits)."""
        return self.get_field() & ((1 << n_bits) - 1)

    def get_queries(self, n_queries: int, n_bits: int) -> List[int]:
        """Draw n_queries indices in [0, 2^n_bits), in draw order."""
        return [self.get_index(n_bits) for _ in range(n_queries)]

    def verify_pow(self, nonce: int, n_bits: int) -> bool:
        """Check the grinding nonce against the current state, then absorb it."""
        ok = verify_proof_of_work(self.digest, nonce, n_bits)
        self.put([nonce])
        return ok
