"""FRI verification state fragments.

A split verifier resumes each round from two fragments passed back in as
calldata:
- FriStateConstant: the round schedule fixed once the commitments are known
  (identical in every chunk)
- FriStateVariable: the round counter and the per-query (index, value) pairs
  being folded
"""

from dataclasses import dataclass

from calldata.flatten import flatten_section
from calldata.values import FlatSequence, Value
from primitives.reader import FeltReader


@dataclass
class FriStateConstant:
    """
    Immutable FRI round schedule.

    Attributes:
        n_layers: Number of FRI folding rounds
        commitments: Inner layer commitments, one per round
        eval_points: Folding challenges drawn from the channel, one per round
        step_sizes: log2 of each round's folding factor
        last_layer_coefficients_hash: Hash binding the last-layer polynomial
    """
    n_layers: int
    commitments: list[int]
    eval_points: list[int]
    step_sizes: list[int]
    last_layer_coefficients_hash: int

    def to_value(self) -> list[Value]:
        return [
            self.n_layers,
            list(self.commitments),
            list(self.eval_points),
            list(self.step_sizes),
            self.last_layer_coefficients_hash,
        ]

    def encode(self) -> FlatSequence:
        return flatten_section(self.to_value())

    @classmethod
    def decode(cls, reader: FeltReader) -> "FriStateConstant":
        return cls(
            n_layers=reader.read(),
            commitments=reader.read_span(),
            eval_points=reader.read_span(),
            step_sizes=reader.read_span(),
            last_layer_coefficients_hash=reader.read(),
        )


@dataclass
class FriStateVariable:
    """
    Per-round FRI state.

    Attributes:
        iter: Rounds completed so far
        queries: (index, value) per query; index shrinks by the step size
            each round, value is the folded evaluation at that index
    """
    iter: int
    queries: list[tuple[int, int]]

    def to_value(self) -> list[Value]:
        return [self.iter, [x for pair in self.queries for x in pair]]

    def encode(self) -> FlatSequence:
        return flatten_section(self.to_value())

    @classmethod
    def decode(cls, reader: FeltReader) -> "FriStateVariable":
        it = reader.read()
        flat = reader.read_span()
        if len(flat) % 2:
            raise ValueError(f"query state has odd length {len(flat)}")
        return cls(iter=it, queries=list(zip(flat[0::2], flat[1::2])))
